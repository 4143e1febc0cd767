"""
Property-based tests with Hypothesis.

Bill arithmetic, the cart and deadline badges are pure functions, so
their invariants are checked over generated inputs.
"""

from datetime import datetime, timedelta, timezone

from hypothesis import given, settings, strategies as st

from mooprompt_api.services.domain.billing_calculator import (
    ChargeTerms,
    OrderedLine,
    PackageTerms,
    PromotionTerms,
    calculate_bill,
)
from mooprompt_api.services.domain.cart import Cart, CartLine
from mooprompt_api.services.flow.deadline import deadline_info
from shared.config.constants import ChargeType, DiscountType, ItemType, PromotionType

prices = st.floats(min_value=0, max_value=5_000, allow_nan=False, allow_infinity=False).map(
    lambda p: round(p, 2)
)

ordered_lines = st.builds(
    OrderedLine,
    name=st.sampled_from(["Pork belly", "Wagyu", "Thai tea", "Squid"]),
    qty=st.integers(min_value=1, max_value=20),
    price=prices,
    item_type=st.sampled_from([ItemType.BUFFET_INCLUDED, ItemType.A_LA_CARTE]),
)

charges = st.builds(
    ChargeTerms,
    name=st.just("Charge"),
    price=prices,
    charge_type=st.sampled_from([ChargeType.PER_PERSON, ChargeType.PER_SESSION]),
)

promotions = st.one_of(
    st.none(),
    st.builds(PromotionTerms, id=st.just(1), type=st.just(PromotionType.PERCENT), value=st.floats(1, 100)),
    st.builds(PromotionTerms, id=st.just(1), type=st.just(PromotionType.FIXED), value=st.floats(1, 10_000)),
    st.builds(
        PromotionTerms,
        id=st.just(1),
        type=st.just(PromotionType.PER_PERSON),
        value=st.just(0.0),
        condition=st.integers(min_value=2, max_value=6).map(lambda buy: {"buy": buy, "pay": buy - 1}),
    ),
)


class TestBillProperties:
    @given(
        ordered=st.lists(ordered_lines, max_size=8),
        people=st.integers(min_value=1, max_value=20),
        with_package=st.booleans(),
        extra=st.lists(charges, max_size=3),
        promotion=promotions,
        manual=st.one_of(st.none(), st.floats(min_value=0, max_value=20_000)),
        vat_rate=st.sampled_from([0, 7, 10]),
    )
    @settings(max_examples=200)
    def test_totals_are_consistent(self, ordered, people, with_package, extra, promotion, manual, vat_rate):
        package = PackageTerms(name="Buffet", price_per_person=299.0) if with_package else None
        bill = calculate_bill(
            ordered,
            people_count=people,
            package=package,
            charges=extra,
            promotion=promotion,
            discount_type=DiscountType.FIXED if manual is not None else None,
            discount_value=manual,
            vat_rate=vat_rate,
        )

        assert bill.grand_total >= 0
        assert 0 <= bill.discount <= bill.subtotal + bill.extra_charge + 0.01
        expected = (bill.subtotal + bill.extra_charge - bill.discount) * (1 + vat_rate / 100)
        assert abs(bill.grand_total - expected) <= 0.05
        assert bill.grand_total == round(bill.grand_total, 2)

        if promotion is not None:
            assert bill.discount_type == DiscountType.PROMOTION

    @given(ordered=st.lists(ordered_lines, min_size=1, max_size=8))
    def test_buffet_lines_never_cost(self, ordered):
        bill = calculate_bill(ordered, people_count=2)
        for line, source in zip(bill.lines, ordered):
            if source.item_type == ItemType.BUFFET_INCLUDED:
                assert line.total_price == 0.0
        paid = sum(o.price * o.qty for o in ordered if o.item_type == ItemType.A_LA_CARTE)
        assert abs(bill.subtotal - paid) <= 0.01


class TestCartProperties:
    @given(
        quantities=st.lists(
            st.tuples(st.integers(min_value=1, max_value=3), st.integers(min_value=1, max_value=5)),
            min_size=1,
            max_size=15,
        )
    )
    def test_merging_keeps_counts(self, quantities):
        cart = Cart()
        for menu_item_id, qty in quantities:
            cart.add(CartLine(menu_item_id=menu_item_id, name=f"Dish {menu_item_id}", price=10.0, qty=qty))

        assert cart.item_count == sum(qty for _, qty in quantities)
        assert len(cart.lines) == len({menu_item_id for menu_item_id, _ in quantities})
        assert cart.total == cart.item_count * 10.0


NOW = datetime(2024, 1, 1, tzinfo=timezone.utc)
RANK = {"normal": 0, "warning": 1, "urgent": 2}


class TestDeadlineProperties:
    @given(
        a=st.integers(min_value=-30 * 24 * 60, max_value=30 * 24 * 60),
        b=st.integers(min_value=-30 * 24 * 60, max_value=30 * 24 * 60),
    )
    def test_closer_deadlines_are_never_less_urgent(self, a, b):
        sooner, later = sorted((a, b))
        first = deadline_info(NOW + timedelta(minutes=sooner), NOW)
        second = deadline_info(NOW + timedelta(minutes=later), NOW)
        assert RANK[first.status] >= RANK[second.status]
        assert first.is_overdue == (sooner < 0)
