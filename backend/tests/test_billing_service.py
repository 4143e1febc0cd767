"""
Tests for bill arithmetic and the BillingService.
"""

import pytest

from mooprompt_api.models import Order, OrderItem, Promotion, Table
from mooprompt_api.services.domain.billing_calculator import (
    BUFFET_INCLUDED_SUFFIX,
    ChargeTerms,
    OrderedLine,
    PackageTerms,
    PromotionTerms,
    calculate_bill,
)
from mooprompt_api.services.domain.billing_service import BillingService
from shared.config.constants import (
    BillingItemType,
    ChargeType,
    DiscountType,
    ItemType,
    OrderItemStatus,
    OrderStatus,
    PromotionType,
    SessionStatus,
    TableStatus,
)
from shared.infrastructure.events import BILLING_CLOSED
from shared.utils.exceptions import ValidationError
from shared.utils.pos_schemas import BillingCloseRequest, BillingRequest

PACKAGE = PackageTerms(name="Buffet 299", price_per_person=299.0)


class TestCalculateBill:
    """Pure arithmetic, no database."""

    def test_buffet_included_lines_are_free(self):
        bill = calculate_bill(
            [
                OrderedLine(name="Pork belly", qty=3, price=129.0, item_type=ItemType.BUFFET_INCLUDED),
                OrderedLine(name="Wagyu", qty=1, price=390.0, item_type=ItemType.A_LA_CARTE),
            ],
            people_count=2,
            package=PACKAGE,
        )
        assert bill.subtotal == 390.0 + 598.0
        assert bill.lines[0].name == "Pork belly" + BUFFET_INCLUDED_SUFFIX
        assert bill.lines[0].total_price == 0.0
        assert bill.lines[-1].name == "Buffet 299"
        assert bill.lines[-1].qty == 2

    def test_extra_charges_per_person_and_per_session(self):
        bill = calculate_bill(
            [],
            people_count=3,
            charges=[
                ChargeTerms(name="Water", price=20.0, charge_type=ChargeType.PER_PERSON),
                ChargeTerms(name="Corkage", price=100.0, charge_type=ChargeType.PER_SESSION),
            ],
        )
        assert bill.extra_charge == 160.0
        assert {line.type for line in bill.lines} == {BillingItemType.EXTRA}

    def test_vat_on_amount_after_discount(self):
        bill = calculate_bill(
            [OrderedLine(name="Wagyu", qty=1, price=1000.0, item_type=ItemType.A_LA_CARTE)],
            people_count=1,
            discount_type=DiscountType.PERCENT,
            discount_value=10,
            vat_rate=7,
        )
        assert bill.discount == 100.0
        assert bill.vat == 63.0
        assert bill.grand_total == 963.0

    def test_discount_is_capped(self):
        bill = calculate_bill(
            [OrderedLine(name="Tea", qty=1, price=45.0, item_type=ItemType.A_LA_CARTE)],
            people_count=1,
            discount_type=DiscountType.FIXED,
            discount_value=500,
        )
        assert bill.discount == 45.0
        assert bill.grand_total == 0.0

    def test_promotion_wins_over_manual_discount(self):
        bill = calculate_bill(
            [OrderedLine(name="Wagyu", qty=1, price=1000.0, item_type=ItemType.A_LA_CARTE)],
            people_count=1,
            promotion=PromotionTerms(id=7, type=PromotionType.FIXED, value=50),
            discount_type=DiscountType.PERCENT,
            discount_value=50,
        )
        assert bill.discount == 50.0
        assert bill.discount_type == DiscountType.PROMOTION
        assert bill.promotion_id == 7

    def test_come_four_pay_three(self):
        bill = calculate_bill(
            [],
            people_count=4,
            package=PACKAGE,
            promotion=PromotionTerms(
                id=1, type=PromotionType.PER_PERSON, value=0, condition={"buy": 4, "pay": 3}
            ),
        )
        assert bill.subtotal == 1196.0
        assert bill.discount == 299.0

    @pytest.mark.parametrize("condition", [{"buy": 4, "pay": 0}, {"buy": 4}, {"pay": 3}])
    def test_come_pay_needs_both_counts(self, condition):
        bill = calculate_bill(
            [],
            people_count=4,
            package=PACKAGE,
            promotion=PromotionTerms(id=1, type=PromotionType.PER_PERSON, value=0, condition=condition),
        )
        assert bill.discount == 0.0
        assert bill.grand_total == 1196.0

    @pytest.mark.parametrize(
        "value,people,expected",
        [
            (10, 4, 119.6),   # up to 100 is a percentage
            (150, 4, 150.0),  # above 100 is baht
            (10, 3, 0.0),     # below the threshold
        ],
    )
    def test_min_people(self, value, people, expected):
        bill = calculate_bill(
            [],
            people_count=people,
            package=PackageTerms(name="Buffet", price_per_person=299.0),
            promotion=PromotionTerms(
                id=1, type=PromotionType.MIN_PEOPLE, value=value, condition={"min_people": 4}
            ),
        )
        assert bill.discount == expected

    def test_min_amount(self):
        promo = PromotionTerms(id=1, type=PromotionType.MIN_AMOUNT, value=10, condition={"min_amount": 500})
        under = calculate_bill(
            [OrderedLine(name="Tea", qty=10, price=45.0, item_type=ItemType.A_LA_CARTE)],
            people_count=1,
            promotion=promo,
        )
        over = calculate_bill(
            [OrderedLine(name="Tea", qty=20, price=45.0, item_type=ItemType.A_LA_CARTE)],
            people_count=1,
            promotion=promo,
        )
        assert under.discount == 0.0
        assert over.discount == 90.0


def _order_lines(db_session, session, *lines):
    order = Order(table_session_id=session.id, status=OrderStatus.OPEN)
    db_session.add(order)
    db_session.flush()
    for menu_item, qty, item_type in lines:
        db_session.add(
            OrderItem(
                order_id=order.id,
                menu_item_id=menu_item.id,
                qty=qty,
                item_type=item_type,
                status=OrderItemStatus.WAITING,
            )
        )
    db_session.commit()
    return order


class TestBillingService:
    def test_preview_buffet_session(self, db_session, buffet_session, seed_menu, seed_extra_charges):
        water, corkage = seed_extra_charges
        _order_lines(
            db_session,
            buffet_session,
            (seed_menu["pork"], 2, ItemType.BUFFET_INCLUDED),
            (seed_menu["wagyu"], 1, ItemType.A_LA_CARTE),
        )

        preview = BillingService(db_session).preview(
            BillingRequest(
                session_id=buffet_session.id,
                extra_charge_ids=[water.id, corkage.id],
                vat_rate=7,
            )
        )
        assert preview.subtotal == 988.0
        assert preview.extra_charge == 140.0
        assert preview.vat == 78.96
        assert preview.grand_total == 1206.96

    def test_inactive_promotion_is_ignored(self, db_session, buffet_session):
        promo = Promotion(name="Old", type=PromotionType.FIXED, value=100, active=False)
        db_session.add(promo)
        db_session.commit()

        preview = BillingService(db_session).preview(
            BillingRequest(session_id=buffet_session.id, promotion_id=promo.id)
        )
        assert preview.discount == 0.0

    def test_cash_must_cover_total(self, db_session, buffet_session):
        with pytest.raises(ValidationError):
            BillingService(db_session).close(
                BillingCloseRequest(
                    session_id=buffet_session.id,
                    payment_method="CASH",
                    received_amount=100,
                ),
                None,
            )

    def test_close_freezes_bill_and_frees_table(self, db_session, buffet_session, seed_menu):
        order = _order_lines(db_session, buffet_session, (seed_menu["tea"], 2, ItemType.A_LA_CARTE))

        billing = BillingService(db_session).close(
            BillingCloseRequest(
                session_id=buffet_session.id,
                payment_method="CASH",
                received_amount=1000,
            ),
            None,
        )
        db_session.commit()

        assert billing.grand_total == 688.0
        assert billing.change == 312.0
        assert [item.name for item in billing.items] == ["Thai tea", "Buffet 299"]

        db_session.expire_all()
        assert db_session.get(Order, order.id).status == OrderStatus.SERVED
        assert {i.status for i in db_session.get(Order, order.id).items} == {OrderItemStatus.SERVED}
        assert buffet_session.status == SessionStatus.CLOSED
        assert db_session.get(Table, buffet_session.table_id).status == TableStatus.AVAILABLE

    def test_closed_session_cannot_be_billed_twice(self, db_session, buffet_session):
        service = BillingService(db_session)
        request = BillingCloseRequest(session_id=buffet_session.id, payment_method="QR")
        service.close(request, None)
        db_session.commit()
        with pytest.raises(ValidationError):
            service.close(request, None)


class TestBillingEndpoints:
    def test_close_and_list(self, client, cashier_headers, buffet_session, events):
        response = client.post(
            "/api/billing/close",
            json={"session_id": buffet_session.id, "payment_method": "QR", "vat_rate": 7},
            headers=cashier_headers,
        )
        assert response.status_code == 201
        billing = response.json()["billing"]
        assert billing["table_name"] == "A1"
        assert billing["grand_total"] == 639.86
        assert billing["received_amount"] is None

        closed = events.of_type(BILLING_CLOSED)
        assert len(closed) == 1
        assert closed[0].data["billing_id"] == billing["id"]

        today = client.get("/api/billing", headers=cashier_headers).json()
        assert [b["id"] for b in today] == [billing["id"]]

        one = client.get(f"/api/billing/{billing['id']}", headers=cashier_headers)
        assert one.status_code == 200

    def test_insufficient_cash_message(self, client, cashier_headers, buffet_session):
        response = client.post(
            "/api/billing/close",
            json={"session_id": buffet_session.id, "payment_method": "CASH", "received_amount": 10},
            headers={**cashier_headers, "Accept-Language": "en"},
        )
        assert response.status_code == 400
        assert response.json()["detail"] == "Amount received is less than the total (598.00 THB)"

    def test_other_day_is_empty(self, client, cashier_headers, buffet_session):
        client.post(
            "/api/billing/close",
            json={"session_id": buffet_session.id, "payment_method": "QR"},
            headers=cashier_headers,
        )
        response = client.get("/api/billing", params={"date": "2000-01-01"}, headers=cashier_headers)
        assert response.json() == []

    def test_kitchen_cannot_bill(self, client, kitchen_headers, buffet_session):
        response = client.post(
            "/api/billing/preview",
            json={"session_id": buffet_session.id},
            headers=kitchen_headers,
        )
        assert response.status_code == 403
