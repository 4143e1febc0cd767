"""
Bill arithmetic.

Pure functions over plain values so the rules can be tested without a
database:

    subtotal          = menu lines (buffet-included lines at 0) + package x people
    extra_charge      = PER_PERSON charges x people + PER_SESSION charges
    discount          = promotion or manual discount, capped at subtotal + extra_charge
    amount_before_vat = subtotal + extra_charge - discount
    vat               = amount_before_vat x vat_rate / 100
    grand_total       = amount_before_vat + vat
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

from shared.config.constants import (
    BillingItemType,
    ChargeType,
    DiscountType,
    ItemType,
    PromotionType,
)

BUFFET_INCLUDED_SUFFIX = " (รวมในบุฟเฟ่ต์)"


def money(value: float) -> float:
    return round(value + 0.0, 2)


@dataclass
class BillLine:
    name: str
    qty: int
    unit_price: float
    total_price: float
    type: str = BillingItemType.MENU


@dataclass
class Bill:
    subtotal: float = 0.0
    extra_charge: float = 0.0
    discount: float = 0.0
    vat: float = 0.0
    vat_rate: float = 0.0
    grand_total: float = 0.0
    discount_type: Optional[str] = None
    discount_value: Optional[float] = None
    promotion_id: Optional[int] = None
    lines: list[BillLine] = field(default_factory=list)


@dataclass
class OrderedLine:
    name: str
    qty: int
    price: float
    item_type: str


@dataclass
class PackageTerms:
    name: str
    price_per_person: float


@dataclass
class ChargeTerms:
    name: str
    price: float
    charge_type: str


@dataclass
class PromotionTerms:
    id: int
    type: str
    value: float
    condition: dict[str, Any] = field(default_factory=dict)


def _percent_or_fixed(base: float, value: float) -> float:
    """Threshold promotions: a value up to 100 is a percentage, above it baht."""
    if value <= 100:
        return base * value / 100
    return value


def promotion_discount(
    promotion: PromotionTerms,
    subtotal: float,
    people_count: int,
    package: Optional[PackageTerms],
) -> float:
    condition = promotion.condition or {}
    if promotion.type == PromotionType.PERCENT:
        return subtotal * promotion.value / 100
    if promotion.type == PromotionType.FIXED:
        return promotion.value
    if promotion.type == PromotionType.PER_PERSON:
        # "come buy, pay pay": the difference eats free at package price
        buy, pay = condition.get("buy"), condition.get("pay")
        if package is None or not buy or not pay:
            return 0.0
        return package.price_per_person * max(0, buy - pay)
    if promotion.type == PromotionType.MIN_PEOPLE:
        min_people = condition.get("min_people")
        if min_people and people_count >= min_people:
            return _percent_or_fixed(subtotal, promotion.value)
        return 0.0
    if promotion.type == PromotionType.MIN_AMOUNT:
        min_amount = condition.get("min_amount")
        if min_amount and subtotal >= min_amount:
            return _percent_or_fixed(subtotal, promotion.value)
        return 0.0
    return 0.0


def calculate_bill(
    ordered: list[OrderedLine],
    people_count: int,
    package: Optional[PackageTerms] = None,
    charges: Optional[list[ChargeTerms]] = None,
    promotion: Optional[PromotionTerms] = None,
    discount_type: Optional[str] = None,
    discount_value: Optional[float] = None,
    vat_rate: float = 0.0,
) -> Bill:
    """
    Price a session.

    A promotion, when given, wins over a manual discount. Manual
    discounts are PERCENT of the subtotal or a FIXED amount.
    """
    bill = Bill(vat_rate=vat_rate or 0.0)

    for line in ordered:
        included = line.item_type == ItemType.BUFFET_INCLUDED
        unit_price = 0.0 if included else line.price
        total = unit_price * line.qty
        bill.subtotal += total
        bill.lines.append(
            BillLine(
                name=line.name + (BUFFET_INCLUDED_SUFFIX if included else ""),
                qty=line.qty,
                unit_price=money(unit_price),
                total_price=money(total),
            )
        )

    if package is not None:
        total = package.price_per_person * people_count
        bill.subtotal += total
        bill.lines.append(
            BillLine(
                name=package.name,
                qty=people_count,
                unit_price=money(package.price_per_person),
                total_price=money(total),
            )
        )

    for charge in charges or []:
        per_person = charge.charge_type == ChargeType.PER_PERSON
        qty = people_count if per_person else 1
        total = charge.price * qty
        bill.extra_charge += total
        bill.lines.append(
            BillLine(
                name=charge.name,
                qty=qty,
                unit_price=money(charge.price),
                total_price=money(total),
                type=BillingItemType.EXTRA,
            )
        )

    discount = 0.0
    if promotion is not None:
        discount = promotion_discount(promotion, bill.subtotal, people_count, package)
        bill.discount_type = DiscountType.PROMOTION
        bill.discount_value = promotion.value
        bill.promotion_id = promotion.id
    elif discount_type in (DiscountType.PERCENT, DiscountType.FIXED) and discount_value is not None:
        if discount_type == DiscountType.PERCENT:
            discount = bill.subtotal * discount_value / 100
        else:
            discount = discount_value
        bill.discount_type = discount_type
        bill.discount_value = discount_value

    bill.discount = max(0.0, min(discount, bill.subtotal + bill.extra_charge))

    amount_before_vat = bill.subtotal + bill.extra_charge - bill.discount
    bill.vat = amount_before_vat * bill.vat_rate / 100
    bill.grand_total = amount_before_vat + bill.vat

    bill.subtotal = money(bill.subtotal)
    bill.extra_charge = money(bill.extra_charge)
    bill.discount = money(bill.discount)
    bill.vat = money(bill.vat)
    bill.grand_total = money(bill.grand_total)
    return bill
