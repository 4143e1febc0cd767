"""
Billing Service.

Prices a session with billing_calculator, and on close freezes the
result into a BillingSummary, serves every order and frees the table.
"""

from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone

from sqlalchemy import select, update
from sqlalchemy.orm import Session, selectinload

from mooprompt_api.models import (
    BillingItem,
    BillingSummary,
    ExtraCharge,
    Order,
    OrderItem,
    Promotion,
    TableSession,
    utcnow,
)
from mooprompt_api.services.base_service import Actor, BaseService
from mooprompt_api.services.domain.billing_calculator import (
    Bill,
    ChargeTerms,
    OrderedLine,
    PackageTerms,
    PromotionTerms,
    calculate_bill,
)
from shared.config.constants import (
    OrderItemStatus,
    OrderStatus,
    PaymentMethod,
    SessionStatus,
    TableStatus,
)
from shared.config.logging import billing_logger
from shared.utils.exceptions import NotFoundError, ValidationError
from shared.utils.pos_schemas import (
    BillingCloseRequest,
    BillingLine,
    BillingOutput,
    BillingPreviewOutput,
    BillingRequest,
)


def preview_output(bill: Bill) -> BillingPreviewOutput:
    return BillingPreviewOutput(
        subtotal=bill.subtotal,
        extra_charge=bill.extra_charge,
        discount=bill.discount,
        vat=bill.vat,
        vat_rate=bill.vat_rate,
        grand_total=bill.grand_total,
        lines=[BillingLine(**vars(line)) for line in bill.lines],
    )


def billing_output(billing: BillingSummary) -> BillingOutput:
    return BillingOutput(
        id=billing.id,
        table_session_id=billing.table_session_id,
        table_name=billing.table_session.table.name,
        subtotal=billing.subtotal,
        extra_charge=billing.extra_charge,
        discount=billing.discount,
        vat=billing.vat,
        vat_rate=billing.vat_rate,
        grand_total=billing.grand_total,
        payment_method=billing.payment_method,
        received_amount=billing.received_amount,
        change=billing.change,
        discount_type=billing.discount_type,
        discount_value=billing.discount_value,
        promotion_id=billing.promotion_id,
        created_at=billing.created_at,
        items=[
            BillingLine(
                name=item.name,
                qty=item.qty,
                unit_price=item.unit_price,
                total_price=item.total_price,
                type=item.type,
            )
            for item in billing.items
        ],
    )


_BILLING_LOAD = [
    selectinload(BillingSummary.items),
    selectinload(BillingSummary.table_session).selectinload(TableSession.table),
]


class BillingService(BaseService[BillingSummary]):
    """Service for previewing and closing bills."""

    def __init__(self, db: Session):
        super().__init__(db, BillingSummary)

    def _billable_session(self, session_id: int) -> TableSession:
        session = self._db.scalar(
            select(TableSession)
            .where(TableSession.id == session_id, TableSession.is_active.is_(True))
            .options(
                selectinload(TableSession.table),
                selectinload(TableSession.package),
                selectinload(TableSession.orders)
                .selectinload(Order.items)
                .selectinload(OrderItem.menu_item),
            )
        )
        if session is None:
            raise NotFoundError("session", session_id)
        if session.status != SessionStatus.ACTIVE:
            raise ValidationError("billing.session_not_active", session_id=session_id)
        return session

    def _price(self, session: TableSession, data: BillingRequest) -> Bill:
        ordered = [
            OrderedLine(
                name=item.menu_item.name,
                qty=item.qty,
                price=item.menu_item.price,
                item_type=item.item_type,
            )
            for order in session.orders
            if order.status == OrderStatus.OPEN and order.is_active
            for item in order.items
            if item.is_active
        ]

        package = None
        if session.package is not None:
            package = PackageTerms(
                name=session.package.name,
                price_per_person=session.package.price_per_person,
            )

        charge_ids = data.extra_charge_ids
        if charge_ids is None:
            charge_ids = session.extra_charge_ids or []
        charges = []
        if charge_ids:
            rows = self._db.scalars(
                select(ExtraCharge)
                .where(
                    ExtraCharge.id.in_(charge_ids),
                    ExtraCharge.active.is_(True),
                    ExtraCharge.is_active.is_(True),
                )
                .order_by(ExtraCharge.id)
            ).all()
            charges = [ChargeTerms(name=c.name, price=c.price, charge_type=c.charge_type) for c in rows]

        promotion = None
        if data.promotion_id is not None:
            row = self._db.scalar(
                select(Promotion).where(
                    Promotion.id == data.promotion_id,
                    Promotion.active.is_(True),
                    Promotion.is_active.is_(True),
                )
            )
            if row is not None:
                promotion = PromotionTerms(
                    id=row.id, type=row.type, value=row.value, condition=row.condition or {}
                )

        return calculate_bill(
            ordered,
            people_count=session.people_count,
            package=package,
            charges=charges,
            promotion=promotion,
            discount_type=data.discount_type,
            discount_value=data.discount_value,
            vat_rate=data.vat_rate,
        )

    def preview(self, data: BillingRequest) -> BillingPreviewOutput:
        session = self._billable_session(data.session_id)
        return preview_output(self._price(session, data))

    def close(self, data: BillingCloseRequest, actor: Actor) -> BillingSummary:
        session = self._billable_session(data.session_id)
        bill = self._price(session, data)

        received = None
        change = None
        if data.payment_method == PaymentMethod.CASH:
            if data.received_amount is None or data.received_amount < bill.grand_total:
                raise ValidationError(
                    "billing.insufficient_payment",
                    grand_total=f"{bill.grand_total:.2f}",
                )
            received = round(data.received_amount, 2)
            change = round(received - bill.grand_total, 2)

        billing = BillingSummary(
            table_session_id=session.id,
            subtotal=bill.subtotal,
            extra_charge=bill.extra_charge,
            discount=bill.discount,
            vat=bill.vat,
            vat_rate=bill.vat_rate,
            grand_total=bill.grand_total,
            payment_method=data.payment_method,
            received_amount=received,
            change=change,
            discount_type=bill.discount_type,
            discount_value=bill.discount_value,
            promotion_id=bill.promotion_id,
            extra_charge_ids=data.extra_charge_ids if data.extra_charge_ids is not None else session.extra_charge_ids,
        )
        self._stamp_created(billing, actor)
        self._repo.add(billing)
        for line in bill.lines:
            self._db.add(BillingItem(billing_id=billing.id, **vars(line)))

        open_order_ids = [o.id for o in session.orders if o.status == OrderStatus.OPEN]
        if open_order_ids:
            self._db.execute(
                update(Order)
                .where(Order.id.in_(open_order_ids))
                .values(status=OrderStatus.SERVED, updated_at=utcnow())
            )
        self._db.execute(
            update(OrderItem)
            .where(OrderItem.order_id.in_([o.id for o in session.orders]))
            .values(status=OrderItemStatus.SERVED, updated_at=utcnow())
        )

        session.status = SessionStatus.CLOSED
        session.end_time = utcnow()
        self._stamp_updated(session, actor)
        session.table.status = TableStatus.AVAILABLE
        self._stamp_updated(session.table, actor)
        self._db.flush()

        billing_logger.info(
            "Bill closed",
            billing_id=billing.id,
            session_id=session.id,
            grand_total=bill.grand_total,
            payment_method=data.payment_method,
        )
        return self.get(billing.id)

    def get(self, billing_id: int) -> BillingSummary:
        return self._repo.get_or_404(billing_id, "billing", options=_BILLING_LOAD)

    def list_for_day(self, day: date | None = None) -> list[BillingSummary]:
        """Bills closed on a UTC calendar day (today when omitted), newest first."""
        day = day or utcnow().date()
        start = datetime.combine(day, time.min, tzinfo=timezone.utc)
        end = start + timedelta(days=1)
        return list(
            self._repo.find_all(
                filters=[BillingSummary.created_at >= start, BillingSummary.created_at < end],
                options=_BILLING_LOAD,
                order_by=(BillingSummary.created_at.desc(), BillingSummary.id.desc()),
            )
        )
