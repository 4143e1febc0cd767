"""
Order Service.

Customers submit orders from their table; each line then travels
through the kitchen on its own: WAITING -> COOKING -> DONE -> SERVED.
"""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from mooprompt_api.models import MenuItem, Order, OrderItem, TableSession
from mooprompt_api.services.base_service import Actor, BaseService
from mooprompt_api.services.domain.cart import Cart, CartLine, resolve_item_type
from mooprompt_api.services.domain.session_service import SessionService
from shared.config.constants import (
    OrderItemStatus,
    OrderStatus,
    validate_order_item_transition,
)
from shared.config.logging import kitchen_logger
from shared.utils.exceptions import InvalidTransitionError, NotFoundError, ValidationError
from shared.utils.pos_schemas import (
    CartLineInput,
    CartLineOutput,
    CartQuoteOutput,
    OrderCreate,
    OrderItemOutput,
    OrderOutput,
    RunnerItemOutput,
)

_ORDER_LOAD = [
    selectinload(Order.items).selectinload(OrderItem.menu_item),
    selectinload(Order.table_session).selectinload(TableSession.table),
]


def unit_price(item: OrderItem) -> float:
    return CartLine(
        menu_item_id=item.menu_item_id,
        name=item.menu_item.name,
        price=item.menu_item.price,
        qty=item.qty,
        item_type=item.item_type,
    ).unit_price


def order_item_output(item: OrderItem) -> OrderItemOutput:
    return OrderItemOutput(
        id=item.id,
        order_id=item.order_id,
        menu_item_id=item.menu_item_id,
        name=item.menu_item.name,
        qty=item.qty,
        note=item.note,
        item_type=item.item_type,
        status=item.status,
        unit_price=unit_price(item),
    )


def order_output(order: Order, statuses: list[str] | None = None) -> OrderOutput:
    items = [i for i in order.items if i.is_active and (statuses is None or i.status in statuses)]
    return OrderOutput(
        id=order.id,
        table_session_id=order.table_session_id,
        table_name=order.table_session.table.name,
        status=order.status,
        note=order.note,
        created_at=order.created_at,
        items=[order_item_output(i) for i in items],
    )


class OrderService(BaseService[Order]):
    """Service for customer orders and kitchen progress."""

    def __init__(self, db: Session):
        super().__init__(db, Order)
        self._sessions = SessionService(db)

    def _menu_items(self, lines: list[CartLineInput]) -> dict[int, MenuItem]:
        ids = {line.menu_item_id for line in lines}
        items = self._db.scalars(
            select(MenuItem).where(MenuItem.id.in_(ids), MenuItem.is_active.is_(True))
        ).all()
        found = {item.id: item for item in items}
        for menu_item_id in ids:
            if menu_item_id not in found:
                raise NotFoundError("menu_item", menu_item_id)
        return found

    def build_cart(self, session: TableSession, lines: list[CartLineInput]) -> Cart:
        """Resolve prices and item types server-side into a Cart."""
        cart = Cart()
        if not lines:
            return cart
        menu_items = self._menu_items(lines)
        for line in lines:
            menu_item = menu_items[line.menu_item_id]
            cart.add(
                CartLine(
                    menu_item_id=menu_item.id,
                    name=menu_item.name,
                    price=menu_item.price,
                    qty=line.qty,
                    item_type=resolve_item_type(
                        session.is_buffet, menu_item.is_free_in_buffet, line.item_type
                    ),
                    note=(line.note or "").strip() or None,
                )
            )
        return cart

    def quote(self, session_id: int, lines: list[CartLineInput]) -> CartQuoteOutput:
        session = self._sessions.get(session_id)
        cart = self.build_cart(session, lines)
        return CartQuoteOutput(
            lines=[
                CartLineOutput(
                    menu_item_id=line.menu_item_id,
                    name=line.name,
                    qty=line.qty,
                    note=line.note,
                    item_type=line.item_type,
                    unit_price=line.unit_price,
                    line_total=round(line.line_total, 2),
                )
                for line in cart.lines
            ],
            total=cart.total,
            item_count=cart.item_count,
        )

    def create(self, data: OrderCreate, actor: Actor) -> Order:
        session = self._sessions.get_active(data.table_session_id)
        cart = self.build_cart(session, data.items)

        menu_items = self._menu_items(data.items)
        for line in cart.lines:
            if not menu_items[line.menu_item_id].is_available:
                raise ValidationError("orders.item_unavailable", name=line.name)

        order = Order(
            table_session_id=session.id,
            status=OrderStatus.OPEN,
            note=(data.note or "").strip() or None,
        )
        self._stamp_created(order, actor)
        self._repo.add(order)

        for line in cart.lines:
            item = OrderItem(
                order_id=order.id,
                menu_item_id=line.menu_item_id,
                qty=line.qty,
                note=line.note,
                item_type=line.item_type,
                status=OrderItemStatus.WAITING,
            )
            self._stamp_created(item, actor)
            self._db.add(item)
        self._db.flush()
        kitchen_logger.info(
            "Order received",
            order_id=order.id,
            session_id=session.id,
            item_count=cart.item_count,
        )
        return self.get(order.id)

    def get(self, order_id: int) -> Order:
        return self._repo.get_or_404(order_id, "order", options=_ORDER_LOAD)

    def update_item_status(self, order_item_id: int, status: str, actor: Actor) -> OrderItem:
        item = self._db.scalar(
            select(OrderItem)
            .where(OrderItem.id == order_item_id, OrderItem.is_active.is_(True))
            .options(
                selectinload(OrderItem.menu_item),
                selectinload(OrderItem.order)
                .selectinload(Order.table_session)
                .selectinload(TableSession.table),
            )
        )
        if item is None:
            raise NotFoundError("order_item", order_item_id)

        if not validate_order_item_transition(item.status, status):
            raise InvalidTransitionError("order_item", item.status, status)

        kitchen_logger.info(
            "Order item status changed",
            order_item_id=item.id,
            from_status=item.status,
            to_status=status,
        )
        item.status = status
        self._stamp_updated(item, actor)
        self._db.flush()
        return item

    def kitchen_queue(self) -> list[OrderOutput]:
        """OPEN orders that still have work for the kitchen, newest first."""
        orders = self._repo.find_all(
            filters=[
                Order.status == OrderStatus.OPEN,
                Order.items.any(OrderItem.status.in_(OrderItemStatus.KITCHEN_VISIBLE)),
            ],
            options=_ORDER_LOAD,
            order_by=(Order.created_at.desc(), Order.id.desc()),
        )
        return [order_output(o, OrderItemStatus.KITCHEN_VISIBLE) for o in orders]

    def runner_queue(self) -> list[RunnerItemOutput]:
        """Cooked items waiting to be carried to their table, oldest first."""
        items = self._db.scalars(
            select(OrderItem)
            .join(Order, OrderItem.order_id == Order.id)
            .where(
                OrderItem.status == OrderItemStatus.DONE,
                OrderItem.is_active.is_(True),
                Order.status == OrderStatus.OPEN,
                Order.is_active.is_(True),
            )
            .options(
                selectinload(OrderItem.menu_item),
                selectinload(OrderItem.order)
                .selectinload(Order.table_session)
                .selectinload(TableSession.table),
            )
            .order_by(Order.created_at, OrderItem.id)
        ).all()
        return [
            RunnerItemOutput(
                **order_item_output(item).model_dump(),
                table_name=item.order.table_session.table.name,
                table_session_id=item.order.table_session_id,
                ordered_at=item.order.created_at,
            )
            for item in items
        ]

    def for_session(self, session_id: int) -> list[OrderOutput]:
        self._sessions.get(session_id)
        orders = self._repo.find_all(
            filters=[Order.table_session_id == session_id],
            options=_ORDER_LOAD,
            order_by=(Order.created_at.desc(), Order.id.desc()),
        )
        return [order_output(o) for o in orders]
