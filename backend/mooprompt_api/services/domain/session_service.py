"""
Table Session Service.

A session seats a party at a table: opening it occupies the table,
closing it (without a bill) frees the table again. Bills close sessions
through BillingService.
"""

from __future__ import annotations

from datetime import timedelta

from sqlalchemy import func, select
from sqlalchemy.orm import Session, selectinload

from mooprompt_api.models import (
    ExtraCharge,
    Order,
    Package,
    Table,
    TableSession,
    utcnow,
)
from mooprompt_api.services.base_service import Actor, BaseService
from shared.config.constants import OrderStatus, SessionStatus, SessionType, TableStatus
from shared.utils.exceptions import NotFoundError, ValidationError
from shared.utils.pos_schemas import (
    ActiveSessionOutput,
    ExtraChargeOutput,
    PackageOutput,
    SessionDetail,
    SessionOpen,
    SessionOutput,
    TableBrief,
)
from shared.utils.validators import like_contains, sanitize_search_term


def session_type(session: TableSession) -> str:
    return SessionType.BUFFET if session.is_buffet else SessionType.A_LA_CARTE


def session_output(session: TableSession) -> SessionOutput:
    return SessionOutput(
        id=session.id,
        table_id=session.table_id,
        package_id=session.package_id,
        people_count=session.people_count,
        status=session.status,
        start_time=session.start_time,
        expire_time=session.expire_time,
        end_time=session.end_time,
        extra_charge_ids=session.extra_charge_ids or [],
        session_type=session_type(session),
        table=TableBrief.model_validate(session.table),
        package=PackageOutput.model_validate(session.package) if session.package else None,
    )


class SessionService(BaseService[TableSession]):
    """Service for opening, closing and looking up table sessions."""

    def __init__(self, db: Session):
        super().__init__(db, TableSession)

    def get(self, session_id: int) -> TableSession:
        return self._repo.get_or_404(
            session_id,
            "session",
            options=[selectinload(TableSession.table), selectinload(TableSession.package)],
        )

    def get_active(self, session_id: int) -> TableSession:
        """Session that still accepts orders: ACTIVE and not past its package time."""
        session = self.get(session_id)
        if session.status != SessionStatus.ACTIVE:
            raise ValidationError("sessions.not_active", session_id=session_id)
        if session.is_expired():
            raise ValidationError("sessions.expired", session_id=session_id)
        return session

    def _charges(self, charge_ids: list[int] | None, active_only: bool = True) -> list[ExtraCharge]:
        if not charge_ids:
            return []
        filters = [ExtraCharge.id.in_(charge_ids)]
        if active_only:
            filters.append(ExtraCharge.active.is_(True))
        return list(
            self._db.scalars(
                select(ExtraCharge)
                .where(*filters, ExtraCharge.is_active.is_(True))
                .order_by(ExtraCharge.id)
            ).all()
        )

    def open(self, data: SessionOpen, actor: Actor) -> TableSession:
        table = self._db.scalar(
            select(Table).where(Table.id == data.table_id, Table.is_active.is_(True))
        )
        if table is None:
            raise NotFoundError("table", data.table_id)
        if table.status != TableStatus.AVAILABLE:
            raise ValidationError("sessions.table_not_available", name=table.name)

        package = None
        if data.package_id is not None:
            package = self._db.scalar(
                select(Package).where(Package.id == data.package_id, Package.is_active.is_(True))
            )
            if package is None:
                raise NotFoundError("package", data.package_id)

        charge_ids = list(dict.fromkeys(data.extra_charge_ids))
        known = {c.id for c in self._charges(charge_ids, active_only=False)}
        for charge_id in charge_ids:
            if charge_id not in known:
                raise NotFoundError("extra_charge", charge_id)

        now = utcnow()
        session = TableSession(
            table_id=table.id,
            package_id=package.id if package else None,
            people_count=data.people_count,
            status=SessionStatus.ACTIVE,
            start_time=now,
            expire_time=(
                now + timedelta(minutes=package.duration_minutes)
                if package and package.duration_minutes
                else None
            ),
            extra_charge_ids=charge_ids or None,
        )
        self._stamp_created(session, actor)
        self._repo.add(session)

        table.status = TableStatus.OCCUPIED
        self._stamp_updated(table, actor)
        self._db.flush()
        self._db.refresh(session)
        return session

    def close(self, session_id: int, actor: Actor) -> TableSession:
        """Cancel a session without billing. Refused while orders are open."""
        session = self.get(session_id)
        if session.status == SessionStatus.CLOSED:
            raise ValidationError("sessions.already_closed", session_id=session_id)

        open_orders = self._db.scalar(
            select(func.count(Order.id)).where(
                Order.table_session_id == session.id,
                Order.status == OrderStatus.OPEN,
                Order.is_active.is_(True),
            )
        )
        if open_orders:
            raise ValidationError("sessions.open_orders", count=open_orders)

        session.status = SessionStatus.CLOSED
        session.end_time = utcnow()
        self._stamp_updated(session, actor)
        session.table.status = TableStatus.AVAILABLE
        self._stamp_updated(session.table, actor)
        self._db.flush()
        return session

    def find_by_table_name(self, table_name: str | None) -> TableSession:
        """Newest ACTIVE session whose table name contains the text (any case)."""
        table_name = (table_name or "").strip()
        if not table_name:
            raise ValidationError("sessions.table_name_required")

        session = self._db.scalar(
            select(TableSession)
            .join(Table, TableSession.table_id == Table.id)
            .where(
                TableSession.status == SessionStatus.ACTIVE,
                TableSession.is_active.is_(True),
                Table.is_active.is_(True),
                Table.name.ilike(like_contains(sanitize_search_term(table_name)), escape="\\"),
            )
            .options(selectinload(TableSession.table), selectinload(TableSession.package))
            .order_by(TableSession.start_time.desc(), TableSession.id.desc())
            .limit(1)
        )
        if session is None:
            raise NotFoundError("active_session", table_name=table_name)
        if session.is_expired():
            raise ValidationError("sessions.expired", session_id=session.id)
        return session

    def detail(self, session_id: int) -> SessionDetail:
        session = self.get(session_id)
        base = session_output(session)
        charges = self._charges(session.extra_charge_ids)
        return SessionDetail(
            **base.model_dump(),
            extra_charges=[ExtraChargeOutput.model_validate(c) for c in charges],
            is_active=session.status == SessionStatus.ACTIVE,
            is_expired=session.is_expired(),
        )

    def list_active(self) -> list[ActiveSessionOutput]:
        sessions = self._repo.find_all(
            filters=[TableSession.status == SessionStatus.ACTIVE],
            options=[
                selectinload(TableSession.table),
                selectinload(TableSession.package),
                selectinload(TableSession.orders),
            ],
            order_by=TableSession.start_time.desc(),
        )
        result = []
        for session in sessions:
            orders = [o for o in session.orders if o.is_active]
            result.append(
                ActiveSessionOutput(
                    **session_output(session).model_dump(),
                    order_count=len(orders),
                    open_order_ids=[o.id for o in orders if o.status == OrderStatus.OPEN],
                    is_expired=session.is_expired(),
                )
            )
        return result
