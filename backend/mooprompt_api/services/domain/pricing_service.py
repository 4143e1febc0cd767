"""
Pricing Services: buffet packages, promotions and extra charges.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import select
from sqlalchemy.orm import Session

from mooprompt_api.models import ExtraCharge, Package, Promotion, TableSession
from mooprompt_api.services.base_service import Actor, BaseService
from shared.config.constants import PromotionType, SessionStatus
from shared.utils.exceptions import ValidationError
from shared.utils.pos_schemas import (
    ExtraChargeCreate,
    ExtraChargeUpdate,
    PackageCreate,
    PackageUpdate,
    PromotionCreate,
    PromotionUpdate,
)


class PackageService(BaseService[Package]):
    """Buffet packages."""

    def __init__(self, db: Session):
        super().__init__(db, Package)

    def list_all(self) -> list[Package]:
        return list(self._repo.find_all(order_by=(Package.name, Package.id)))

    def get(self, package_id: int) -> Package:
        return self._repo.get_or_404(package_id, "package")

    def create(self, data: PackageCreate, actor: Actor) -> Package:
        package = Package(**data.model_dump())
        self._stamp_created(package, actor)
        return self._repo.add(package)

    def update(self, package_id: int, data: PackageUpdate, actor: Actor) -> Package:
        package = self.get(package_id)
        changes = data.model_dump(exclude_unset=True)
        # duration_minutes may be cleared (unlimited time); the rest may not
        changes = {k: v for k, v in changes.items() if v is not None or k == "duration_minutes"}
        self._apply_changes(package, changes)
        self._stamp_updated(package, actor)
        self._db.flush()
        return package

    def delete(self, package_id: int, actor: Actor) -> Package:
        package = self.get(package_id)
        in_use = self._db.scalar(
            select(TableSession.id)
            .where(
                TableSession.package_id == package.id,
                TableSession.status == SessionStatus.ACTIVE,
                TableSession.is_active.is_(True),
            )
            .limit(1)
        )
        if in_use is not None:
            raise ValidationError("packages.in_use", name=package.name)
        self._soft_delete(package, actor)
        self._db.flush()
        return package


def validate_promotion(promo_type: str, value: float, condition: dict[str, Any] | None) -> None:
    """
    Check that a promotion carries what its type needs.

    PER_PERSON ("come 4, pay 3") needs buy > pay and ignores value.
    MIN_PEOPLE and MIN_AMOUNT need their threshold. Every type except
    PER_PERSON needs a positive value; PERCENT may not exceed 100.
    """
    condition = condition or {}
    if promo_type == PromotionType.PER_PERSON:
        buy, pay = condition.get("buy"), condition.get("pay")
        if buy is None or pay is None or buy <= pay:
            raise ValidationError("promotions.buy_pay_required")
        return

    if value <= 0:
        raise ValidationError("promotions.value_required")
    if promo_type == PromotionType.PERCENT and value > 100:
        raise ValidationError("promotions.percent_too_high")
    if promo_type == PromotionType.MIN_PEOPLE and not condition.get("min_people"):
        raise ValidationError("promotions.min_people_required")
    if promo_type == PromotionType.MIN_AMOUNT and not condition.get("min_amount"):
        raise ValidationError("promotions.min_amount_required")


class PromotionService(BaseService[Promotion]):
    """Bill-level promotions."""

    def __init__(self, db: Session):
        super().__init__(db, Promotion)

    def list_all(self, active_only: bool = False) -> list[Promotion]:
        filters = [Promotion.active.is_(True)] if active_only else []
        return list(
            self._repo.find_all(filters=filters, order_by=(Promotion.created_at.desc(), Promotion.id.desc()))
        )

    def get(self, promotion_id: int) -> Promotion:
        return self._repo.get_or_404(promotion_id, "promotion")

    def create(self, data: PromotionCreate, actor: Actor) -> Promotion:
        condition = data.condition.model_dump(exclude_none=True) if data.condition else None
        validate_promotion(data.type, data.value, condition)
        promotion = Promotion(
            name=data.name,
            type=data.type,
            value=data.value,
            condition=condition or None,
            active=data.active,
        )
        self._stamp_created(promotion, actor)
        return self._repo.add(promotion)

    def update(self, promotion_id: int, data: PromotionUpdate, actor: Actor) -> Promotion:
        promotion = self.get(promotion_id)
        changes = data.model_dump(exclude_unset=True, exclude_none=True)
        if "condition" in changes:
            changes["condition"] = data.condition.model_dump(exclude_none=True) or None

        validate_promotion(
            changes.get("type", promotion.type),
            changes.get("value", promotion.value),
            changes.get("condition", promotion.condition),
        )
        self._apply_changes(promotion, changes)
        self._stamp_updated(promotion, actor)
        self._db.flush()
        return promotion

    def delete(self, promotion_id: int, actor: Actor) -> Promotion:
        promotion = self.get(promotion_id)
        self._soft_delete(promotion, actor)
        self._db.flush()
        return promotion


class ExtraChargeService(BaseService[ExtraCharge]):
    """Service charges added per person or per session."""

    def __init__(self, db: Session):
        super().__init__(db, ExtraCharge)

    def list_all(self, active_only: bool = False) -> list[ExtraCharge]:
        filters = [ExtraCharge.active.is_(True)] if active_only else []
        return list(self._repo.find_all(filters=filters, order_by=(ExtraCharge.name, ExtraCharge.id)))

    def get(self, charge_id: int) -> ExtraCharge:
        return self._repo.get_or_404(charge_id, "extra_charge")

    def create(self, data: ExtraChargeCreate, actor: Actor) -> ExtraCharge:
        charge = ExtraCharge(**data.model_dump())
        self._stamp_created(charge, actor)
        return self._repo.add(charge)

    def update(self, charge_id: int, data: ExtraChargeUpdate, actor: Actor) -> ExtraCharge:
        charge = self.get(charge_id)
        self._apply_changes(charge, data.model_dump(exclude_unset=True, exclude_none=True))
        self._stamp_updated(charge, actor)
        self._db.flush()
        return charge

    def delete(self, charge_id: int, actor: Actor) -> ExtraCharge:
        charge = self.get(charge_id)
        self._soft_delete(charge, actor)
        self._db.flush()
        return charge
