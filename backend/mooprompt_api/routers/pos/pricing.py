"""
Pricing endpoints: buffet packages, promotions and extra charges.
"""

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session

from mooprompt_api.routers._common import current_user, require_management
from mooprompt_api.services.domain.pricing_service import (
    ExtraChargeService,
    PackageService,
    PromotionService,
)
from mooprompt_api.services.system_log import log_action
from shared.config.constants import SystemAction
from shared.infrastructure.db import get_db, safe_commit
from shared.security.auth import get_user_id
from shared.utils.pos_schemas import (
    ExtraChargeCreate,
    ExtraChargeOutput,
    ExtraChargeUpdate,
    PackageCreate,
    PackageOutput,
    PackageUpdate,
    PromotionCreate,
    PromotionOutput,
    PromotionUpdate,
)
from shared.utils.schemas import SuccessResponse


router = APIRouter(prefix="/api", tags=["pricing"])


# =============================================================================
# Packages
# =============================================================================


@router.get("/packages", response_model=list[PackageOutput])
def list_packages(
    db: Session = Depends(get_db),
    user: dict = Depends(current_user),
) -> list[PackageOutput]:
    return [PackageOutput.model_validate(p) for p in PackageService(db).list_all()]


@router.post("/packages", response_model=PackageOutput, status_code=status.HTTP_201_CREATED)
def create_package(
    body: PackageCreate,
    request: Request,
    db: Session = Depends(get_db),
    user: dict = Depends(require_management),
) -> PackageOutput:
    package = PackageService(db).create(body, user)
    log_action(
        db,
        SystemAction.CREATE_PACKAGE,
        {"package_id": package.id, "name": package.name},
        user_id=get_user_id(user),
        request=request,
    )
    safe_commit(db)
    return PackageOutput.model_validate(package)


@router.patch("/packages/{package_id}", response_model=PackageOutput)
def update_package(
    package_id: int,
    body: PackageUpdate,
    request: Request,
    db: Session = Depends(get_db),
    user: dict = Depends(require_management),
) -> PackageOutput:
    package = PackageService(db).update(package_id, body, user)
    log_action(
        db,
        SystemAction.UPDATE_PACKAGE,
        {"package_id": package.id, "changes": body.model_dump(exclude_unset=True)},
        user_id=get_user_id(user),
        request=request,
    )
    safe_commit(db)
    return PackageOutput.model_validate(package)


@router.delete("/packages/{package_id}", response_model=SuccessResponse)
def delete_package(
    package_id: int,
    request: Request,
    db: Session = Depends(get_db),
    user: dict = Depends(require_management),
) -> SuccessResponse:
    """Refused while an active session uses the package."""
    package = PackageService(db).delete(package_id, user)
    log_action(
        db,
        SystemAction.DELETE_PACKAGE,
        {"package_id": package.id, "name": package.name},
        user_id=get_user_id(user),
        request=request,
    )
    safe_commit(db)
    return SuccessResponse()


# =============================================================================
# Promotions
# =============================================================================


@router.get("/promotions", response_model=list[PromotionOutput])
def list_promotions(
    active_only: bool = False,
    db: Session = Depends(get_db),
    user: dict = Depends(current_user),
) -> list[PromotionOutput]:
    return [PromotionOutput.model_validate(p) for p in PromotionService(db).list_all(active_only)]


@router.post("/promotions", response_model=PromotionOutput, status_code=status.HTTP_201_CREATED)
def create_promotion(
    body: PromotionCreate,
    request: Request,
    db: Session = Depends(get_db),
    user: dict = Depends(require_management),
) -> PromotionOutput:
    promotion = PromotionService(db).create(body, user)
    log_action(
        db,
        SystemAction.CREATE_PROMOTION,
        {"promotion_id": promotion.id, "name": promotion.name, "type": promotion.type},
        user_id=get_user_id(user),
        request=request,
    )
    safe_commit(db)
    return PromotionOutput.model_validate(promotion)


@router.patch("/promotions/{promotion_id}", response_model=PromotionOutput)
def update_promotion(
    promotion_id: int,
    body: PromotionUpdate,
    request: Request,
    db: Session = Depends(get_db),
    user: dict = Depends(require_management),
) -> PromotionOutput:
    promotion = PromotionService(db).update(promotion_id, body, user)
    log_action(
        db,
        SystemAction.UPDATE_PROMOTION,
        {"promotion_id": promotion.id, "changes": body.model_dump(exclude_unset=True)},
        user_id=get_user_id(user),
        request=request,
    )
    safe_commit(db)
    return PromotionOutput.model_validate(promotion)


@router.delete("/promotions/{promotion_id}", response_model=SuccessResponse)
def delete_promotion(
    promotion_id: int,
    request: Request,
    db: Session = Depends(get_db),
    user: dict = Depends(require_management),
) -> SuccessResponse:
    promotion = PromotionService(db).delete(promotion_id, user)
    log_action(
        db,
        SystemAction.DELETE_PROMOTION,
        {"promotion_id": promotion.id, "name": promotion.name},
        user_id=get_user_id(user),
        request=request,
    )
    safe_commit(db)
    return SuccessResponse()


# =============================================================================
# Extra charges
# =============================================================================


@router.get("/extra-charges", response_model=list[ExtraChargeOutput])
def list_extra_charges(
    active_only: bool = False,
    db: Session = Depends(get_db),
    user: dict = Depends(current_user),
) -> list[ExtraChargeOutput]:
    return [ExtraChargeOutput.model_validate(c) for c in ExtraChargeService(db).list_all(active_only)]


@router.post("/extra-charges", response_model=ExtraChargeOutput, status_code=status.HTTP_201_CREATED)
def create_extra_charge(
    body: ExtraChargeCreate,
    request: Request,
    db: Session = Depends(get_db),
    user: dict = Depends(require_management),
) -> ExtraChargeOutput:
    charge = ExtraChargeService(db).create(body, user)
    log_action(
        db,
        SystemAction.CREATE_EXTRA_CHARGE,
        {"extra_charge_id": charge.id, "name": charge.name, "price": charge.price},
        user_id=get_user_id(user),
        request=request,
    )
    safe_commit(db)
    return ExtraChargeOutput.model_validate(charge)


@router.patch("/extra-charges/{charge_id}", response_model=ExtraChargeOutput)
def update_extra_charge(
    charge_id: int,
    body: ExtraChargeUpdate,
    request: Request,
    db: Session = Depends(get_db),
    user: dict = Depends(require_management),
) -> ExtraChargeOutput:
    charge = ExtraChargeService(db).update(charge_id, body, user)
    log_action(
        db,
        SystemAction.UPDATE_EXTRA_CHARGE,
        {"extra_charge_id": charge.id, "changes": body.model_dump(exclude_unset=True)},
        user_id=get_user_id(user),
        request=request,
    )
    safe_commit(db)
    return ExtraChargeOutput.model_validate(charge)


@router.delete("/extra-charges/{charge_id}", response_model=SuccessResponse)
def delete_extra_charge(
    charge_id: int,
    request: Request,
    db: Session = Depends(get_db),
    user: dict = Depends(require_management),
) -> SuccessResponse:
    charge = ExtraChargeService(db).delete(charge_id, user)
    log_action(
        db,
        SystemAction.DELETE_EXTRA_CHARGE,
        {"extra_charge_id": charge.id, "name": charge.name},
        user_id=get_user_id(user),
        request=request,
    )
    safe_commit(db)
    return SuccessResponse()
