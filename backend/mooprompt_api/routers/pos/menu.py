"""
Menu endpoints.

Staff manage categories and items; customers read the menu filtered
for their session type.
"""

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.orm import Session

from mooprompt_api.routers._common import current_user, require_management
from mooprompt_api.services.domain.menu_service import MenuService
from mooprompt_api.services.system_log import log_action
from shared.config.constants import Limits, SystemAction
from shared.infrastructure.db import get_db, safe_commit
from shared.infrastructure.events import MENU_UNAVAILABLE, emit
from shared.security.auth import get_user_id
from shared.utils.pos_schemas import (
    MenuCategoryCreate,
    MenuCategoryOutput,
    MenuCategoryUpdate,
    MenuItemCreate,
    MenuItemOutput,
    MenuItemUpdate,
    SessionMenuOutput,
)
from shared.utils.schemas import SuccessResponse


router = APIRouter(prefix="/api/menu", tags=["menu"])


# =============================================================================
# Customer views
# =============================================================================


@router.get("/session", response_model=SessionMenuOutput)
def session_menu(
    session_id: int | None = Query(default=None),
    search: str | None = Query(default=None, max_length=Limits.MAX_SEARCH_TERM_LENGTH),
    db: Session = Depends(get_db),
) -> SessionMenuOutput:
    """Menu for a table session: buffet sessions also see buffet items."""
    return MenuService(db).session_menu(session_id, search)


@router.get("/popular", response_model=list[MenuItemOutput])
def popular_items(
    limit: int = Query(default=Limits.DEFAULT_POPULAR_LIMIT, ge=1, le=Limits.MAX_PAGE_SIZE),
    session_id: int | None = Query(default=None),
    db: Session = Depends(get_db),
) -> list[MenuItemOutput]:
    items = MenuService(db).popular(limit, session_id)
    return [MenuItemOutput.model_validate(i) for i in items]


@router.get("/admin", response_model=list[MenuCategoryOutput])
def admin_menu(
    search: str | None = Query(default=None, max_length=Limits.MAX_SEARCH_TERM_LENGTH),
    db: Session = Depends(get_db),
    user: dict = Depends(current_user),
) -> list[MenuCategoryOutput]:
    return MenuService(db).admin_menu(search)


# =============================================================================
# Categories
# =============================================================================


@router.get("/categories", response_model=list[MenuCategoryOutput])
def list_categories(db: Session = Depends(get_db)) -> list[MenuCategoryOutput]:
    return MenuService(db).list_categories()


@router.post("/categories", response_model=MenuCategoryOutput, status_code=status.HTTP_201_CREATED)
def create_category(
    body: MenuCategoryCreate,
    request: Request,
    db: Session = Depends(get_db),
    user: dict = Depends(require_management),
) -> MenuCategoryOutput:
    category = MenuService(db).create_category(body, user)
    log_action(
        db,
        SystemAction.CREATE_CATEGORY,
        {"category_id": category.id, "name": category.name},
        user_id=get_user_id(user),
        request=request,
    )
    safe_commit(db)
    return MenuCategoryOutput(id=category.id, name=category.name, items=[])


@router.patch("/categories/{category_id}", response_model=MenuCategoryOutput)
def update_category(
    category_id: int,
    body: MenuCategoryUpdate,
    request: Request,
    db: Session = Depends(get_db),
    user: dict = Depends(require_management),
) -> MenuCategoryOutput:
    service = MenuService(db)
    category = service.update_category(category_id, body, user)
    log_action(
        db,
        SystemAction.UPDATE_CATEGORY,
        {"category_id": category.id, "name": category.name},
        user_id=get_user_id(user),
        request=request,
    )
    safe_commit(db)
    items = service.list_items(category_id=category.id)
    return MenuCategoryOutput(
        id=category.id,
        name=category.name,
        items=[MenuItemOutput.model_validate(i) for i in items],
    )


@router.delete("/categories/{category_id}", response_model=SuccessResponse)
def delete_category(
    category_id: int,
    request: Request,
    db: Session = Depends(get_db),
    user: dict = Depends(require_management),
) -> SuccessResponse:
    """Refused while the category still has items."""
    category = MenuService(db).delete_category(category_id, user)
    log_action(
        db,
        SystemAction.DELETE_CATEGORY,
        {"category_id": category.id, "name": category.name},
        user_id=get_user_id(user),
        request=request,
    )
    safe_commit(db)
    return SuccessResponse()


# =============================================================================
# Items
# =============================================================================


@router.get("/items", response_model=list[MenuItemOutput])
def list_items(
    category_id: int | None = None,
    include_unavailable: bool = False,
    db: Session = Depends(get_db),
) -> list[MenuItemOutput]:
    items = MenuService(db).list_items(category_id, include_unavailable)
    return [MenuItemOutput.model_validate(i) for i in items]


@router.get("/items/{item_id}", response_model=MenuItemOutput)
def get_item(item_id: int, db: Session = Depends(get_db)) -> MenuItemOutput:
    return MenuItemOutput.model_validate(MenuService(db).get_item(item_id))


@router.post("/items", response_model=MenuItemOutput, status_code=status.HTTP_201_CREATED)
def create_item(
    body: MenuItemCreate,
    request: Request,
    db: Session = Depends(get_db),
    user: dict = Depends(require_management),
) -> MenuItemOutput:
    item = MenuService(db).create_item(body, user)
    log_action(
        db,
        SystemAction.CREATE_MENU_ITEM,
        {"menu_item_id": item.id, "name": item.name, "price": item.price},
        user_id=get_user_id(user),
        request=request,
    )
    safe_commit(db)
    return MenuItemOutput.model_validate(item)


@router.patch("/items/{item_id}", response_model=MenuItemOutput)
def update_item(
    item_id: int,
    body: MenuItemUpdate,
    request: Request,
    db: Session = Depends(get_db),
    user: dict = Depends(require_management),
) -> MenuItemOutput:
    """Partial update. Switching an item off tells every screen to drop it."""
    item, became_unavailable = MenuService(db).update_item(item_id, body, user)
    log_action(
        db,
        SystemAction.UPDATE_MENU_ITEM,
        {"menu_item_id": item.id, "changes": body.model_dump(exclude_unset=True)},
        user_id=get_user_id(user),
        request=request,
    )
    safe_commit(db)

    if became_unavailable:
        emit(MENU_UNAVAILABLE, {"menu_item_id": item.id, "name": item.name})
    return MenuItemOutput.model_validate(item)


@router.delete("/items/{item_id}", response_model=SuccessResponse)
def delete_item(
    item_id: int,
    request: Request,
    db: Session = Depends(get_db),
    user: dict = Depends(require_management),
) -> SuccessResponse:
    """Refused once the item appears on any order."""
    item = MenuService(db).delete_item(item_id, user)
    log_action(
        db,
        SystemAction.DELETE_MENU_ITEM,
        {"menu_item_id": item.id, "name": item.name},
        user_id=get_user_id(user),
        request=request,
    )
    safe_commit(db)
    return SuccessResponse()
