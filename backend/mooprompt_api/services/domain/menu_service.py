"""
Menu Service.
Categories and items for the staff back office, plus the customer
views filtered by session type.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import or_, select
from sqlalchemy.orm import Session, selectinload

from mooprompt_api.models import MenuCategory, MenuItem, OrderItem, TableSession
from mooprompt_api.services.base_service import Actor, BaseService
from shared.config.constants import Limits, SessionType
from shared.utils.exceptions import NotFoundError, ValidationError
from shared.utils.pos_schemas import (
    MenuCategoryCreate,
    MenuCategoryOutput,
    MenuCategoryUpdate,
    MenuItemCreate,
    MenuItemOutput,
    MenuItemUpdate,
    SessionMenuOutput,
)
from shared.utils.validators import like_contains, sanitize_search_term


def visible_to(is_buffet: bool) -> Any:
    """
    Item filter for a session type: buffet sessions see buffet and
    a-la-carte items, every other session only a-la-carte ones.
    """
    if is_buffet:
        return or_(MenuItem.is_buffet_item.is_(True), MenuItem.is_a_la_carte_item.is_(True))
    return MenuItem.is_a_la_carte_item.is_(True)


def _name_filter(search: str | None) -> Any | None:
    term = sanitize_search_term(search)
    if not term:
        return None
    return MenuItem.name.ilike(like_contains(term), escape="\\")


class MenuService(BaseService[MenuItem]):
    """Service for menu categories and items."""

    def __init__(self, db: Session):
        super().__init__(db, MenuItem)

    # -------------------------------------------------------------------------
    # Categories
    # -------------------------------------------------------------------------

    def _categories(self) -> list[MenuCategory]:
        return list(
            self._db.scalars(
                select(MenuCategory)
                .where(MenuCategory.is_active.is_(True))
                .order_by(MenuCategory.name, MenuCategory.id)
            ).all()
        )

    def get_category(self, category_id: int) -> MenuCategory:
        category = self._db.scalar(
            select(MenuCategory).where(
                MenuCategory.id == category_id, MenuCategory.is_active.is_(True)
            )
        )
        if category is None:
            raise NotFoundError("category", category_id)
        return category

    def _grouped(
        self,
        filters: list[Any],
        *,
        skip_empty: bool = False,
    ) -> list[MenuCategoryOutput]:
        """Categories by name, each with its matching items by name."""
        items = self._repo.find_all(filters=filters, order_by=(MenuItem.name, MenuItem.id))
        by_category: dict[int, list[MenuItemOutput]] = {}
        for item in items:
            by_category.setdefault(item.category_id, []).append(MenuItemOutput.model_validate(item))

        result = []
        for category in self._categories():
            category_items = by_category.get(category.id, [])
            if skip_empty and not category_items:
                continue
            result.append(
                MenuCategoryOutput(id=category.id, name=category.name, items=category_items)
            )
        return result

    def list_categories(self) -> list[MenuCategoryOutput]:
        return self._grouped([])

    def create_category(self, data: MenuCategoryCreate, actor: Actor) -> MenuCategory:
        category = MenuCategory(name=data.name)
        self._stamp_created(category, actor)
        self._db.add(category)
        self._db.flush()
        return category

    def update_category(self, category_id: int, data: MenuCategoryUpdate, actor: Actor) -> MenuCategory:
        category = self.get_category(category_id)
        category.name = data.name
        self._stamp_updated(category, actor)
        self._db.flush()
        return category

    def delete_category(self, category_id: int, actor: Actor) -> MenuCategory:
        category = self.get_category(category_id)
        if self._repo.exists(MenuItem.category_id == category.id):
            raise ValidationError("menu.category_has_items", name=category.name)
        self._soft_delete(category, actor)
        self._db.flush()
        return category

    # -------------------------------------------------------------------------
    # Items
    # -------------------------------------------------------------------------

    def get_item(self, item_id: int) -> MenuItem:
        return self._repo.get_or_404(item_id, "menu_item")

    def list_items(
        self,
        category_id: int | None = None,
        include_unavailable: bool = True,
    ) -> list[MenuItem]:
        filters = []
        if category_id is not None:
            filters.append(MenuItem.category_id == category_id)
        if not include_unavailable:
            filters.append(MenuItem.is_available.is_(True))
        return list(
            self._repo.find_all(
                filters=filters, order_by=(MenuItem.category_id, MenuItem.name, MenuItem.id)
            )
        )

    def create_item(self, data: MenuItemCreate, actor: Actor) -> MenuItem:
        self.get_category(data.category_id)
        item = MenuItem(**data.model_dump())
        self._stamp_created(item, actor)
        return self._repo.add(item)

    def update_item(self, item_id: int, data: MenuItemUpdate, actor: Actor) -> tuple[MenuItem, bool]:
        """
        Apply a partial update.

        Returns:
            The item and whether this update switched it to unavailable.
        """
        item = self.get_item(item_id)
        changes = data.model_dump(exclude_unset=True)

        # Only image_url and description may be cleared with null
        for field in list(changes):
            if changes[field] is None and field not in ("image_url", "description"):
                del changes[field]

        if "category_id" in changes:
            self.get_category(changes["category_id"])

        was_available = item.is_available
        self._apply_changes(item, changes)
        self._stamp_updated(item, actor)
        self._db.flush()
        return item, was_available and not item.is_available

    def delete_item(self, item_id: int, actor: Actor) -> MenuItem:
        item = self.get_item(item_id)
        referenced = self._db.scalar(
            select(OrderItem.id).where(OrderItem.menu_item_id == item.id).limit(1)
        )
        if referenced is not None:
            raise ValidationError("menu.item_in_use", name=item.name)
        self._soft_delete(item, actor)
        self._db.flush()
        return item

    # -------------------------------------------------------------------------
    # Customer views
    # -------------------------------------------------------------------------

    def _session_flags(self, session_id: int | None) -> tuple[bool, bool]:
        """(is_buffet, is_expired) for a session; unknown sessions read as a-la-carte."""
        if session_id is None:
            return False, False
        session = self._db.scalar(
            select(TableSession).where(
                TableSession.id == session_id, TableSession.is_active.is_(True)
            )
        )
        if session is None:
            return False, False
        return session.is_buffet, session.is_expired()

    def session_menu(self, session_id: int | None, search: str | None = None) -> SessionMenuOutput:
        if session_id is None:
            raise ValidationError("menu.session_id_required")

        is_buffet, is_expired = self._session_flags(session_id)
        filters = [visible_to(is_buffet)]
        name_filter = _name_filter(search)
        if name_filter is not None:
            filters.append(name_filter)

        return SessionMenuOutput(
            categories=self._grouped(filters, skip_empty=name_filter is not None),
            session_type=SessionType.BUFFET if is_buffet else SessionType.A_LA_CARTE,
            is_expired=is_expired,
        )

    def popular(self, limit: int = Limits.DEFAULT_POPULAR_LIMIT, session_id: int | None = None) -> list[MenuItem]:
        """Items flagged popular that the session may order."""
        limit = max(1, min(limit, Limits.MAX_PAGE_SIZE))
        is_buffet, _ = self._session_flags(session_id)
        return list(
            self._repo.find_all(
                filters=[
                    MenuItem.is_popular.is_(True),
                    MenuItem.is_available.is_(True),
                    visible_to(is_buffet),
                ],
                options=[selectinload(MenuItem.category)],
                order_by=(MenuItem.name, MenuItem.id),
                limit=limit,
            )
        )

    def admin_menu(self, search: str | None = None) -> list[MenuCategoryOutput]:
        """Every category with every item, unavailable ones included."""
        name_filter = _name_filter(search)
        filters = [name_filter] if name_filter is not None else []
        return self._grouped(filters, skip_empty=name_filter is not None)
