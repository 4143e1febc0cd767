"""
Restaurant Info Service (single row).
"""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import Session

from mooprompt_api.models import RestaurantInfo
from mooprompt_api.services.base_service import Actor, BaseService
from shared.utils.pos_schemas import RestaurantInfoUpdate


class RestaurantService(BaseService[RestaurantInfo]):
    def __init__(self, db: Session):
        super().__init__(db, RestaurantInfo)

    def get_or_create(self) -> RestaurantInfo:
        """The restaurant record, created with defaults on first access."""
        info = self._db.scalar(
            select(RestaurantInfo)
            .where(RestaurantInfo.is_active.is_(True))
            .order_by(RestaurantInfo.id)
            .limit(1)
        )
        if info is None:
            info = self._repo.add(RestaurantInfo())
        return info

    def update(self, data: RestaurantInfoUpdate, actor: Actor) -> RestaurantInfo:
        info = self.get_or_create()
        changes = data.model_dump(exclude_unset=True)
        if changes.get("name", "") is None:
            del changes["name"]
        self._apply_changes(info, changes)
        self._stamp_updated(info, actor)
        self._db.flush()
        return info
