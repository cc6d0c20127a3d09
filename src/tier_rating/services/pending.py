"""Catalog of items awaiting a rating."""

from __future__ import annotations

import structlog

from tier_rating.core.errors import MissingFieldError, NotFoundError
from tier_rating.models import PendingItem
from tier_rating.services.storage import PendingItemStore

logger = structlog.get_logger()


class PendingItemService:
    """Add, list, and remove pending items."""

    def __init__(self, store: PendingItemStore) -> None:
        self._store = store

    async def add(
        self,
        name: str,
        description: str | None = None,
        category: str | None = None,
    ) -> PendingItem:
        if not name or not name.strip():
            raise MissingFieldError("name")
        item = await self._store.add(
            PendingItem(name=name.strip(), description=description, category=category)
        )
        logger.info("pending_item_added", item_id=item.id, name=item.name)
        return item

    async def list_all(self) -> list[PendingItem]:
        return await self._store.list_all()

    async def delete(self, item_id: str) -> None:
        if not await self._store.delete(item_id):
            raise NotFoundError("Pending item", item_id)
        logger.info("pending_item_deleted", item_id=item_id)
