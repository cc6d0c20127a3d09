"""In-memory stores for tests, dry runs, and single-process use."""

from __future__ import annotations

from collections.abc import Mapping
from datetime import UTC, datetime
from typing import Any

import structlog

from tier_rating.models import ContentStats, PendingItem, Rating, TierList

from .base import normalize_rating_fields

logger = structlog.get_logger()


class MemoryRatingStore:
    """Ratings keyed by (content_id, rater_id).

    Every method runs without awaiting, so each call is atomic on the event
    loop and the pair invariant holds without extra locking. Stored records
    are copied on the way in and out.
    """

    def __init__(self) -> None:
        self._ratings: dict[tuple[str, str], Rating] = {}

    async def upsert(self, content_id: str, rater_id: str, fields: Mapping[str, Any]) -> Rating:
        data = normalize_rating_fields(fields)
        key = (content_id, rater_id)
        existing = self._ratings.get(key)
        if existing:
            rating = Rating(
                id=existing.id,
                content_id=content_id,
                rater_id=rater_id,
                created_at=existing.created_at,
                updated_at=datetime.now(UTC),
                **data,
            )
        else:
            rating = Rating(content_id=content_id, rater_id=rater_id, **data)
        self._ratings[key] = rating
        logger.debug("rating_upserted", content_id=content_id, rater_id=rater_id, id=rating.id)
        return _copy_rating(rating)

    async def list_by_content(self, content_id: str) -> list[Rating]:
        ratings = [r for (cid, _), r in self._ratings.items() if cid == content_id]
        return [_copy_rating(r) for r in sorted(ratings, key=lambda r: r.created_at)]

    async def list_by_rater(self, rater_id: str) -> list[Rating]:
        ratings = [r for (_, rid), r in self._ratings.items() if rid == rater_id]
        return [_copy_rating(r) for r in sorted(ratings, key=lambda r: r.updated_at, reverse=True)]

    async def delete(self, content_id: str, rater_id: str) -> bool:
        return self._ratings.pop((content_id, rater_id), None) is not None


class MemoryStatsStore:
    """ContentStats keyed by content id."""

    def __init__(self) -> None:
        self._stats: dict[str, ContentStats] = {}

    async def put(self, stats: ContentStats) -> None:
        self._stats[stats.content_id] = stats.model_copy(deep=True)

    async def get(self, content_id: str) -> ContentStats | None:
        stats = self._stats.get(content_id)
        return stats.model_copy(deep=True) if stats is not None else None

    async def remove(self, content_id: str) -> None:
        self._stats.pop(content_id, None)

    async def list_all(self) -> list[ContentStats]:
        return [self._stats[cid].model_copy(deep=True) for cid in sorted(self._stats)]


class MemoryTierListStore:
    """Tier lists keyed by id, in creation order."""

    def __init__(self) -> None:
        self._lists: dict[str, TierList] = {}

    async def save(self, tier_list: TierList) -> None:
        self._lists[tier_list.id] = _copy_tier_list(tier_list)

    async def load(self, list_id: str) -> TierList | None:
        tier_list = self._lists.get(list_id)
        return _copy_tier_list(tier_list) if tier_list else None

    async def list_all(self) -> list[TierList]:
        return [_copy_tier_list(t) for t in self._lists.values()]

    async def delete(self, list_id: str) -> bool:
        return self._lists.pop(list_id, None) is not None


class MemoryPendingItemStore:
    """Pending items keyed by id."""

    def __init__(self) -> None:
        self._items: dict[str, PendingItem] = {}

    async def add(self, item: PendingItem) -> PendingItem:
        self._items[item.id] = item
        return item

    async def list_all(self) -> list[PendingItem]:
        return list(reversed(self._items.values()))

    async def delete(self, item_id: str) -> bool:
        return self._items.pop(item_id, None) is not None


def _copy_rating(rating: Rating) -> Rating:
    return Rating.model_validate(rating.model_dump())


def _copy_tier_list(tier_list: TierList) -> TierList:
    return TierList.model_validate(tier_list.model_dump())
