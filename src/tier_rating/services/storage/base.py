"""Store contracts consumed by the rating and tier-list services."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Protocol, runtime_checkable

from tier_rating.models import ContentStats, PendingItem, Rating, TierList


@runtime_checkable
class RatingStore(Protocol):
    """Holds at most one rating per (content, rater) pair.

    Implementations must make ``upsert`` atomic for a given pair: two racing
    submissions leave exactly one record, and a call whose write did not win
    raises ``ConflictLostError``.
    """

    async def upsert(self, content_id: str, rater_id: str, fields: Mapping[str, Any]) -> Rating:
        """Create or replace the rating for (content_id, rater_id).

        Args:
            content_id: Rated content.
            rater_id: Authenticated rater.
            fields: Values for ``overall``, ``dimensions``, ``comment``, ``tags``.

        Returns:
            The stored rating. A replace keeps the rating id and
            ``created_at`` and bumps ``updated_at``.
        """
        ...

    async def list_by_content(self, content_id: str) -> list[Rating]:
        """All ratings for a content item, oldest first."""
        ...

    async def list_by_rater(self, rater_id: str) -> list[Rating]:
        """All ratings by a rater, most recently updated first."""
        ...

    async def delete(self, content_id: str, rater_id: str) -> bool:
        """Remove the rating for the pair; False when none existed."""
        ...


@runtime_checkable
class StatsStore(Protocol):
    """Cache of derived ContentStats, written only by the rating service."""

    async def put(self, stats: ContentStats) -> None: ...

    async def get(self, content_id: str) -> ContentStats | None: ...

    async def remove(self, content_id: str) -> None: ...

    async def list_all(self) -> list[ContentStats]: ...


@runtime_checkable
class TierListStore(Protocol):
    """Persistence for tier lists; bucket order must round-trip exactly."""

    async def save(self, tier_list: TierList) -> None: ...

    async def load(self, list_id: str) -> TierList | None: ...

    async def list_all(self) -> list[TierList]: ...

    async def delete(self, list_id: str) -> bool: ...


@runtime_checkable
class PendingItemStore(Protocol):
    """Catalog of items that have not been rated yet."""

    async def add(self, item: PendingItem) -> PendingItem: ...

    async def list_all(self) -> list[PendingItem]:
        """All pending items, newest first."""
        ...

    async def delete(self, item_id: str) -> bool: ...


def normalize_rating_fields(fields: Mapping[str, Any] | Any) -> dict[str, Any]:
    """Reduce caller input to the writable rating fields with defaults."""
    data = fields.model_dump() if hasattr(fields, "model_dump") else dict(fields)
    return {
        "overall": data["overall"],
        "dimensions": dict(data.get("dimensions") or {}),
        "comment": data.get("comment"),
        "tags": list(data.get("tags") or []),
    }
