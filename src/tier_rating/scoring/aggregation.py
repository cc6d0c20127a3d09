"""Per-content aggregation of ratings into count, mean, and distribution."""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

import structlog

from tier_rating.core.errors import InvalidLevelReferenceError
from tier_rating.models import ContentStats, Rating

if TYPE_CHECKING:
    from tier_rating.scoring.levels import LevelRegistry
    from tier_rating.services.storage.base import RatingStore

logger = structlog.get_logger()


def compute_stats(
    content_id: str,
    ratings: Sequence[Rating],
    registry: LevelRegistry,
) -> ContentStats:
    """Compute ContentStats from the full rating set of one content item.

    Args:
        content_id: Content the ratings belong to.
        ratings: Every stored rating for that content.
        registry: Level registry used to score overall levels.

    Returns:
        ContentStats with a sparse distribution in registry order.

    Raises:
        InvalidLevelReferenceError: If any rating carries an unknown level key.
    """
    if not ratings:
        return ContentStats.empty(content_id)

    counts: dict[str, int] = {}
    total = 0
    for rating in ratings:
        if not registry.is_valid_level(rating.overall):
            raise InvalidLevelReferenceError(content_id, rating.id, rating.overall)
        total += registry.score_of(rating.overall)
        counts[rating.overall] = counts.get(rating.overall, 0) + 1

    # Registry order keeps repeated recomputations identical
    distribution = {key: counts[key] for key in registry.keys if key in counts}
    return ContentStats(
        content_id=content_id,
        count=len(ratings),
        mean=total / len(ratings),
        distribution=distribution,
    )


class AggregationEngine:
    """Recompute content statistics from the rating store.

    The engine only reads ratings; persisting the result is the caller's job.
    """

    def __init__(self, registry: LevelRegistry, ratings: RatingStore) -> None:
        self.registry = registry
        self._ratings = ratings

    async def recompute(self, content_id: str) -> ContentStats:
        ratings = await self._ratings.list_by_content(content_id)
        try:
            stats = compute_stats(content_id, ratings, self.registry)
        except InvalidLevelReferenceError as e:
            logger.error(
                "stats_recompute_failed",
                content_id=content_id,
                rating_id=e.rating_id,
                level=e.key,
            )
            raise
        logger.debug(
            "stats_recomputed",
            content_id=content_id,
            count=stats.count,
            mean=stats.mean,
        )
        return stats
