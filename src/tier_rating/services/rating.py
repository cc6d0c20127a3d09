"""Rating submission and content statistics service."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass

import structlog
from pydantic import BaseModel, Field

from tier_rating.core.errors import (
    MissingFieldError,
    NotFoundError,
    ValidationError,
)
from tier_rating.models import ContentStats, Rating
from tier_rating.scoring import AggregationEngine, LevelRegistry, TierClassifier
from tier_rating.services.storage import RatingStore, StatsStore

logger = structlog.get_logger()

OVERALL = "overall"


class LevelAssignment(BaseModel):
    """Level keys chosen by one rater: the mandatory overall level plus
    optional secondary dimensions drawn from the same registry."""

    overall: str | None = None
    dimensions: dict[str, str] = Field(default_factory=dict)

    @classmethod
    def from_mapping(cls, levels: Mapping[str, str]) -> LevelAssignment:
        """Split a flat ``{"overall": ..., "<dimension>": ...}`` mapping."""
        dimensions = {k: v for k, v in levels.items() if k != OVERALL and v}
        return cls(overall=levels.get(OVERALL), dimensions=dimensions)


@dataclass
class SubmissionResult:
    """Stored rating together with the stats recomputed after the write."""

    rating: Rating
    stats: ContentStats


@dataclass
class RatingSummary:
    """Totals across every rated content item."""

    total_ratings: int
    average_score: float
    content_count: int


def normalize_tags(tags: Iterable[str] | None) -> list[str]:
    """Strip, drop empties, and de-duplicate tags keeping first-seen order."""
    seen: dict[str, None] = {}
    for tag in tags or []:
        cleaned = tag.strip()
        if cleaned:
            seen.setdefault(cleaned, None)
    return list(seen)


class RatingService:
    """Validates submissions, writes ratings, and keeps ContentStats current.

    Every write recomputes the affected content's stats before returning,
    so callers never observe a rating without matching stats.
    """

    def __init__(
        self,
        registry: LevelRegistry,
        classifier: TierClassifier,
        ratings: RatingStore,
        stats: StatsStore,
        dimensions: Iterable[str] = (),
    ) -> None:
        """Initialize rating service.

        Args:
            registry: Level registry used for validation and scoring.
            classifier: Classifier for grouping content by mean score.
            ratings: Rating record store.
            stats: ContentStats persistence.
            dimensions: Allowed secondary dimension names.
        """
        self.registry = registry
        self.classifier = classifier
        self._ratings = ratings
        self._stats = stats
        self.dimensions = list(dimensions)
        self.aggregation = AggregationEngine(registry, ratings)

    def validate_levels(self, levels: LevelAssignment | Mapping[str, str]) -> LevelAssignment:
        """Check every level key and dimension name before anything is written."""
        assignment = (
            levels if isinstance(levels, LevelAssignment) else LevelAssignment.from_mapping(levels)
        )
        if not assignment.overall:
            raise MissingFieldError(OVERALL)
        self.registry.lookup(assignment.overall)
        for dimension, key in assignment.dimensions.items():
            if dimension not in self.dimensions:
                raise ValidationError(
                    f"Unknown rating dimension '{dimension}'",
                    f"Use one of: {', '.join(self.dimensions)}" if self.dimensions else None,
                )
            self.registry.lookup(key)
        return assignment

    async def submit_rating(
        self,
        content_id: str,
        rater_id: str,
        levels: LevelAssignment | Mapping[str, str],
        comment: str | None = None,
        tags: Iterable[str] | None = None,
    ) -> SubmissionResult:
        """Create or replace a rater's rating and refresh the content's stats.

        Args:
            content_id: Content being rated.
            rater_id: Authenticated rater.
            levels: Overall level and optional dimension levels.
            comment: Optional free-text comment.
            tags: Optional free-text tags.

        Returns:
            SubmissionResult with the stored rating and fresh stats.

        Raises:
            ValidationError: On missing ids, unknown level keys or dimensions.
            ConflictLostError: If a concurrent submission for the same pair won.
            InvalidLevelReferenceError: If stored ratings reference removed levels.
        """
        if not content_id:
            raise MissingFieldError("content_id")
        if not rater_id:
            raise MissingFieldError("rater_id")
        assignment = self.validate_levels(levels)

        rating = await self._ratings.upsert(
            content_id,
            rater_id,
            {
                "overall": assignment.overall,
                "dimensions": assignment.dimensions,
                "comment": comment.strip() if comment and comment.strip() else None,
                "tags": normalize_tags(tags),
            },
        )
        stats = await self.recompute_stats(content_id)
        logger.info(
            "rating_submitted",
            content_id=content_id,
            rater_id=rater_id,
            level=assignment.overall,
            count=stats.count,
            mean=stats.mean,
        )
        return SubmissionResult(rating=rating, stats=stats)

    async def delete_rating(self, content_id: str, rater_id: str) -> ContentStats:
        """Remove a rating and return the recomputed stats for its content."""
        removed = await self._ratings.delete(content_id, rater_id)
        if not removed:
            raise NotFoundError("Rating", f"{content_id}/{rater_id}")
        stats = await self.recompute_stats(content_id)
        logger.info("rating_deleted", content_id=content_id, rater_id=rater_id, count=stats.count)
        return stats

    async def recompute_stats(self, content_id: str) -> ContentStats:
        """Recompute and persist stats; content without ratings has no stats row.

        If recomputation fails nothing is written and the prior stats stay.
        """
        stats = await self.aggregation.recompute(content_id)
        if stats.is_empty:
            await self._stats.remove(content_id)
        else:
            await self._stats.put(stats)
        return stats

    async def get_content_stats(self, content_id: str) -> ContentStats:
        """Stored stats, or the zero state when the content has no ratings."""
        stats = await self._stats.get(content_id)
        return stats if stats is not None else ContentStats.empty(content_id)

    async def list_ratings(self, content_id: str) -> list[Rating]:
        return await self._ratings.list_by_content(content_id)

    async def list_ratings_by_rater(self, rater_id: str) -> list[Rating]:
        return await self._ratings.list_by_rater(rater_id)

    async def list_all_stats(self) -> list[ContentStats]:
        return await self._stats.list_all()

    async def group_by_tier(self) -> dict[str, list[ContentStats]]:
        """All rated content grouped into classifier tiers by mean score."""
        all_stats = await self.list_all_stats()
        return self.classifier.group(all_stats, lambda s: s.mean)

    async def summary(self) -> RatingSummary:
        """Total rating count and overall mean score across all content."""
        all_stats = await self.list_all_stats()
        total = sum(s.count for s in all_stats)
        # Level scores are integers, so each content's score sum is exact
        score_sum = sum(round(s.mean * s.count) for s in all_stats)
        return RatingSummary(
            total_ratings=total,
            average_score=score_sum / total if total else 0.0,
            content_count=len(all_stats),
        )
