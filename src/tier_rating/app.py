"""Wiring of registry, classifier, stores, and services from configuration."""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from typing import TYPE_CHECKING

import structlog

from tier_rating.core.config import TierRatingConfig
from tier_rating.scoring import create_scoring
from tier_rating.services import (
    LevelAssignment,
    PendingItemService,
    RatingService,
    SubmissionResult,
    TierListService,
)
from tier_rating.services.storage import (
    MemoryPendingItemStore,
    MemoryRatingStore,
    MemoryStatsStore,
    MemoryTierListStore,
    PendingItemRepository,
    RatingRepository,
    StatsRepository,
    TierListRepository,
    create_db_engine,
)

if TYPE_CHECKING:
    from sqlalchemy import Engine

    from tier_rating.models import ContentStats, TierList

logger = structlog.get_logger()


class TierRatingApp:
    """Entry point for the transport layer.

    Holds one explicitly constructed registry, classifier, and set of stores;
    nothing is kept in module globals.
    """

    def __init__(self, config: TierRatingConfig, database_url: str | None = None) -> None:
        """Build the application.

        Args:
            config: Deployment configuration.
            database_url: Overrides the configured database URL. When neither
                is set, all stores are in memory.
        """
        self.config = config
        self.registry, self.classifier = create_scoring(config)
        self._engine: Engine | None = None

        url = database_url or config.get_database_url()
        if url:
            self._engine = create_db_engine(url)
            ratings, stats = RatingRepository(self._engine), StatsRepository(self._engine)
            tier_lists = TierListRepository(self._engine)
            pending = PendingItemRepository(self._engine)
        else:
            ratings, stats = MemoryRatingStore(), MemoryStatsStore()
            tier_lists = MemoryTierListStore()
            pending = MemoryPendingItemStore()

        self.ratings = RatingService(
            self.registry,
            self.classifier,
            ratings,
            stats,
            dimensions=config.dimensions,
        )
        self.tier_lists = TierListService(config.bucket_keys, tier_lists)
        self.pending = PendingItemService(pending)
        logger.info(
            "app_init",
            levels=len(self.registry),
            storage="sql" if self._engine else "memory",
        )

    async def submit_rating(
        self,
        content_id: str,
        rater_id: str,
        levels: LevelAssignment | Mapping[str, str],
        comment: str | None = None,
        tags: Iterable[str] | None = None,
    ) -> SubmissionResult:
        return await self.ratings.submit_rating(content_id, rater_id, levels, comment, tags)

    async def get_content_stats(self, content_id: str) -> ContentStats:
        return await self.ratings.get_content_stats(content_id)

    async def move_tier_item(
        self, list_id: str, item_ref: str, from_bucket: str, to_bucket: str
    ) -> TierList:
        return await self.tier_lists.move_item(list_id, item_ref, from_bucket, to_bucket)

    async def replace_tier_list_state(
        self, list_id: str, buckets: Mapping[str, Sequence[str]]
    ) -> TierList:
        return await self.tier_lists.replace_buckets(list_id, buckets)

    async def seed_tier_list(self, name: str, description: str | None = None) -> TierList:
        """Create a tier list pre-filled from the current content stats."""
        all_stats = await self.ratings.list_all_stats()
        return await self.tier_lists.seed_from_stats(
            name, all_stats, self.classifier, description=description
        )

    def close(self) -> None:
        """Dispose of the database engine."""
        if self._engine:
            self._engine.dispose()
            self._engine = None
