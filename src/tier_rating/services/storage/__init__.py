from .base import PendingItemStore, RatingStore, StatsStore, TierListStore
from .database import create_db_engine
from .memory import (
    MemoryPendingItemStore,
    MemoryRatingStore,
    MemoryStatsStore,
    MemoryTierListStore,
)
from .rating_repository import RatingRepository
from .stats_repository import StatsRepository
from .tier_list_repository import PendingItemRepository, TierListRepository

__all__ = [
    "MemoryPendingItemStore",
    "MemoryRatingStore",
    "MemoryStatsStore",
    "MemoryTierListStore",
    "PendingItemRepository",
    "PendingItemStore",
    "RatingRepository",
    "RatingStore",
    "StatsRepository",
    "StatsStore",
    "TierListRepository",
    "TierListStore",
    "create_db_engine",
]
