from tier_rating.services.pending import PendingItemService
from tier_rating.services.rating import (
    LevelAssignment,
    RatingService,
    RatingSummary,
    SubmissionResult,
)
from tier_rating.services.tier_list import TierListService

__all__ = [
    "LevelAssignment",
    "PendingItemService",
    "RatingService",
    "RatingSummary",
    "SubmissionResult",
    "TierListService",
]
