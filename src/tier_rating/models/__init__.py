from tier_rating.models.pending import PendingItem
from tier_rating.models.rating import Rating
from tier_rating.models.stats import ContentStats, ContentStatsRecord
from tier_rating.models.tier_list import TierList

__all__ = ["ContentStats", "ContentStatsRecord", "PendingItem", "Rating", "TierList"]
