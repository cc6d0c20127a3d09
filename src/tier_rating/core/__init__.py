"""Core configuration and errors for the tier rating engine."""

from tier_rating.core.config import (
    UNRANKED_BUCKET,
    BucketConfig,
    ClassifierConfig,
    LevelConfig,
    ThresholdConfig,
    TierRatingConfig,
    load_config,
)
from tier_rating.core.errors import (
    ConfigurationError,
    ConflictLostError,
    DuplicateItemError,
    InvalidLevelReferenceError,
    MissingFieldError,
    NotFoundError,
    TierRatingError,
    UnknownBucketError,
    UnknownLevelError,
    ValidationError,
)

__all__ = [
    "UNRANKED_BUCKET",
    "BucketConfig",
    "ClassifierConfig",
    "LevelConfig",
    "ThresholdConfig",
    "TierRatingConfig",
    "load_config",
    "ConfigurationError",
    "ConflictLostError",
    "DuplicateItemError",
    "InvalidLevelReferenceError",
    "MissingFieldError",
    "NotFoundError",
    "TierRatingError",
    "UnknownBucketError",
    "UnknownLevelError",
    "ValidationError",
]
