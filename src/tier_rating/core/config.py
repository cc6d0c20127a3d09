"""Configuration schemas and loading for the tier rating engine."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, field_validator, model_validator

UNRANKED_BUCKET = "unranked"
DATABASE_URL_ENV = "TIER_RATING_DATABASE_URL"


class LevelConfig(BaseModel):
    """A single rating level as written in configuration."""

    key: str
    name: str
    score: int = Field(..., ge=1)
    description: str | None = None
    tier: str | None = None

    @field_validator("key")
    @classmethod
    def validate_key(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Level keys cannot be empty")
        return v


class ThresholdConfig(BaseModel):
    """Lower bound (inclusive) for a classifier label."""

    min_score: float
    label: str


class ClassifierConfig(BaseModel):
    """Score thresholds, most selective first, plus a fallback label."""

    thresholds: list[ThresholdConfig] = Field(..., min_length=1)
    fallback: str = "F"

    @field_validator("thresholds")
    @classmethod
    def validate_descending(cls, v: list[ThresholdConfig]) -> list[ThresholdConfig]:
        bounds = [t.min_score for t in v]
        if any(a <= b for a, b in zip(bounds, bounds[1:], strict=False)):
            raise ValueError("Thresholds must be strictly decreasing by min_score")
        return v


class BucketConfig(BaseModel):
    """A tier-list bucket key with its display name."""

    key: str
    name: str


DEFAULT_LEVELS = [
    LevelConfig(key="la", name="拉", score=1, description="拉完了"),
    LevelConfig(key="hang", name="夯", score=2),
    LevelConfig(key="zhong", name="中", score=3),
    LevelConfig(key="shang", name="上", score=4),
    LevelConfig(key="jia", name="佳", score=5),
    LevelConfig(key="renshang", name="人上人", score=6),
    LevelConfig(key="ding", name="顶级", score=7),
]

DEFAULT_THRESHOLDS = [
    ThresholdConfig(min_score=6.5, label="S"),
    ThresholdConfig(min_score=5.5, label="A"),
    ThresholdConfig(min_score=4.5, label="B"),
    ThresholdConfig(min_score=3.5, label="C"),
    ThresholdConfig(min_score=2.5, label="D"),
]

DEFAULT_BUCKETS = [
    BucketConfig(key="s", name="夯"),
    BucketConfig(key="a", name="顶级"),
    BucketConfig(key="b", name="人上人"),
    BucketConfig(key="c", name="NPC"),
    BucketConfig(key="d", name="拉完了"),
]

DEFAULT_DIMENSIONS = ["technical", "creativity", "execution", "impact"]


class TierRatingConfig(BaseModel):
    """Complete deployment configuration.

    Attributes:
        levels: Ordered rating levels; order is display and rank order.
        classifier: Score thresholds used to derive tiers from mean scores.
        buckets: Tier-list buckets, excluding the reserved unranked bucket.
        dimensions: Names of the optional secondary rating dimensions.
        database_url: SQLAlchemy URL. If None, stores are kept in memory.
    """

    levels: list[LevelConfig] = Field(default_factory=lambda: list(DEFAULT_LEVELS), min_length=1)
    classifier: ClassifierConfig = Field(
        default_factory=lambda: ClassifierConfig(thresholds=list(DEFAULT_THRESHOLDS))
    )
    buckets: list[BucketConfig] = Field(
        default_factory=lambda: list(DEFAULT_BUCKETS), min_length=1
    )
    dimensions: list[str] = Field(default_factory=lambda: list(DEFAULT_DIMENSIONS))
    database_url: str | None = None

    @field_validator("levels")
    @classmethod
    def validate_unique_levels(cls, v: list[LevelConfig]) -> list[LevelConfig]:
        keys = [level.key for level in v]
        if len(keys) != len(set(keys)):
            raise ValueError("Level keys must be unique")
        return v

    @field_validator("buckets")
    @classmethod
    def validate_buckets(cls, v: list[BucketConfig]) -> list[BucketConfig]:
        keys = [bucket.key for bucket in v]
        if len(keys) != len(set(keys)):
            raise ValueError("Bucket keys must be unique")
        if UNRANKED_BUCKET in keys:
            raise ValueError(f"'{UNRANKED_BUCKET}' is reserved and added automatically")
        return v

    @model_validator(mode="after")
    def validate_dimensions(self) -> TierRatingConfig:
        if "overall" in self.dimensions:
            raise ValueError("'overall' is the mandatory dimension and cannot be listed")
        return self

    @property
    def bucket_keys(self) -> list[str]:
        """Configured bucket keys followed by the reserved unranked bucket."""
        return [bucket.key for bucket in self.buckets] + [UNRANKED_BUCKET]

    def bucket_name(self, key: str) -> str:
        """Display name for a bucket key, falling back to the key itself."""
        for bucket in self.buckets:
            if bucket.key == key:
                return bucket.name
        return key

    def get_database_url(self) -> str | None:
        """Database URL from config or environment."""
        return self.database_url or os.environ.get(DATABASE_URL_ENV)


def load_config(path: str | Path) -> TierRatingConfig:
    """Load and validate configuration from YAML file.

    Args:
        path: Path to YAML configuration file.

    Returns:
        Validated TierRatingConfig instance.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        pydantic.ValidationError: If config is invalid.
    """
    config_path = Path(path)
    if not config_path.exists():
        msg = f"Configuration file not found: {config_path}"
        raise FileNotFoundError(msg)

    with config_path.open(encoding="utf-8") as f:
        data: Any = yaml.safe_load(f) or {}

    return TierRatingConfig.model_validate(data)
