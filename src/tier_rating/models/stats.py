from datetime import UTC, datetime
from typing import TYPE_CHECKING

from pydantic import BaseModel, Field as PydanticField
from sqlalchemy import Column
from sqlmodel import JSON, Field, SQLModel

if TYPE_CHECKING:
    from tier_rating.scoring.levels import LevelRegistry


class ContentStats(BaseModel):
    """Aggregate count, mean score, and level distribution for one content item.

    The distribution is sparse: only levels observed at least once appear,
    in registry order.
    """

    content_id: str
    count: int = PydanticField(default=0, ge=0)
    mean: float = 0.0
    distribution: dict[str, int] = PydanticField(default_factory=dict)

    @classmethod
    def empty(cls, content_id: str) -> "ContentStats":
        """Zero state for content without ratings."""
        return cls(content_id=content_id)

    @property
    def is_empty(self) -> bool:
        return self.count == 0

    def dense_distribution(self, registry: "LevelRegistry") -> dict[str, int]:
        """Distribution with every registry level present, zero-filled."""
        return {key: self.distribution.get(key, 0) for key in registry.keys}


class ContentStatsRecord(SQLModel, table=True):
    """Persisted row for cached ContentStats."""

    __tablename__ = "content_stats"

    content_id: str = Field(primary_key=True)
    count: int
    mean: float
    distribution: dict[str, int] = Field(default_factory=dict, sa_column=Column(JSON))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @classmethod
    def from_stats(cls, stats: ContentStats) -> "ContentStatsRecord":
        return cls(
            content_id=stats.content_id,
            count=stats.count,
            mean=stats.mean,
            distribution=dict(stats.distribution),
        )

    def to_stats(self) -> "ContentStats":
        return ContentStats(
            content_id=self.content_id,
            count=self.count,
            mean=self.mean,
            distribution=dict(self.distribution),
        )
