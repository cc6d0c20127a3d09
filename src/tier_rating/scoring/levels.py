"""Level registry: the ordered catalog of qualitative rating levels."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING

from tier_rating.core.errors import ConfigurationError, UnknownLevelError

if TYPE_CHECKING:
    from tier_rating.core.config import LevelConfig


@dataclass(frozen=True)
class Level:
    """A qualitative rating choice.

    Attributes:
        key: Unique identifier used in stored ratings.
        name: Human-readable name.
        score: Ordinal score (positive integer).
        description: Optional longer description.
        tier: Optional display tier label (e.g. "S级") used for raw grouping.
    """

    key: str
    name: str
    score: int
    description: str | None = None
    tier: str | None = None


class LevelRegistry:
    """Immutable, ordered lookup of levels by key.

    Insertion order is display and rank order. Unknown keys are always
    rejected; nothing defaults silently.
    """

    def __init__(self, levels: Iterable[Level]) -> None:
        self._levels: dict[str, Level] = {}
        for level in levels:
            if level.key in self._levels:
                raise ConfigurationError(f"Duplicate level key '{level.key}'")
            if level.score < 1:
                raise ConfigurationError(
                    f"Level '{level.key}' has non-positive score {level.score}",
                    "Level scores must be positive integers.",
                )
            self._levels[level.key] = level
        if not self._levels:
            raise ConfigurationError("Level registry is empty", "Configure at least one level.")

    @classmethod
    def from_config(cls, levels: Sequence[LevelConfig]) -> LevelRegistry:
        """Build a registry from configuration entries."""
        return cls(
            Level(
                key=lc.key,
                name=lc.name,
                score=lc.score,
                description=lc.description,
                tier=lc.tier,
            )
            for lc in levels
        )

    def lookup(self, key: str) -> Level:
        try:
            return self._levels[key]
        except KeyError:
            raise UnknownLevelError(key, self._levels) from None

    def all_levels(self) -> list[Level]:
        return list(self._levels.values())

    def score_of(self, key: str) -> int:
        return self.lookup(key).score

    def is_valid_level(self, key: str) -> bool:
        return key in self._levels

    @property
    def keys(self) -> list[str]:
        return list(self._levels)

    def __len__(self) -> int:
        return len(self._levels)

    def __contains__(self, key: object) -> bool:
        return key in self._levels
