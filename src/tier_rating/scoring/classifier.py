"""Score-threshold tier classification."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
from typing import TYPE_CHECKING, TypeVar

from tier_rating.core.errors import ConfigurationError

if TYPE_CHECKING:
    from tier_rating.core.config import ClassifierConfig
    from tier_rating.scoring.levels import LevelRegistry

T = TypeVar("T")


class TierClassifier:
    """Map a numeric score to a coarse tier label.

    Thresholds are (min_score_inclusive, label) pairs, most selective
    first. The first threshold the score reaches wins; scores below every
    threshold get the fallback label.

    Attributes:
        thresholds: Strictly decreasing (bound, label) pairs.
        fallback: Label for scores below every threshold.
    """

    def __init__(
        self,
        thresholds: Sequence[tuple[float, str]],
        fallback: str,
        registry: LevelRegistry | None = None,
    ) -> None:
        """Initialize classifier.

        Args:
            thresholds: (min_score_inclusive, label) pairs, descending by bound.
            fallback: Label for scores below every threshold.
            registry: Level registry used by ``classify_raw_level``.
        """
        if not thresholds:
            raise ConfigurationError("Classifier needs at least one threshold")
        bounds = [bound for bound, _ in thresholds]
        for higher, lower in zip(bounds, bounds[1:], strict=False):
            if lower >= higher:
                raise ConfigurationError(
                    f"Thresholds must be strictly decreasing (got {higher} then {lower})",
                    "Order thresholds from the most selective bound to the least.",
                )
        self.thresholds = [(float(bound), label) for bound, label in thresholds]
        self.fallback = fallback
        self._registry = registry

    @classmethod
    def from_config(
        cls, config: ClassifierConfig, registry: LevelRegistry | None = None
    ) -> TierClassifier:
        return cls(
            [(t.min_score, t.label) for t in config.thresholds],
            config.fallback,
            registry=registry,
        )

    @property
    def labels(self) -> list[str]:
        """All labels in rank order, fallback last."""
        labels = [label for _, label in self.thresholds]
        if self.fallback not in labels:
            labels.append(self.fallback)
        return labels

    def classify(self, score: float) -> str:
        for bound, label in self.thresholds:
            if score >= bound:
                return label
        return self.fallback

    def classify_raw_level(self, level_key: str) -> str:
        """Tier for a raw level assignment.

        Uses the level's own tier label when configured, otherwise the
        classification of its score.
        """
        if self._registry is None:
            raise ConfigurationError(
                "Classifier has no level registry",
                "Pass registry= when constructing the classifier.",
            )
        level = self._registry.lookup(level_key)
        if level.tier:
            return level.tier
        return self.classify(level.score)

    def group(self, items: Iterable[T], score_of: Callable[[T], float]) -> dict[str, list[T]]:
        """Group items by classified score.

        Every label is present in rank order; items within a label are
        ordered by score descending (stable for ties).
        """
        groups: dict[str, list[T]] = {label: [] for label in self.labels}
        for item in sorted(items, key=score_of, reverse=True):
            groups[self.classify(score_of(item))].append(item)
        return groups
