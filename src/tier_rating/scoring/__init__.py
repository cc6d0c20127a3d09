"""Scoring module: level registry, tier classification, and aggregation."""

from __future__ import annotations

from typing import TYPE_CHECKING

from tier_rating.scoring.aggregation import AggregationEngine, compute_stats
from tier_rating.scoring.classifier import TierClassifier
from tier_rating.scoring.levels import Level, LevelRegistry

if TYPE_CHECKING:
    from tier_rating.core.config import TierRatingConfig


def create_scoring(config: TierRatingConfig) -> tuple[LevelRegistry, TierClassifier]:
    """Create the level registry and classifier described by a config.

    Args:
        config: Deployment configuration.

    Returns:
        Tuple of (registry, classifier bound to that registry).
    """
    registry = LevelRegistry.from_config(config.levels)
    classifier = TierClassifier.from_config(config.classifier, registry=registry)
    return registry, classifier


__all__ = [
    "AggregationEngine",
    "Level",
    "LevelRegistry",
    "TierClassifier",
    "compute_stats",
    "create_scoring",
]
