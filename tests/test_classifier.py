"""Tests for score-threshold tier classification."""

import pytest

from tier_rating.core.config import TierRatingConfig
from tier_rating.core.errors import ConfigurationError, UnknownLevelError
from tier_rating.scoring import create_scoring
from tier_rating.scoring.classifier import TierClassifier
from tier_rating.scoring.levels import Level, LevelRegistry

TEN_POINT = [(9, "S"), (8, "A"), (7, "B"), (6, "C"), (5, "D")]


@pytest.fixture
def classifier() -> TierClassifier:
    return TierClassifier(TEN_POINT, "F")


class TestClassify:
    """Tests for TierClassifier.classify."""

    @pytest.mark.parametrize(
        ("score", "expected"),
        [
            (9.5, "S"),
            (9, "S"),
            (8.0, "A"),
            (7.999, "B"),
            (6, "C"),
            (5.0, "D"),
            (4.9, "F"),
            (0, "F"),
        ],
    )
    def test_thresholds(self, classifier, score, expected):
        """Test first matching threshold wins, fallback below all."""
        assert classifier.classify(score) == expected

    def test_monotonic(self, classifier):
        """Test higher scores never land in a lower tier."""
        labels = classifier.labels
        scores = [x / 10 for x in range(0, 101)]
        ranks = [labels.index(classifier.classify(s)) for s in scores]
        assert ranks == sorted(ranks, reverse=True)

    def test_labels(self, classifier):
        """Test labels are in rank order with fallback last."""
        assert classifier.labels == ["S", "A", "B", "C", "D", "F"]

    def test_fallback_not_duplicated(self):
        """Test fallback equal to a threshold label is listed once."""
        classifier = TierClassifier([(5, "pass")], "pass")
        assert classifier.labels == ["pass"]

    def test_non_decreasing_table_rejected(self):
        """Test the threshold table must be strictly decreasing."""
        with pytest.raises(ConfigurationError, match="strictly decreasing"):
            TierClassifier([(5, "A"), (5, "B")], "F")
        with pytest.raises(ConfigurationError, match="strictly decreasing"):
            TierClassifier([(5, "A"), (7, "S")], "F")

    def test_empty_table_rejected(self):
        """Test at least one threshold is required."""
        with pytest.raises(ConfigurationError):
            TierClassifier([], "F")


class TestClassifyRawLevel:
    """Tests for grouping raw level assignments."""

    @pytest.fixture
    def registry(self) -> LevelRegistry:
        return LevelRegistry(
            [
                Level("la", "拉", 1),
                Level("jia", "佳", 5),
                Level("ding", "顶级", 7, tier="S级"),
            ]
        )

    def test_uses_configured_tier_label(self, registry):
        """Test a level's own tier label wins."""
        classifier = TierClassifier([(6, "S"), (4, "B")], "F", registry=registry)
        assert classifier.classify_raw_level("ding") == "S级"

    def test_falls_back_to_score(self, registry):
        """Test levels without a tier label are classified by score."""
        classifier = TierClassifier([(6, "S"), (4, "B")], "F", registry=registry)
        assert classifier.classify_raw_level("jia") == "B"
        assert classifier.classify_raw_level("la") == "F"

    def test_unknown_level(self, registry):
        """Test unknown level keys are rejected."""
        classifier = TierClassifier([(6, "S")], "F", registry=registry)
        with pytest.raises(UnknownLevelError):
            classifier.classify_raw_level("meh")

    def test_requires_registry(self):
        """Test raw classification needs a registry."""
        classifier = TierClassifier([(6, "S")], "F")
        with pytest.raises(ConfigurationError, match="no level registry"):
            classifier.classify_raw_level("ding")


class TestGroup:
    """Tests for TierClassifier.group."""

    def test_group_keeps_every_label(self, classifier):
        """Test every tier is present and items are sorted by score."""
        items = [("x", 7.5), ("y", 9.1), ("z", 7.9), ("w", 2.0)]
        groups = classifier.group(items, lambda item: item[1])

        assert list(groups) == ["S", "A", "B", "C", "D", "F"]
        assert groups["S"] == [("y", 9.1)]
        assert groups["B"] == [("z", 7.9), ("x", 7.5)]
        assert groups["F"] == [("w", 2.0)]
        assert groups["A"] == []

    def test_create_scoring_from_config(self):
        """Test scoring objects built from the default config."""
        registry, classifier = create_scoring(TierRatingConfig())
        assert classifier.classify(7) == "S"
        assert classifier.classify(1) == "F"
        assert classifier.classify_raw_level("jia") == "B"
        assert registry.score_of("ding") == 7
