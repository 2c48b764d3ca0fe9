"""Unit tests for matching run evaluation"""

import json
import math

import pytest

from pairing.entities import Match, User
from pairing.evaluation import (
    compute_score_distribution_stats,
    compute_stability_metrics,
    create_match_report,
    match_pair_set
)
from pairing.matching import GreedyMatcher
from pairing.scoring import SimpleDifferenceScorer


class TestScoreDistribution:
    """Test score statistics"""

    def test_basic_stats(self):
        stats = compute_score_distribution_stats([1.0, 2.0, 3.0], quantiles=[0.5])
        assert stats.mean == pytest.approx(2.0)
        assert stats.min == 1.0
        assert stats.max == 3.0
        assert stats.quantiles == {"p50": pytest.approx(2.0)}

    def test_empty_scores(self):
        stats = compute_score_distribution_stats([])
        assert stats.mean == 0.0
        assert stats.quantiles["p90"] == 0.0

    def test_nan_ignored(self):
        stats = compute_score_distribution_stats([1.0, math.nan, 3.0])
        assert stats.mean == pytest.approx(2.0)


class TestMatchPairSet:
    """Test order-insensitive match comparison"""

    def test_ignores_order_within_and_between_matches(self):
        first = [Match("A", "B", 1.0), Match("C", "D", 0.5)]
        second = [Match("D", "C", 0.5), Match("B", "A", 1.0)]
        assert match_pair_set(first) == match_pair_set(second)


class TestStabilityMetrics:
    """Test order-invariance evaluation"""

    def test_scenario_is_stable(self, scenario_users):
        matcher = GreedyMatcher(SimpleDifferenceScorer())
        stability = compute_stability_metrics(matcher, scenario_users, n_permutations=4, random_seed=0)

        assert stability.n_permutations == 4
        assert stability.identical_rate == 1.0
        assert stability.total_score_diff_max == pytest.approx(0.0)

    def test_no_permutations(self, scenario_users):
        matcher = GreedyMatcher(SimpleDifferenceScorer())
        stability = compute_stability_metrics(matcher, scenario_users, n_permutations=0)
        assert stability.n_permutations == 0
        assert stability.identical_rate == 1.0


class TestMatchReport:
    """Test report creation and output"""

    def test_report_counts(self, scenario_users):
        matches = GreedyMatcher(SimpleDifferenceScorer()).find_matches(scenario_users[:3])
        report = create_match_report("simple_difference", scenario_users[:3], matches)

        assert report.n_users == 3
        assert report.n_matches == 1
        assert report.n_unmatched == 1
        assert report.unmatched_ids == ["C"]
        assert report.total_score == pytest.approx(4.0)

    def test_report_dict_and_summary(self, scenario_users):
        matcher = GreedyMatcher(SimpleDifferenceScorer())
        matches = matcher.find_matches(scenario_users)
        stability = compute_stability_metrics(matcher, scenario_users, n_permutations=2, baseline=matches)
        report = create_match_report("simple_difference", scenario_users, matches, stability)

        data = report.to_dict()
        assert data["n_matches"] == 2
        assert data["total_score"] == pytest.approx(7.0)
        assert data["distribution_stats"]["max"] == pytest.approx(4.0)
        assert data["stability_metrics"]["n_permutations"] == 2
        assert data["additional_metrics"]["n_nan_scores"] == 0

        summary = report.summary()
        assert "Match Report: simple_difference" in summary
        assert "Stability (2 shuffled inputs)" in summary

    def test_save(self, scenario_users, tmp_path):
        report = create_match_report("empty", [], [])
        filepath = tmp_path / "report.json"
        report.save(str(filepath))

        with open(filepath) as f:
            data = json.load(f)
        assert data["n_users"] == 0
        assert data["unmatched_ids"] == []
        assert "stability_metrics" not in data
