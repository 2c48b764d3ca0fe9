"""
Evaluation metrics for matching runs.

There is no ground truth for a "good" debate pairing, so evaluation focuses on:
1. Score distribution of the committed matches
2. Coverage (how many users were matched, who was left out)
3. Stability: does shuffling the input order change the set of matches?

Greedy matching is only order-dependent through ties, so a stability rate
below 1.0 indicates tied scores, not a defect.
"""

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, List, Optional, Sequence, Set

import numpy as np

from ..entities import Match, User
from ..matching import GreedyMatcher, unmatched_users

logger = logging.getLogger(__name__)

DEFAULT_QUANTILES = (0.1, 0.25, 0.5, 0.75, 0.9)


@dataclass
class ScoreDistributionStats:
    """Statistics about score distribution."""
    mean: float
    std: float
    min: float
    max: float
    quantiles: Dict[str, float]  # e.g., {"p10": 0.2, "p50": 0.5, "p90": 0.8}

    def to_dict(self) -> Dict[str, Any]:
        return {
            "mean": float(self.mean),
            "std": float(self.std),
            "min": float(self.min),
            "max": float(self.max),
            "quantiles": {k: float(v) for k, v in self.quantiles.items()}
        }


@dataclass
class StabilityMetrics:
    """Order-invariance of a matcher across shuffled inputs."""
    n_permutations: int
    identical_rate: float  # Fraction of runs with the same set of matches
    total_score_diff_mean: float  # Mean |total score - baseline total score|
    total_score_diff_max: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "n_permutations": int(self.n_permutations),
            "identical_rate": float(self.identical_rate),
            "total_score_diff_mean": float(self.total_score_diff_mean),
            "total_score_diff_max": float(self.total_score_diff_max)
        }


@dataclass
class MatchReport:
    """
    Complete evaluation report for one matching run.

    Contains coverage counts, score distribution statistics and, optionally,
    stability metrics.
    """
    run_name: str
    n_users: int
    n_matches: int
    unmatched_ids: List[str]
    total_score: float
    distribution_stats: ScoreDistributionStats
    stability_metrics: Optional[StabilityMetrics] = None
    additional_metrics: Dict[str, Any] = field(default_factory=dict)

    @property
    def n_unmatched(self) -> int:
        return len(self.unmatched_ids)

    def to_dict(self) -> Dict[str, Any]:
        result = {
            "run_name": self.run_name,
            "n_users": int(self.n_users),
            "n_matches": int(self.n_matches),
            "n_unmatched": self.n_unmatched,
            "unmatched_ids": list(self.unmatched_ids),
            "total_score": float(self.total_score),
            "distribution_stats": self.distribution_stats.to_dict(),
            "additional_metrics": self.additional_metrics
        }
        if self.stability_metrics:
            result["stability_metrics"] = self.stability_metrics.to_dict()
        return result

    def save(self, filepath: str) -> None:
        """Save report to JSON file."""
        with open(filepath, "w") as f:
            json.dump(self.to_dict(), f, indent=2)
        logger.info(f"Saved match report to {filepath}")

    def summary(self) -> str:
        """Generate text summary of the report."""
        lines = [
            f"Match Report: {self.run_name}",
            "=" * 50,
            "",
            f"Users:     {self.n_users}",
            f"Matches:   {self.n_matches}",
            f"Unmatched: {self.n_unmatched}",
            f"Total opposition score: {self.total_score:.4f}",
            "",
            "Score Distribution:",
            f"  Mean: {self.distribution_stats.mean:.4f}",
            f"  Std:  {self.distribution_stats.std:.4f}",
            f"  Min:  {self.distribution_stats.min:.4f}",
            f"  Max:  {self.distribution_stats.max:.4f}",
        ]

        for q_name, q_value in self.distribution_stats.quantiles.items():
            lines.append(f"  {q_name}: {q_value:.4f}")

        if self.stability_metrics:
            lines.extend([
                "",
                f"Stability ({self.stability_metrics.n_permutations} shuffled inputs):",
                f"  Identical match sets: {self.stability_metrics.identical_rate:.2%}",
                f"  Total score diff (mean): {self.stability_metrics.total_score_diff_mean:.4f}",
                f"  Total score diff (max):  {self.stability_metrics.total_score_diff_max:.4f}",
            ])

        return "\n".join(lines)


def compute_score_distribution_stats(
    scores: Sequence[float],
    quantiles: Sequence[float] = DEFAULT_QUANTILES
) -> ScoreDistributionStats:
    """
    Compute distribution statistics for match scores.

    NaN scores are ignored. An empty (or all-NaN) input yields zeros.

    Args:
        scores: Opposition scores of committed matches
        quantiles: Quantile values to compute (default: p10, p25, p50, p75, p90)

    Returns:
        ScoreDistributionStats instance
    """
    values = np.asarray(scores, dtype=float)
    values = values[~np.isnan(values)]

    if values.size == 0:
        return ScoreDistributionStats(
            mean=0.0, std=0.0, min=0.0, max=0.0,
            quantiles={f"p{int(q * 100)}": 0.0 for q in quantiles}
        )

    quantile_dict = {
        f"p{int(q * 100)}": float(np.percentile(values, q * 100))
        for q in quantiles
    }

    return ScoreDistributionStats(
        mean=float(np.mean(values)),
        std=float(np.std(values)),
        min=float(np.min(values)),
        max=float(np.max(values)),
        quantiles=quantile_dict
    )


def match_pair_set(matches: Sequence[Match]) -> Set[FrozenSet[str]]:
    """Matches as a set of unordered id pairs (ignores order and listing)."""
    return {frozenset(match.user_ids) for match in matches}


def _total_score(matches: Sequence[Match]) -> float:
    return float(np.nansum([match.score for match in matches])) if matches else 0.0


def compute_stability_metrics(
    matcher: GreedyMatcher,
    users: Sequence[User],
    n_permutations: int = 5,
    random_seed: int = 42,
    baseline: Optional[Sequence[Match]] = None
) -> StabilityMetrics:
    """
    Re-run a matcher on shuffled copies of the input and compare results.

    Args:
        matcher: Matcher under evaluation
        users: Input collection
        n_permutations: Number of shuffled runs
        random_seed: Seed for the shuffles (reproducible)
        baseline: Matches of the unshuffled run (computed if not given)

    Returns:
        StabilityMetrics instance
    """
    if baseline is None:
        baseline = matcher.find_matches(users)

    if n_permutations < 1 or len(users) < 2:
        return StabilityMetrics(
            n_permutations=0,
            identical_rate=1.0,
            total_score_diff_mean=0.0,
            total_score_diff_max=0.0
        )

    rng = np.random.RandomState(random_seed)
    baseline_pairs = match_pair_set(baseline)
    baseline_total = _total_score(baseline)

    n_identical = 0
    score_diffs = []

    for _ in range(n_permutations):
        order = rng.permutation(len(users))
        shuffled = [users[idx] for idx in order]
        matches = matcher.find_matches(shuffled)

        if match_pair_set(matches) == baseline_pairs:
            n_identical += 1
        score_diffs.append(abs(_total_score(matches) - baseline_total))

    identical_rate = n_identical / n_permutations
    if identical_rate < 1.0:
        logger.info(f"Match set changed in {n_permutations - n_identical}/{n_permutations} shuffled runs")

    return StabilityMetrics(
        n_permutations=n_permutations,
        identical_rate=identical_rate,
        total_score_diff_mean=float(np.mean(score_diffs)),
        total_score_diff_max=float(np.max(score_diffs))
    )


def create_match_report(
    run_name: str,
    users: Sequence[User],
    matches: Sequence[Match],
    stability_metrics: Optional[StabilityMetrics] = None,
    quantiles: Sequence[float] = DEFAULT_QUANTILES
) -> MatchReport:
    """
    Create a complete evaluation report.

    Args:
        run_name: Name of the run (e.g. the scoring strategy)
        users: Users passed to the matcher
        matches: Matches returned by the matcher
        stability_metrics: Optional stability analysis
        quantiles: Quantiles to compute

    Returns:
        MatchReport instance
    """
    scores = [match.score for match in matches]

    return MatchReport(
        run_name=run_name,
        n_users=len(users),
        n_matches=len(matches),
        unmatched_ids=[user.id for user in unmatched_users(users, matches)],
        total_score=_total_score(matches),
        distribution_stats=compute_score_distribution_stats(scores, quantiles),
        stability_metrics=stability_metrics,
        additional_metrics={"n_nan_scores": int(np.isnan(np.asarray(scores, dtype=float)).sum())}
    )
