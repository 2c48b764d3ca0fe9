"""Evaluation module for matching run analysis."""

from .metrics import (
    compute_score_distribution_stats,
    compute_stability_metrics,
    match_pair_set,
    MatchReport,
    create_match_report
)

__all__ = [
    "compute_score_distribution_stats",
    "compute_stability_metrics",
    "match_pair_set",
    "MatchReport",
    "create_match_report"
]
