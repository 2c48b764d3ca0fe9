"""Scoring module for pairwise opposition scores."""

from .strategies import (
    ScoringStrategy,
    SimpleDifferenceScorer,
    EuclideanScorer,
    PolarizationScorer
)
from .registry import SCORER_REGISTRY, get_scorer, scorer_from_config

__all__ = [
    "ScoringStrategy",
    "SimpleDifferenceScorer",
    "EuclideanScorer",
    "PolarizationScorer",
    "SCORER_REGISTRY",
    "get_scorer",
    "scorer_from_config"
]
