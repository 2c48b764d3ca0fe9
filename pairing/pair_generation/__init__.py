"""Pair generation module for enumerating and ordering scored user pairs."""

from .generator import ScoredPair, ScoredPairGenerator, sort_scored_pairs

__all__ = ["ScoredPair", "ScoredPairGenerator", "sort_scored_pairs"]
