"""Matching module for pairing users with opposing opinions."""

from .greedy import GreedyMatcher, unmatched_users

__all__ = ["GreedyMatcher", "unmatched_users"]
