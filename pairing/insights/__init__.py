"""Insights module explaining matches question by question."""

from .explanations import compute_top_differences, compute_hot_takes, explain_matches

__all__ = ["compute_top_differences", "compute_hot_takes", "explain_matches"]
