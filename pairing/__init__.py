"""
Opposition Pairing

This package pairs users holding numeric opinion vectors into disjoint
two-person matches that maximize how strongly the two sides disagree.

Key Design Decisions:
- Scoring is pluggable: any ScoringStrategy can drive the matcher
- Matching is greedy: highest-scoring compatible pairs are committed first
- Ties are broken by input order so identical inputs give identical matches
- The engine is stateless; every run is independent
"""

__version__ = "1.0.0"
