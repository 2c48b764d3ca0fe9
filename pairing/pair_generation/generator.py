"""
Scored pair generation for opposition matching.

This module enumerates every (User A, User B) pair of a matching run,
scores it with a ScoringStrategy and orders the result for greedy selection.

Key Design Decisions:
- Pairs are unordered: only (i, j) with i < j is generated
- Self-pairs are excluded: (i, i) is never generated
- Enumeration order is row-major (lower i first, then lower j)
- Parallel scoring preserves enumeration order
- Sorting is stable and tolerates non-orderable scores (NaN)
"""

import functools
import logging
import math
from typing import List, NamedTuple, Optional, Sequence, Tuple

from joblib import Parallel, cpu_count, delayed

from ..entities import User
from ..scoring import ScoringStrategy

logger = logging.getLogger(__name__)


class ScoredPair(NamedTuple):
    """Index pair (i < j) into the input collection plus its score."""
    i: int
    j: int
    score: float


def _score_rows(
    scorer: ScoringStrategy,
    users: Sequence[User],
    row_start: int,
    row_end: int
) -> List[ScoredPair]:
    """Score all pairs whose first index lies in [row_start, row_end)."""
    n_users = len(users)
    pairs = []
    for i in range(row_start, row_end):
        for j in range(i + 1, n_users):
            pairs.append(ScoredPair(i, j, scorer.calculate_score(users[i], users[j])))
    return pairs


class ScoredPairGenerator:
    """
    Generator for scored user pairs.

    Attributes:
        scorer: Scoring strategy applied to every pair
        n_jobs: Number of joblib workers for scoring (1 = sequential,
            -1 = all cores)
        chunk_size: Rows per parallel task (default: split evenly per worker)
    """

    def __init__(
        self,
        scorer: ScoringStrategy,
        n_jobs: int = 1,
        chunk_size: Optional[int] = None
    ):
        """
        Initialize the pair generator.

        Args:
            scorer: Scoring strategy used for every pair
            n_jobs: Number of parallel workers for the scoring phase
            chunk_size: Number of first-index rows per parallel task
        """
        if n_jobs == 0:
            raise ValueError("n_jobs must be non-zero")
        if chunk_size is not None and chunk_size < 1:
            raise ValueError(f"chunk_size must be >= 1, got {chunk_size}")

        self.scorer = scorer
        self.n_jobs = n_jobs
        self.chunk_size = chunk_size

    @staticmethod
    def count_pairs(n_users: int) -> int:
        """Number of unordered pairs of distinct users."""
        return n_users * (n_users - 1) // 2

    def generate_scored_pairs(self, users: Sequence[User]) -> List[ScoredPair]:
        """
        Enumerate and score every unordered pair of users.

        Args:
            users: Input collection (order determines enumeration order)

        Returns:
            List of n*(n-1)/2 ScoredPair objects in enumeration order
        """
        n_users = len(users)
        n_pairs = self.count_pairs(n_users)

        if n_pairs == 0:
            return []

        if self.n_jobs == 1 or n_users < 3:
            pairs = _score_rows(self.scorer, users, 0, n_users)
        else:
            pairs = self._generate_parallel(users)

        logger.debug(f"Scored {len(pairs)} pairs from {n_users} users")
        return pairs

    def _generate_parallel(self, users: Sequence[User]) -> List[ScoredPair]:
        """
        Score pairs with joblib, splitting the first index into row chunks.

        Chunks are contiguous and results are concatenated in chunk order, so
        the output is identical to the sequential enumeration.
        """
        n_users = len(users)
        row_ranges = self._row_ranges(n_users)

        logger.debug(f"Scoring {n_users} users in {len(row_ranges)} chunks (n_jobs={self.n_jobs})")

        chunk_results = Parallel(n_jobs=self.n_jobs)(
            delayed(_score_rows)(self.scorer, users, start, end)
            for start, end in row_ranges
        )

        pairs = []
        for chunk in chunk_results:
            pairs.extend(chunk)
        return pairs

    def _row_ranges(self, n_users: int) -> List[Tuple[int, int]]:
        """Split row indices [0, n_users - 1) into contiguous chunks."""
        n_rows = n_users - 1  # The last row has no partner with a higher index
        if self.chunk_size is not None:
            size = self.chunk_size
        else:
            n_workers = self.n_jobs if self.n_jobs > 0 else cpu_count()
            size = max(1, math.ceil(n_rows / (n_workers * 4)))
        return [(start, min(start + size, n_rows)) for start in range(0, n_rows, size)]


def _compare_scores_descending(a: ScoredPair, b: ScoredPair) -> int:
    """
    Comparator for descending score order.

    Values that cannot be ordered (NaN) compare as equal so the sort always
    terminates; stability then keeps them in enumeration order relative to
    their neighbours.
    """
    if a.score > b.score:
        return -1
    if a.score < b.score:
        return 1
    return 0


def sort_scored_pairs(pairs: List[ScoredPair]) -> List[ScoredPair]:
    """
    Sort pairs by score, highest first.

    Python's sort is stable, so pairs with equal scores keep their
    enumeration order (lower i first, then lower j).

    Args:
        pairs: Scored pairs in enumeration order

    Returns:
        New list sorted by descending score
    """
    return sorted(pairs, key=functools.cmp_to_key(_compare_scores_descending))
