"""
Greedy matching of users with opposing opinions.

Algorithm:
1. Score every unordered pair of users: O(n^2) scorer calls
2. Sort pairs by score, highest first (stable): O(n^2 log n)
3. Walk the sorted pairs and commit a pair when both users are still
   unmatched: O(n^2)

This is the standard greedy heuristic for maximum-weight matching. It is not
guaranteed optimal: committing a high-scoring pair early can block two pairs
elsewhere whose combined score is higher. Speed is preferred over optimality.
"""

import logging
from typing import List, Sequence, Set

from ..entities import Match, User
from ..pair_generation import ScoredPair, ScoredPairGenerator, sort_scored_pairs
from ..scoring import ScoringStrategy

logger = logging.getLogger(__name__)


class GreedyMatcher:
    """
    Pairs users so that the most opposed compatible pairs are matched first.

    The scoring strategy is bound at construction and cannot be replaced,
    so one matcher can be shared between independent runs.

    Attributes:
        scorer: Scoring strategy (read-only)
        n_jobs: Parallel workers for the scoring phase
    """

    def __init__(self, scorer: ScoringStrategy, n_jobs: int = 1):
        """
        Initialize the greedy matcher.

        Args:
            scorer: Any ScoringStrategy implementation
            n_jobs: Number of joblib workers used to score pairs (1 = sequential)
        """
        self._scorer = scorer
        self._pair_generator = ScoredPairGenerator(scorer, n_jobs=n_jobs)

    @property
    def scorer(self) -> ScoringStrategy:
        return self._scorer

    @property
    def n_jobs(self) -> int:
        return self._pair_generator.n_jobs

    def find_matches(self, users: Sequence[User]) -> List[Match]:
        """
        Find matches for all users using the greedy algorithm.

        Args:
            users: Users to match (order only affects tie-breaking)

        Returns:
            Matches in the order they were committed (descending score).
            With an odd number of users one user is left unmatched.
        """
        if len(users) < 2:
            return []

        pairs = self._pair_generator.generate_scored_pairs(users)
        pairs = sort_scored_pairs(pairs)
        matches = self._greedy_select(users, pairs)

        logger.info(
            f"Matched {len(matches)} pairs from {len(users)} users "
            f"({len(users) - 2 * len(matches)} unmatched)"
        )
        return matches

    def _greedy_select(self, users: Sequence[User], pairs: List[ScoredPair]) -> List[Match]:
        """
        Greedily commit pairs from a list sorted by descending score.

        A user that is already matched is never reconsidered, even with a
        different partner at a lower score.
        """
        matched: Set[str] = set()
        matches = []

        for i, j, score in pairs:
            user_i_id = users[i].id
            user_j_id = users[j].id

            if user_i_id in matched or user_j_id in matched:
                continue

            matched.add(user_i_id)
            matched.add(user_j_id)
            matches.append(Match(user1_id=user_i_id, user2_id=user_j_id, score=score))

        return matches


def unmatched_users(users: Sequence[User], matches: Sequence[Match]) -> List[User]:
    """
    Return the users that appear in no match, in input order.

    Args:
        users: The collection passed to find_matches
        matches: Result of find_matches

    Returns:
        List of unmatched users
    """
    matched_ids = set()
    for match in matches:
        matched_ids.update(match.user_ids)
    return [user for user in users if user.id not in matched_ids]
