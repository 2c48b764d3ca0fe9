"""
Match insights.

Explains a matching run in terms of individual questions:

- Top differences: the questions on which two matched users disagree most
- Hot takes: a user's answers that sit furthest from the neutral midpoint

Both work on the raw opinion vectors and need no scoring strategy.
"""

import logging
from typing import Dict, List, Optional, Sequence

import numpy as np

from ..entities import HotTake, Match, TopDifference, User

logger = logging.getLogger(__name__)

DEFAULT_MIDPOINT = 4  # Neutral answer on a 1-7 scale


def _question_text(question_texts: Optional[Sequence[str]], index: int) -> Optional[str]:
    if question_texts is None or index >= len(question_texts):
        return None
    return question_texts[index]


def compute_top_differences(
    user_a: User,
    user_b: User,
    n: int = 3,
    question_texts: Optional[Sequence[str]] = None
) -> List[TopDifference]:
    """
    Find the questions where two users disagree most.

    Args:
        user_a: First user of the match
        user_b: Second user of the match
        n: Maximum number of differences to return
        question_texts: Optional labels indexed by question position

    Returns:
        Up to n TopDifference objects, largest difference first. Questions
        with identical answers are never reported; equal differences are
        ordered by question index.
    """
    if n < 1:
        return []

    length = min(len(user_a.opinions), len(user_b.opinions))
    a = np.asarray(user_a.opinions[:length])
    b = np.asarray(user_b.opinions[:length])
    diff = np.abs(a - b)

    # Stable sort on negated differences keeps ties in question order
    order = np.argsort(-diff, kind="stable")

    differences = []
    for idx in order[:n]:
        if diff[idx] == 0:
            break
        differences.append(TopDifference(
            question_index=int(idx),
            user1_value=int(a[idx]),
            user2_value=int(b[idx]),
            question_text=_question_text(question_texts, int(idx))
        ))
    return differences


def _stance(offset: float) -> str:
    """Map a signed distance from the midpoint to a stance label."""
    if offset >= 2:
        return "strongly_agree"
    if offset >= 1:
        return "agree"
    if offset <= -2:
        return "strongly_disagree"
    if offset <= -1:
        return "disagree"
    return "neutral"


def compute_hot_takes(
    user: User,
    midpoint: float = DEFAULT_MIDPOINT,
    min_intensity: float = 2,
    question_texts: Optional[Sequence[str]] = None
) -> List[HotTake]:
    """
    Find a user's most extreme answers.

    Args:
        user: User to analyse
        midpoint: Neutral answer on the scale
        min_intensity: Minimum distance from the midpoint to qualify
        question_texts: Optional labels indexed by question position

    Returns:
        HotTake objects, most intense first (ties in question order)
    """
    opinions = np.asarray(user.opinions, dtype=float)
    offsets = opinions - midpoint
    intensity = np.abs(offsets)

    candidates = np.flatnonzero(intensity >= min_intensity)
    candidates = candidates[np.argsort(-intensity[candidates], kind="stable")]

    return [
        HotTake(
            question_index=int(idx),
            value=int(user.opinions[idx]),
            intensity=float(intensity[idx]),
            stance=_stance(offsets[idx]),
            question_text=_question_text(question_texts, int(idx))
        )
        for idx in candidates
    ]


def explain_matches(
    users: Sequence[User],
    matches: Sequence[Match],
    n_differences: int = 3,
    question_texts: Optional[Sequence[str]] = None
) -> List[Dict]:
    """
    Attach top differences to every match.

    Args:
        users: Users of the run (looked up by id)
        matches: Matches returned by the matcher
        n_differences: Differences reported per match
        question_texts: Optional question labels

    Returns:
        List of match dictionaries with a "top_differences" entry
    """
    users_by_id = {user.id: user for user in users}
    explained = []

    for match in matches:
        differences = compute_top_differences(
            users_by_id[match.user1_id],
            users_by_id[match.user2_id],
            n=n_differences,
            question_texts=question_texts
        )
        entry = match.to_dict()
        entry["top_differences"] = [d.to_dict() for d in differences]
        explained.append(entry)

    logger.debug(f"Explained {len(explained)} matches")
    return explained
