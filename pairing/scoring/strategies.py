"""
Opposition scoring strategies.

A scoring strategy turns two users into a single real number describing how
strongly they disagree. Higher scores mean a more desirable debate pairing.

Strategy Types:
- Simple difference: mean of |A - B| per question
- Euclidean: straight-line distance between the two opinion vectors
- Polarization: |A - B| with extra weight when the answers fall on
  opposite sides of the neutral midpoint

Every strategy is pure and symmetric in its arguments. When the two opinion
vectors have different lengths, both are truncated to the shorter one.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, Tuple

import numpy as np
from scipy.spatial import distance

from ..entities import User


class ScoringStrategy(ABC):
    """Capability interface consumed by the matcher."""

    name: str = "base"

    @abstractmethod
    def calculate_score(self, user_a: User, user_b: User) -> float:
        """
        Compute the opposition score between two users.

        Args:
            user_a: First user (lower input index by convention)
            user_b: Second user

        Returns:
            Opposition score, higher = more opposed
        """

    def get_params(self) -> Dict[str, Any]:
        """Return the fixed configuration of this strategy."""
        return {}


def _aligned_opinions(user_a: User, user_b: User) -> Tuple[np.ndarray, np.ndarray]:
    """Return both opinion vectors as float arrays truncated to a common length."""
    length = min(len(user_a.opinions), len(user_b.opinions))
    a = np.asarray(user_a.opinions[:length], dtype=float)
    b = np.asarray(user_b.opinions[:length], dtype=float)
    return a, b


class SimpleDifferenceScorer(ScoringStrategy):
    """Mean absolute per-question difference."""

    name = "simple_difference"

    def calculate_score(self, user_a: User, user_b: User) -> float:
        a, b = _aligned_opinions(user_a, user_b)
        return float(np.mean(np.abs(a - b)))

    def __repr__(self) -> str:
        return "SimpleDifferenceScorer()"


@dataclass(frozen=True)
class EuclideanScorer(ScoringStrategy):
    """
    Euclidean distance between opinion vectors.

    Attributes:
        normalize: Divide by sqrt(number of questions) so scores are
            comparable across questionnaires of different length
    """
    name = "euclidean"

    normalize: bool = True

    def calculate_score(self, user_a: User, user_b: User) -> float:
        a, b = _aligned_opinions(user_a, user_b)
        dist = distance.euclidean(a, b)
        if self.normalize:
            dist /= np.sqrt(len(a))
        return float(dist)

    def get_params(self) -> Dict[str, Any]:
        return {"normalize": self.normalize}


@dataclass(frozen=True)
class PolarizationScorer(ScoringStrategy):
    """
    Difference score that rewards answers on opposite sides of neutral.

    For each question the absolute difference is multiplied by
    (1 + opposite_side_weight) when one user is strictly above the midpoint
    and the other strictly below it. The result is averaged over questions.

    Attributes:
        midpoint: Neutral answer on the scale (4 on a 1-7 scale)
        opposite_side_weight: Extra weight for crossing the midpoint
    """
    name = "polarization"

    midpoint: float = 4.0
    opposite_side_weight: float = 1.0

    def __post_init__(self):
        """Validate weighting configuration."""
        if self.opposite_side_weight < 0:
            raise ValueError(
                f"opposite_side_weight must be >= 0, got {self.opposite_side_weight}"
            )

    def calculate_score(self, user_a: User, user_b: User) -> float:
        a, b = _aligned_opinions(user_a, user_b)
        diff = np.abs(a - b)
        # Product of signed offsets is negative only when the answers straddle the midpoint
        opposite = (a - self.midpoint) * (b - self.midpoint) < 0
        weights = np.where(opposite, 1.0 + self.opposite_side_weight, 1.0)
        return float(np.mean(diff * weights))

    def get_params(self) -> Dict[str, Any]:
        return {
            "midpoint": self.midpoint,
            "opposite_side_weight": self.opposite_side_weight
        }
