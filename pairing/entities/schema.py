"""
Entity definitions for opposition pairing.

Defines the records that flow through a matching run:

- User: identity + opinion vector (one integer answer per question)
- Match: two user identities plus the opposition score that paired them
- TopDifference: a question on which two matched users disagree
- HotTake: one of a user's most extreme answers

All entities are immutable. Users are validated at construction time so the
matching engine never sees an empty opinion vector.
"""

import numbers
import uuid
from dataclasses import dataclass
from typing import Any, Dict, Optional, Sequence, Tuple


@dataclass(frozen=True)
class User:
    """
    A participant with a position on each question.

    Attributes:
        id: Unique identifier (caller-supplied or generated by `create`)
        opinions: Ordered answers, one integer per question
    """
    id: str
    opinions: Tuple[int, ...]

    def __post_init__(self):
        """Validate identity and normalise the opinion vector to a tuple of ints."""
        if not isinstance(self.id, str) or not self.id:
            raise ValueError(f"User id must be a non-empty string, got {self.id!r}")

        opinions = tuple(self.opinions)
        if len(opinions) == 0:
            raise ValueError(f"User {self.id} must have at least one opinion")

        for idx, value in enumerate(opinions):
            if isinstance(value, bool) or not isinstance(value, numbers.Integral):
                raise ValueError(
                    f"User {self.id} opinion {idx} must be an integer, got {value!r}"
                )

        object.__setattr__(self, "opinions", tuple(int(v) for v in opinions))

    @classmethod
    def create(cls, opinions: Sequence[int], user_id: Optional[str] = None) -> "User":
        """Create a user, generating an id when none is given."""
        return cls(id=user_id if user_id is not None else uuid.uuid4().hex, opinions=opinions)

    def __len__(self) -> int:
        return len(self.opinions)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {"id": self.id, "opinions": list(self.opinions)}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "User":
        """Create from dictionary (id is optional)."""
        return cls.create(data["opinions"], user_id=data.get("id"))


@dataclass(frozen=True)
class Match:
    """
    A committed pairing of two users.

    user1_id is the user that came first in the input collection.
    """
    user1_id: str
    user2_id: str
    score: float

    @property
    def user_ids(self) -> Tuple[str, str]:
        return (self.user1_id, self.user2_id)

    def involves(self, user_id: str) -> bool:
        return user_id in self.user_ids

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "user1_id": self.user1_id,
            "user2_id": self.user2_id,
            "opposition_score": float(self.score)
        }


@dataclass(frozen=True)
class TopDifference:
    """A question where two matched users gave very different answers."""
    question_index: int
    user1_value: int
    user2_value: int
    question_text: Optional[str] = None

    @property
    def difference(self) -> int:
        return abs(self.user1_value - self.user2_value)

    def to_dict(self) -> Dict[str, Any]:
        result = {
            "question_index": self.question_index,
            "user1_value": self.user1_value,
            "user2_value": self.user2_value,
            "difference": self.difference
        }
        if self.question_text is not None:
            result["question_text"] = self.question_text
        return result


@dataclass(frozen=True)
class HotTake:
    """
    An answer far from the neutral midpoint of the scale.

    Attributes:
        question_index: Position of the question in the opinion vector
        value: The user's answer
        intensity: Distance from the scale midpoint
        stance: strongly_agree / agree / neutral / disagree / strongly_disagree
        question_text: Optional question label
    """
    question_index: int
    value: int
    intensity: float
    stance: str
    question_text: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        result = {
            "question_index": self.question_index,
            "value": self.value,
            "intensity": float(self.intensity),
            "stance": self.stance
        }
        if self.question_text is not None:
            result["question_text"] = self.question_text
        return result
