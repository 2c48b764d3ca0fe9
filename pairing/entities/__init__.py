"""Entity definitions: users, matches and match insights."""

from .schema import User, Match, TopDifference, HotTake

__all__ = ["User", "Match", "TopDifference", "HotTake"]
