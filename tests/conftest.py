"""Shared fixtures for opposition pairing tests"""

from pathlib import Path

import pytest

from pairing.entities import User
from pairing.scoring import ScoringStrategy


class TableScorer(ScoringStrategy):
    """Scorer that looks pair scores up by user id (order-independent)"""

    name = "table"

    def __init__(self, table, default=0.0):
        self.table = {frozenset(pair): score for pair, score in table.items()}
        self.default = default

    def calculate_score(self, user_a, user_b):
        return self.table.get(frozenset((user_a.id, user_b.id)), self.default)


@pytest.fixture
def project_dir():
    return Path(__file__).parent.parent


@pytest.fixture
def scenario_users():
    """Four users where A and B disagree on every question"""
    return [
        User("A", [1, 2, 3]),
        User("B", [7, 6, 5]),
        User("C", [4, 4, 4]),
        User("D", [1, 7, 1]),
    ]


@pytest.fixture
def table_users():
    return [User(uid, [4]) for uid in ["a", "b", "c", "d"]]


@pytest.fixture
def make_table_scorer():
    return TableScorer
