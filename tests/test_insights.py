"""Unit tests for match insights"""

import pytest

from pairing.entities import Match, User
from pairing.insights import compute_top_differences, compute_hot_takes, explain_matches
from pairing.insights.explanations import _stance


class TestTopDifferences:
    """Test per-question disagreement ranking"""

    def test_largest_differences_first(self, scenario_users):
        a, b, _, _ = scenario_users
        diffs = compute_top_differences(a, b, n=2)

        assert [d.question_index for d in diffs] == [0, 1]
        assert [d.difference for d in diffs] == [6, 4]
        assert (diffs[0].user1_value, diffs[0].user2_value) == (1, 7)

    def test_zero_differences_excluded(self, scenario_users):
        a, _, _, d = scenario_users
        diffs = compute_top_differences(a, d, n=3)
        assert [x.question_index for x in diffs] == [1, 2]

    def test_ties_in_question_order(self):
        diffs = compute_top_differences(User("x", [1, 1, 1]), User("y", [3, 3, 3]), n=2)
        assert [d.question_index for d in diffs] == [0, 1]

    def test_question_texts(self):
        diffs = compute_top_differences(
            User("x", [1, 7]), User("y", [7, 7]), question_texts=["Q one", "Q two"]
        )
        assert diffs[0].question_text == "Q one"

    def test_missing_question_text(self):
        diffs = compute_top_differences(User("x", [1, 1]), User("y", [1, 7]), question_texts=["only one"])
        assert diffs[0].question_text is None

    def test_non_positive_n(self, scenario_users):
        assert compute_top_differences(scenario_users[0], scenario_users[1], n=0) == []


class TestHotTakes:
    """Test extreme answer detection"""

    def test_ordered_by_intensity(self):
        user = User("x", [1, 4, 7, 5, 2, 6])
        takes = compute_hot_takes(user)

        assert [t.question_index for t in takes] == [0, 2, 4, 5]
        assert [t.intensity for t in takes] == [3.0, 3.0, 2.0, 2.0]
        assert [t.stance for t in takes] == [
            "strongly_disagree", "strongly_agree", "strongly_disagree", "strongly_agree"
        ]

    def test_min_intensity(self):
        user = User("x", [1, 4, 7, 5, 2, 6])
        takes = compute_hot_takes(user, min_intensity=3)
        assert [t.value for t in takes] == [1, 7]

    def test_neutral_user_has_none(self):
        assert compute_hot_takes(User("x", [4, 4, 3, 5])) == []

    def test_custom_midpoint(self):
        takes = compute_hot_takes(User("x", [1, 5]), midpoint=3, min_intensity=2)
        assert [(t.question_index, t.stance) for t in takes] == [(0, "strongly_disagree"), (1, "strongly_agree")]

    @pytest.mark.parametrize("offset,stance", [
        (3, "strongly_agree"),
        (2, "strongly_agree"),
        (1, "agree"),
        (0.5, "neutral"),
        (0, "neutral"),
        (-1, "disagree"),
        (-2, "strongly_disagree"),
    ])
    def test_stance_labels(self, offset, stance):
        assert _stance(offset) == stance


class TestExplainMatches:
    """Test attaching differences to matches"""

    def test_explain_matches(self, scenario_users):
        matches = [Match("A", "B", 4.0), Match("C", "D", 3.0)]
        explained = explain_matches(scenario_users, matches, n_differences=1)

        assert explained[0]["user1_id"] == "A"
        assert explained[0]["opposition_score"] == 4.0
        assert explained[0]["top_differences"] == [
            {"question_index": 0, "user1_value": 1, "user2_value": 7, "difference": 6}
        ]
        assert len(explained[1]["top_differences"]) == 1

    def test_no_matches(self, scenario_users):
        assert explain_matches(scenario_users, []) == []
