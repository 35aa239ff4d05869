"""Unit tests for theme extraction."""
import pytest

from wellpulse.services.themes import count_themes, themes_in_answer, top_themes


@pytest.mark.unit
class TestThemesInAnswer:

    def test_scans_question_and_note(self):
        answer = {"question": "How is your workload?", "description": "Poor sleep lately"}
        assert themes_in_answer(answer) == ["workload", "sleep"]

    def test_case_insensitive(self):
        assert themes_in_answer({"question": "STRESS levels", "description": ""}) == ["stress"]

    def test_term_counted_once_per_answer(self):
        answer = {"question": "team team team", "description": "my team"}
        assert count_themes([answer]) == {"team": 1}

    def test_missing_fields(self):
        assert themes_in_answer({}) == []

    def test_substring_matches(self):
        """'teamwork' contains 'team', 'supportive' contains 'support'."""
        assert themes_in_answer({"question": "Is teamwork supportive?"}) == ["support", "team"]


@pytest.mark.unit
class TestTopThemes:

    def test_sorted_by_count_desc(self):
        counts = {"team": 5, "stress": 2, "fatigue": 3}
        assert top_themes(counts) == [
            {"topic": "team", "count": 5},
            {"topic": "fatigue", "count": 3},
            {"topic": "stress", "count": 2},
        ]

    def test_ties_follow_vocabulary_order(self):
        counts = {"team": 2, "workload": 2, "fatigue": 2, "sleep": 2}
        assert [t["topic"] for t in top_themes(counts)] == ["fatigue", "workload", "sleep"]

    def test_limit(self):
        counts = {"fatigue": 4, "workload": 3, "support": 2, "stress": 1}
        assert len(top_themes(counts, limit=4)) == 4
        assert len(top_themes(counts, limit=3)) == 3

    def test_zero_counts_dropped(self):
        assert top_themes({"fatigue": 0, "sleep": 1}) == [{"topic": "sleep", "count": 1}]

    def test_empty(self):
        assert top_themes({}) == []

    def test_end_to_end_counts(self):
        answers = [
            {"question": "Workload ok?", "description": "too much workload, no sleep"},
            {"question": "Workload ok?", "description": ""},
            {"question": "Manager support?", "description": "stress"},
        ]
        assert top_themes(count_themes(answers)) == [
            {"topic": "workload", "count": 2},
            {"topic": "support", "count": 1},
            {"topic": "stress", "count": 1},
        ]
