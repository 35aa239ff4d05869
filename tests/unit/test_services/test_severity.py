"""Unit tests for severity classification."""
import pytest

from wellpulse.core.constants import AMBER, GREEN, RED
from wellpulse.services.severity import classify, response_severity


@pytest.mark.unit
class TestClassify:
    """Precedence table for a single chosen option."""

    @pytest.mark.parametrize("option,is_positive,expected", [
        ("Yes", True, GREEN),
        ("Yes", False, RED),
        ("No", True, RED),
        ("No", False, GREEN),
        ("Neutral", True, AMBER),
        ("Neutral", False, AMBER),
        ("Prefer not to say", True, AMBER),
        ("Sometimes", True, AMBER),
        ("", True, AMBER),
    ])
    def test_precedence_table(self, option, is_positive, expected):
        assert classify(option, is_positive) == expected

    def test_case_insensitive(self):
        assert classify("YES, mostly", True) == GREEN
        assert classify("nO", True) == RED

    def test_neutral_wins_over_yes_and_no(self):
        assert classify("Neutral - yes and no", True) == AMBER

    def test_prefer_not_wins_over_no(self):
        """'prefer not' contains 'no' but is checked first."""
        assert classify("I prefer not to answer", False) == AMBER

    def test_substring_match_is_preserved(self):
        """'Not really' contains 'no'; the heuristic deliberately stays naive."""
        assert classify("Not really", True) == RED
        assert classify("I don't know", True) == RED

    def test_none_option_is_amber(self):
        assert classify(None) == AMBER

    def test_polarity_defaults_to_positive(self):
        assert classify("Yes") == GREEN


@pytest.mark.unit
class TestResponseSeverity:
    """Aggregate severity of one response."""

    def test_any_red_wins(self):
        answers = [
            {"option": "Yes", "is_positive": True},
            {"option": "No", "is_positive": True},
            {"option": "Neutral", "is_positive": True},
        ]
        assert response_severity(answers) == RED

    def test_green_beats_amber(self):
        answers = [{"option": "Neutral"}, {"option": "Yes", "is_positive": True}]
        assert response_severity(answers) == GREEN

    def test_all_amber(self):
        assert response_severity([{"option": "Neutral"}, {"option": "Sometimes"}]) == AMBER

    def test_empty_is_amber(self):
        assert response_severity([]) == AMBER

    def test_missing_polarity_is_positive(self):
        assert response_severity([{"option": "No"}]) == RED
        assert response_severity([{"option": "No", "is_positive": None}]) == RED

    def test_negative_question_flips(self):
        """'Do you feel burnt out?' answered 'No' is good news."""
        assert response_severity([{"option": "No", "is_positive": False}]) == GREEN
