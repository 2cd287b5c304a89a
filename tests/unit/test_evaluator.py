"""
Unit tests for free-response evaluation.

Tests cover:
- Proportional partial credit with round-half-up
- The 70% correctness threshold
- Keyword source (stored list vs extracted)
- Mathematical equivalence matching

Run: pytest tests/unit/test_evaluator.py -v
"""

import pytest

from quizengine.grading.evaluator import (
    CORRECT_THRESHOLD,
    FreeResponseEvaluator,
    keyword_matches,
    round_half_up,
)

MITOCHONDRIA = "Mitochondria: powerhouse of the cell"


@pytest.fixture
def evaluator():
    return FreeResponseEvaluator()


class TestRounding:
    """Test round_half_up."""

    @pytest.mark.parametrize("value, expected", [(0.5, 1), (1.5, 2), (2.5, 3), (1.33, 1), (0.49, 0)])
    def test_half_rounds_up(self, value, expected):
        assert round_half_up(value) == expected


class TestKeywordScoring:
    """Test marks for the mitochondria mark scheme (2 marks, 3 keywords)."""

    def test_keywords_extracted_from_answer_text(self, evaluator):
        result = evaluator.evaluate("anything", MITOCHONDRIA, 2)
        assert set(result.keywords) == {"mitochondria", "powerhouse", "cell"}

    def test_two_of_three_keywords(self, evaluator):
        """'cell' is missing: round(2/3 * 2) = 1 mark, below 70 %."""
        result = evaluator.evaluate("the mitochondria is the powerhouse", MITOCHONDRIA, 2)

        assert result.marks_awarded == 1
        assert result.is_correct is False
        assert result.feedback.startswith("Partial credit awarded (1/2).")

    def test_all_keywords(self, evaluator):
        result = evaluator.evaluate("The mitochondria is the powerhouse of the cell", MITOCHONDRIA, 2)

        assert result.marks_awarded == 2
        assert result.is_correct is True
        assert result.feedback.startswith("Excellent answer! You included key terms:")
        assert "powerhouse" in result.feedback

    def test_no_keywords(self, evaluator):
        result = evaluator.evaluate("I don't know", MITOCHONDRIA, 2)

        assert result.marks_awarded == 0
        assert result.is_correct is False
        assert f"Expected answer: {MITOCHONDRIA}" in result.feedback

    def test_guidance_replaces_expected_answer(self, evaluator):
        result = evaluator.evaluate("no idea", MITOCHONDRIA, 2, guidance="Name the organelle.")
        assert result.feedback == "Partial credit awarded (0/2). Name the organelle."

    def test_marks_bounded(self, evaluator):
        result = evaluator.evaluate("mitochondria powerhouse cell cell cell", MITOCHONDRIA, 2)
        assert 0 <= result.marks_awarded <= 2

    def test_answer_without_keywords_scores_zero(self, evaluator):
        """Mark scheme made only of stop-words and short tokens."""
        result = evaluator.evaluate("it is", "it is so", 3)
        assert result.keywords == []
        assert result.marks_awarded == 0
        assert result.is_correct is False

    def test_monotonic_in_matched_keywords(self, evaluator):
        answers = [
            "nothing relevant",
            "mitochondria",
            "mitochondria powerhouse",
            "mitochondria powerhouse cell",
        ]
        marks = [evaluator.evaluate(a, MITOCHONDRIA, 5).marks_awarded for a in answers]
        assert marks == sorted(marks)

    @pytest.mark.parametrize(
        "answer, max_marks, marks, correct",
        [
            # 2 of 3 keywords
            ("osmosis across a membrane", 2, 1, False),
            ("osmosis across a membrane", 3, 2, False),
            ("osmosis across a membrane", 10, 7, True),
            # 1 of 3 keywords
            ("osmosis", 3, 1, False),
            # all keywords
            ("water crosses the membrane by osmosis", 3, 3, True),
            ("water crosses the membrane by osmosis", 1, 1, True),
        ],
    )
    def test_correct_at_seventy_percent(self, evaluator, answer, max_marks, marks, correct):
        result = evaluator.evaluate(answer, "unused", max_marks, keywords=["osmosis", "membrane", "water"])

        assert result.marks_awarded == marks
        assert result.is_correct is correct

    def test_threshold_value(self):
        assert CORRECT_THRESHOLD == 0.7

    def test_zero_marks_never_correct(self, evaluator):
        result = evaluator.evaluate("x", "it is", 0)

        assert result.marks_awarded == 0
        assert result.is_correct is False
        assert not result.feedback.startswith("Excellent")

    def test_zero_mark_question_with_keywords_not_correct(self, evaluator):
        result = evaluator.evaluate("osmosis", "unused", 0, keywords=["osmosis"])
        assert result.is_correct is False


class TestStoredKeywords:
    """Pre-extracted keywords take precedence over the answer text."""

    def test_stored_keywords_used(self, evaluator):
        result = evaluator.evaluate(
            "osmosis through a membrane",
            "Water moves by osmosis across a partially permeable membrane",
            2,
            keywords=["osmosis", "membrane"],
        )
        assert result.keywords == ["osmosis", "membrane"]
        assert result.marks_awarded == 2

    def test_empty_stored_list_falls_back_to_extraction(self, evaluator):
        result = evaluator.evaluate("osmosis", "osmosis", 1, keywords=[])
        assert result.keywords == ["osmosis"]
        assert result.is_correct is True


class TestMathMatching:
    """Test equivalence of written and symbolic maths."""

    @pytest.mark.parametrize("answer", ["x squared", "x**2", "x ^ 2", "x^(2)"])
    def test_square_forms(self, evaluator, answer):
        result = evaluator.evaluate(answer, "x^2", 1, keywords=["x^2"])
        assert result.marks_awarded == 1

    def test_spacing_ignored(self):
        assert keyword_matches("2x+1", "y = 2x + 1")

    def test_grouped_exponent_keyword(self):
        assert keyword_matches("x^{3}", "x^3")

    def test_empty_keyword_never_matches(self):
        assert not keyword_matches("", "anything")
