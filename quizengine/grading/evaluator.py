"""
Free-response evaluation by keyword matching.

Marks are proportional to the share of mark-scheme keywords found in the
answer. Matching is lexical: a correct answer phrased without the expected
terms scores low.
"""

from __future__ import annotations

import math
from typing import Sequence

from loguru import logger

from quizengine.models import CheckResult

from .keywords import extract_keywords
from .normalize import flatten_exponents, normalize_math, strip_spaces

# Share of max marks at or above which an answer counts as correct
CORRECT_THRESHOLD = 0.7


def round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def keyword_matches(keyword: str, answer: str) -> bool:
    """Compare a normalized keyword against a normalized answer, most strict first."""
    if not keyword:
        return False
    if keyword in answer:
        return True
    if strip_spaces(keyword) in strip_spaces(answer):
        return True
    if "^" in keyword:
        return flatten_exponents(keyword) in flatten_exponents(answer)
    return False


class FreeResponseEvaluator:
    """Scores free-text answers against a mark scheme."""

    def __init__(self, threshold: float = CORRECT_THRESHOLD):
        self.threshold = threshold

    def evaluate(
        self,
        user_answer: str,
        mark_scheme_answer: str,
        max_marks: int,
        guidance: str | None = None,
        keywords: Sequence[str] | None = None,
    ) -> CheckResult:
        """
        Award partial credit for the keywords an answer contains.

        Args:
            user_answer: Learner's free text
            mark_scheme_answer: Canonical answer text
            max_marks: Marks available for the question
            guidance: Text shown when the answer falls short
                (defaults to the expected answer)
            keywords: Pre-extracted keywords; extracted from the answer
                text when not supplied

        Returns:
            CheckResult with proportional marks and feedback
        """
        terms = list(keywords) if keywords else extract_keywords(mark_scheme_answer)
        normalized_answer = normalize_math(user_answer)

        matched = [term for term in terms if keyword_matches(normalize_math(term), normalized_answer)]

        if terms:
            marks = round_half_up(len(matched) / len(terms) * max_marks)
        else:
            marks = 0
        marks = min(max(marks, 0), max_marks)
        is_correct = bool(terms) and max_marks > 0 and marks >= self.threshold * max_marks

        logger.debug(f"FRQ matched {len(matched)}/{len(terms)} keywords -> {marks}/{max_marks}")

        if is_correct:
            feedback = f"Excellent answer! You included key terms: {', '.join(matched)}"
        else:
            hint = guidance or f"Expected answer: {mark_scheme_answer}"
            feedback = f"Partial credit awarded ({marks}/{max_marks}). {hint}"

        return CheckResult(
            is_correct=is_correct,
            marks_awarded=marks,
            feedback=feedback,
            keywords=terms,
            max_marks=max_marks,
        )
