"""
Answer grading.

MCQ answers are checked all-or-nothing against a resolved letter;
free-response answers earn keyword-proportional partial credit.
"""

from quizengine.grading.checker import AnswerChecker
from quizengine.grading.evaluator import CORRECT_THRESHOLD, FreeResponseEvaluator
from quizengine.grading.keywords import extract_keywords
from quizengine.grading.normalize import normalize_math
from quizengine.grading.resolver import McqResolver

__all__ = [
    "AnswerChecker",
    "CORRECT_THRESHOLD",
    "FreeResponseEvaluator",
    "McqResolver",
    "extract_keywords",
    "normalize_math",
]
