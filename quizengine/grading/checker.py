"""
Answer checker.

Dispatches on question type:
- MCQ: all-or-nothing against the resolved correct letter
- everything else: keyword partial credit via FreeResponseEvaluator

AI-authored questions carry their correct letter inline and are checked
through the same path after conversion.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from quizengine.models import CheckResult, QuizQuestion

from .evaluator import FreeResponseEvaluator
from .keywords import parse_keyword_string
from .resolver import McqResolver

if TYPE_CHECKING:
    from quizengine.generated import GeneratedQuizQuestion

DEFAULT_SUBJECT = "Biology"


class AnswerChecker:
    """Uniform verdicts for MCQ and free-response answers."""

    def __init__(
        self,
        resolver: McqResolver | None = None,
        evaluator: FreeResponseEvaluator | None = None,
        default_subject: str = DEFAULT_SUBJECT,
    ):
        self.resolver = resolver or McqResolver()
        self.evaluator = evaluator or FreeResponseEvaluator()
        self.default_subject = default_subject

    def check(self, user_answer: str, quiz_question: QuizQuestion) -> CheckResult:
        """Score one answer. Blank answers score zero."""
        if not user_answer or not user_answer.strip():
            return CheckResult(
                is_correct=False,
                marks_awarded=0,
                feedback="No answer provided.",
                max_marks=quiz_question.max_marks,
            )

        if quiz_question.is_mcq:
            return self._check_mcq(user_answer, quiz_question)
        return self._check_free_response(user_answer, quiz_question)

    def check_generated(
        self,
        user_answer: str,
        generated: GeneratedQuizQuestion,
        subject: str | None = None,
    ) -> CheckResult:
        """Score an answer to an AI-authored question; its inline letter is the MCQ key."""
        from quizengine.generated import to_quiz_question

        return self.check(user_answer, to_quiz_question(generated, subject or self.default_subject))

    def _check_mcq(self, user_answer: str, quiz_question: QuizQuestion) -> CheckResult:
        subject = quiz_question.paper.subject if quiz_question.paper else self.default_subject
        correct_letter = self.resolver.resolve_question(quiz_question, subject)
        chosen = user_answer.strip().upper()
        max_marks = quiz_question.question.marks

        correct_option = quiz_question.option(correct_letter)
        correct_text = correct_option.option_text if correct_option else "Answer not available in database"
        is_correct = chosen == correct_letter

        if is_correct:
            selected = quiz_question.option(chosen)
            return CheckResult(
                is_correct=True,
                marks_awarded=max_marks,
                feedback=f"Correct! {selected.option_text if selected else 'Selected option'}",
                keywords=[],
                max_marks=max_marks,
            )

        return CheckResult(
            is_correct=False,
            marks_awarded=0,
            feedback=f"Incorrect. The correct answer is {correct_letter}: {correct_text}",
            keywords=[correct_text],
            max_marks=max_marks,
        )

    def _check_free_response(self, user_answer: str, quiz_question: QuizQuestion) -> CheckResult:
        mark_scheme = quiz_question.mark_scheme
        if mark_scheme is None or not mark_scheme.answer_text:
            return CheckResult(
                is_correct=False,
                marks_awarded=0,
                feedback="No mark scheme available for this question.",
                max_marks=quiz_question.max_marks,
            )

        return self.evaluator.evaluate(
            user_answer,
            mark_scheme.answer_text,
            mark_scheme.marks_awarded,
            guidance=mark_scheme.guidance or quiz_question.guidance,
            keywords=parse_keyword_string(mark_scheme.keywords) or None,
        )
