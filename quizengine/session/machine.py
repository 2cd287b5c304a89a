"""
Quiz session state machine.

States:
    AWAITING_ANSWER -> (submit) -> FEEDBACK_SHOWN -> (advance) -> AWAITING_ANSWER | FINISHED

A countdown runs alongside. When it reaches zero a non-empty draft on an
unanswered question is submitted, then the session finishes regardless of
how many questions remain. Unanswered questions are simply absent from the
final answer list.

Finishing by any path cancels the countdown and reports the answers once.
"""

from __future__ import annotations

from enum import Enum
from typing import Callable, Sequence

from loguru import logger

from quizengine.exceptions import QuizSessionError
from quizengine.grading.checker import AnswerChecker
from quizengine.models import CheckResult, QuizQuestion, UserAnswer

from .timer import AsyncTicker, Countdown


class SessionState(str, Enum):
    AWAITING_ANSWER = "awaiting_answer"
    FEEDBACK_SHOWN = "feedback_shown"
    FINISHED = "finished"


class QuizSession:
    """Drives one quiz attempt over a sampled question list."""

    def __init__(
        self,
        questions: Sequence[QuizQuestion],
        time_limit_minutes: float,
        checker: AnswerChecker | None = None,
        on_finish: Callable[[list[UserAnswer]], object] | None = None,
        countdown: Countdown | None = None,
    ):
        if not questions:
            raise QuizSessionError("Cannot start a quiz session without questions")

        self.questions = list(questions)
        self.checker = checker or AnswerChecker()
        self.on_finish = on_finish
        self.countdown = countdown or Countdown.from_minutes(time_limit_minutes)
        self.ticker: AsyncTicker | None = None

        self.current_index = 0
        self.state = SessionState.AWAITING_ANSWER
        self.draft = ""
        self.time_up = False
        self.answers: list[UserAnswer] = []
        self._results: dict[str, CheckResult] = {}
        self._reported = False

    # ========================================
    # Accessors
    # ========================================

    @property
    def current_question(self) -> QuizQuestion:
        return self.questions[self.current_index]

    @property
    def is_last_question(self) -> bool:
        return self.current_index == len(self.questions) - 1

    @property
    def finished(self) -> bool:
        return self.state == SessionState.FINISHED

    @property
    def current_result(self) -> CheckResult | None:
        """Verdict for the displayed question, if it was answered."""
        return self._results.get(self.current_question.id)

    def is_answered(self, question_id: str) -> bool:
        return question_id in self._results

    # ========================================
    # Transitions
    # ========================================

    def set_draft(self, text: str) -> None:
        self._require_active()
        self.draft = text or ""

    def submit(self, answer: str | None = None) -> CheckResult | None:
        """
        Check the current answer and record it.

        Returns the verdict, the existing verdict when the question was
        already answered, or None for a blank answer (no transition).
        """
        self._require_active()
        question = self.current_question

        existing = self._results.get(question.id)
        if existing is not None:
            return existing

        text = self.draft if answer is None else answer
        if not text or not text.strip():
            return None

        result = self.checker.check(text, question)
        self._results[question.id] = result
        self.answers.append(UserAnswer.from_result(question.id, text, result))
        self.draft = text
        self.state = SessionState.FEEDBACK_SHOWN

        logger.debug(
            f"Q{self.current_index + 1} {question.id}: "
            f"{result.marks_awarded}/{result.max_marks} ({'correct' if result.is_correct else 'incorrect'})"
        )
        return result

    def advance(self) -> SessionState:
        """Move past a question whose feedback is showing; finishes after the last one."""
        self._require_active()
        if self.state != SessionState.FEEDBACK_SHOWN:
            raise QuizSessionError("Submit an answer before advancing")

        if self.is_last_question:
            self._finish("completed")
        else:
            self._show(self.current_index + 1)
        return self.state

    def previous(self) -> bool:
        """Go back one question. Answered questions re-display their stored verdict."""
        self._require_active()
        if self.current_index == 0:
            return False
        self._show(self.current_index - 1)
        return True

    def tick(self) -> None:
        """One countdown second; expires the session when time runs out."""
        if self.finished:
            return
        # A limit under one second starts out expired and never ticks to zero
        if self.countdown.tick() or (self.countdown.expired and not self.countdown.cancelled):
            self.expire()

    def expire(self) -> None:
        """Time is up: submit any pending draft, then finish."""
        if self.finished:
            return
        self.time_up = True
        logger.info(f"Time up with {len(self.answers)}/{len(self.questions)} answered")

        if self.state == SessionState.AWAITING_ANSWER and self.draft.strip():
            self.submit(self.draft)
        self._finish("time up")

    def attach_ticker(self, interval: float = 1.0) -> AsyncTicker:
        """Create and start an asyncio ticker; needs a running event loop."""
        self.ticker = AsyncTicker(self.countdown, self.tick, interval=interval)
        self.ticker.start()
        return self.ticker

    # ========================================
    # Summary
    # ========================================

    def summary(self) -> dict:
        """Score summary for the reporting layer."""
        total_marks = sum(q.max_marks for q in self.questions)
        marks = sum(a.marks_awarded for a in self.answers)
        return {
            "total_questions": len(self.questions),
            "answered": len(self.answers),
            "correct": sum(1 for a in self.answers if a.is_correct),
            "marks_awarded": marks,
            "marks_available": total_marks,
            "score_percentage": round(marks / total_marks * 100) if total_marks else 0,
            "time_up": self.time_up,
            "time_remaining": self.countdown.format_remaining(),
        }

    # ========================================
    # Internals
    # ========================================

    def _require_active(self) -> None:
        if self.finished:
            raise QuizSessionError("Quiz session has finished")

    def _show(self, index: int) -> None:
        self.current_index = index
        result = self._results.get(self.current_question.id)
        if result is not None:
            previous = next(a for a in self.answers if a.question_id == self.current_question.id)
            self.draft = previous.answer
            self.state = SessionState.FEEDBACK_SHOWN
        else:
            self.draft = ""
            self.state = SessionState.AWAITING_ANSWER

    def _finish(self, reason: str) -> None:
        self.state = SessionState.FINISHED
        self.countdown.cancel()
        if self.ticker is not None:
            self.ticker.stop()

        logger.info(f"Quiz finished ({reason}): {len(self.answers)} answers recorded")
        if self.on_finish is not None and not self._reported:
            self._reported = True
            self.on_finish(list(self.answers))
