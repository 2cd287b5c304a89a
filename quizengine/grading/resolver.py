"""
MCQ correctness resolution.

Question-bank MCQ options do not always carry a correctness flag. The
resolver picks a canonical letter in this order:

1. an option already flagged correct (authoritative)
2. the subject's answer-key table (first stem contained in the question)
3. the subject's content rules (option text carrying the expected term)
4. "A"

A heuristic result is written back onto the winning option so later
checks in the same session agree. Callers hand in session-owned option
copies (see QuizQuestion), never the question bank's records.

The letter cache covers one session. StratifiedSampler.sample() calls
start_session() so a reused resolver starts empty, and a cache hit still
flags the winning option on the copy it was handed.
"""

from __future__ import annotations

from typing import Sequence

from loguru import logger

from quizengine.models import MCQOption, QuizQuestion

from .answer_keys import (
    DEFAULT_ANSWER_KEYS,
    DEFAULT_CONTENT_RULES,
    FALLBACK_SUBJECT,
    AnswerKeyTable,
    ContentRule,
)

DEFAULT_LETTER = "A"


class McqResolver:
    """Resolves the correct option letter for MCQ questions."""

    def __init__(
        self,
        answer_keys: AnswerKeyTable | None = None,
        content_rules: Sequence[ContentRule] | None = None,
    ):
        keys = DEFAULT_ANSWER_KEYS if answer_keys is None else answer_keys
        self.answer_keys = {subject.lower(): list(entries) for subject, entries in keys.items()}
        self.content_rules = list(DEFAULT_CONTENT_RULES if content_rules is None else content_rules)
        # question id -> resolved letter for the current session
        self._resolved: dict[str, str] = {}

    def start_session(self) -> None:
        """Forget letters resolved for an earlier session."""
        self._resolved.clear()

    def resolve(self, question_text: str, options: Sequence[MCQOption], subject: str) -> str:
        """Return the correct letter, flagging the winning option when a heuristic decided."""
        flagged = next((opt for opt in options if opt.is_correct is True), None)
        if flagged is not None:
            return flagged.option_letter.upper()

        question_lower = (question_text or "").lower()
        subject_key = (subject or "").strip().lower()

        letter = self._lookup_answer_key(question_lower, subject_key)
        if letter is None:
            letter = self._apply_content_rules(question_lower, options, subject_key)
        if letter is None:
            logger.warning(
                f"No answer key for MCQ '{question_text[:60]}' ({subject}); defaulting to {DEFAULT_LETTER}"
            )
            letter = DEFAULT_LETTER

        _flag(options, letter)
        return letter

    def resolve_question(self, quiz_question: QuizQuestion, subject: str) -> str:
        """Resolve once per question; repeat calls return the cached letter."""
        cached = self._resolved.get(quiz_question.id)
        if cached is not None:
            if not any(opt.is_correct is True for opt in quiz_question.options):
                _flag(quiz_question.options, cached)
            return cached

        letter = self.resolve(quiz_question.question.question_text, quiz_question.options, subject)
        self._resolved[quiz_question.id] = letter
        return letter

    def is_resolved(self, question_id: str) -> bool:
        return question_id in self._resolved

    def _lookup_answer_key(self, question_lower: str, subject_key: str) -> str | None:
        table = self.answer_keys.get(subject_key)
        if table is None:
            table = self.answer_keys.get(FALLBACK_SUBJECT, [])

        for stem, letter in table:
            if stem in question_lower:
                logger.debug(f"Answer key match '{stem}' -> {letter}")
                return letter.upper()
        return None

    def _apply_content_rules(
        self,
        question_lower: str,
        options: Sequence[MCQOption],
        subject_key: str,
    ) -> str | None:
        for rule in self.content_rules:
            if rule.subject != subject_key or not rule.applies_to(question_lower):
                continue
            for opt in options:
                text = opt.option_text if rule.case_sensitive_options else opt.option_text.lower()
                if rule.option_matches(text):
                    return opt.option_letter.upper()
            return rule.fallback_letter
        return None


def _flag(options: Sequence[MCQOption], letter: str) -> None:
    winner = next((opt for opt in options if opt.option_letter.upper() == letter), None)
    if winner is not None:
        winner.is_correct = True
