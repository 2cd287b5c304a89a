"""
Domain types for quiz generation and answer evaluation.

Question-bank records (Question, MCQOption, MarkSchemeEntry, Paper) are
read-only snapshots supplied by the question-pool provider. QuizQuestion is
the per-session view the sampler emits; UserAnswer and CheckResult are the
verdicts accumulated while a session runs.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class QuestionType(str, Enum):
    """Question kinds stored in the question bank."""

    MCQ = "MCQ"
    FRQ = "FRQ"
    STRUCTURED_PART = "STRUCTURED_PART"

    @classmethod
    def parse(cls, value: Any) -> "QuestionType":
        """Map a stored type string to a QuestionType, defaulting to FRQ."""
        if isinstance(value, QuestionType):
            return value
        try:
            return cls(str(value).strip().upper())
        except ValueError:
            return cls.FRQ

    @property
    def is_theory(self) -> bool:
        return self in (QuestionType.FRQ, QuestionType.STRUCTURED_PART)


class PaperType(str, Enum):
    """Paper-type filter chosen in quiz settings."""

    MIXED = "Mixed"
    MCQ_ONLY = "MCQ Only"
    THEORY_ONLY = "Theory Only"

    @classmethod
    def parse(cls, value: Any) -> "PaperType":
        """Map a settings string to a PaperType. Unknown values mean Mixed."""
        if isinstance(value, PaperType):
            return value
        normalized = str(value or "").strip().lower()
        for member in cls:
            if member.value.lower() == normalized:
                return member
        return cls.MIXED


_LEADING_INT = re.compile(r"^\s*(\d+)")


def parse_marks(value: Any, default: int = 1) -> int:
    """
    Parse a marks value that may arrive as a string or a number.

    Behaves like a lenient integer parse: "3" and "3 marks" give 3,
    blank or unparsable input gives the default. Zero or negative values
    also give the default, since a question is always worth something.
    """
    if isinstance(value, bool):
        return default
    if isinstance(value, (int, float)):
        marks = int(value)
    else:
        match = _LEADING_INT.match(str(value or ""))
        if not match:
            return default
        marks = int(match.group(1))
    return marks if marks > 0 else default


def coerce_flag(value: Any) -> bool | None:
    """
    Normalize a stored correctness indicator.

    Source data stores "1"/"0", booleans, or nothing at all. Returns None
    when the flag is unset.
    """
    if value is None:
        return None
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in ("1", "true", "yes", "y"):
        return True
    if text in ("0", "false", "no", "n"):
        return False
    return None


@dataclass
class Question:
    """A question as stored in the question bank."""

    id: str
    paper_id: str
    question_number: str
    question_text: str
    question_type: QuestionType
    marks: int = 1
    difficulty: str = ""
    topic: str | None = None


@dataclass
class MCQOption:
    """One lettered option of an MCQ question. is_correct may be unset (None)."""

    id: str
    question_id: str
    option_letter: str
    option_text: str
    is_correct: bool | None = None


@dataclass
class MarkSchemeEntry:
    """Canonical answer for a question, linked directly or by paper + entry number."""

    id: str
    answer_text: str
    marks_awarded: int = 1
    question_id: str | None = None
    paper_id: str | None = None
    entry_number: str | None = None
    keywords: str = ""
    guidance: str | None = None


@dataclass
class Paper:
    """Exam paper metadata."""

    id: str
    year: str
    session: str
    variant: str
    subject: str
    paper_type: str


@dataclass
class TopicQuestionCount:
    topic: str
    count: int


@dataclass
class QuizSettings:
    """Configuration value object that shapes sampling and timing."""

    subject: str
    topics: list[str] = field(default_factory=list)
    topic_questions: list[TopicQuestionCount] = field(default_factory=list)
    paper: PaperType = PaperType.MIXED
    difficulty: str = "Mixed"
    number_of_questions: int = 0
    time_limit: int = 30  # minutes
    level: str = "IGCSE"

    @property
    def requested_count(self) -> int:
        """Total questions requested; falls back to the sum of per-topic counts."""
        if self.number_of_questions > 0:
            return self.number_of_questions
        return sum(max(0, tq.count) for tq in self.topic_questions)

    @property
    def can_start(self) -> bool:
        return self.requested_count > 0


@dataclass
class QuizQuestion:
    """
    Session view of a question.

    Options are session-owned copies, so filling in a missing correctness
    flag never touches the question bank's records.
    """

    question: Question
    options: list[MCQOption] = field(default_factory=list)
    mark_scheme: MarkSchemeEntry | None = None
    paper: Paper | None = None
    requires_visual_aid: bool = False
    guidance: str | None = None

    @property
    def id(self) -> str:
        return self.question.id

    @property
    def is_mcq(self) -> bool:
        return self.question.question_type == QuestionType.MCQ and bool(self.options)

    @property
    def max_marks(self) -> int:
        if not self.is_mcq and self.mark_scheme is not None:
            return self.mark_scheme.marks_awarded
        return self.question.marks

    def option(self, letter: str) -> MCQOption | None:
        letter = letter.strip().upper()
        for opt in self.options:
            if opt.option_letter.upper() == letter:
                return opt
        return None


@dataclass
class CheckResult:
    """Uniform verdict returned by the answer checker."""

    is_correct: bool
    marks_awarded: int
    feedback: str
    keywords: list[str] | None = None
    max_marks: int = 0


@dataclass
class UserAnswer:
    """One recorded answer within a session."""

    question_id: str
    answer: str
    is_correct: bool
    marks_awarded: int
    keywords: list[str] | None = None

    @classmethod
    def from_result(cls, question_id: str, answer: str, result: CheckResult) -> "UserAnswer":
        return cls(
            question_id=question_id,
            answer=answer,
            is_correct=result.is_correct,
            marks_awarded=result.marks_awarded,
            keywords=list(result.keywords) if result.keywords is not None else None,
        )
