"""
Question-pool snapshot loading.

A snapshot is the JSON export of one subject's question bank:

    {"questions": [...], "mcqOptions": [...], "markScheme": [...], "papers": [...]}

Record keys are camelCase. Fields are coerced leniently (string marks,
"1"/"0" correctness flags, unknown question types); individual records that
cannot be used are skipped with a warning. Only a snapshot whose overall
shape is wrong raises PoolFormatError.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Callable, TypeVar

from loguru import logger
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from quizengine.exceptions import PoolFormatError
from quizengine.models import (
    MarkSchemeEntry,
    MCQOption,
    Paper,
    Question,
    QuestionType,
    coerce_flag,
    parse_marks,
)
from quizengine.sampling.sampler import QuestionPool


def _text(value: Any) -> str:
    return "" if value is None else str(value)


def _optional_text(value: Any) -> str | None:
    if value is None or str(value).strip() == "":
        return None
    return str(value)


class _Record(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class QuestionRecord(_Record):
    id: str
    paper_id: str = Field(default="", alias="paperId")
    question_number: str = Field(default="", alias="questionNumber")
    question_text: str = Field(default="", alias="questionText")
    question_type: QuestionType = Field(default=QuestionType.FRQ, alias="questionType")
    marks: int = 1
    difficulty: str = ""
    topic: str | None = None

    @field_validator("id", "paper_id", "question_number", "question_text", "difficulty", mode="before")
    @classmethod
    def text_fields(cls, value: Any) -> str:
        return _text(value)

    @field_validator("question_type", mode="before")
    @classmethod
    def parse_question_type(cls, value: Any) -> QuestionType:
        return QuestionType.parse(value)

    @field_validator("marks", mode="before")
    @classmethod
    def parse_marks_value(cls, value: Any) -> int:
        return parse_marks(value)

    def to_domain(self) -> Question:
        return Question(
            id=self.id,
            paper_id=self.paper_id,
            question_number=self.question_number,
            question_text=self.question_text,
            question_type=self.question_type,
            marks=self.marks,
            difficulty=self.difficulty,
            topic=self.topic or None,
        )


class OptionRecord(_Record):
    id: str
    question_id: str = Field(alias="questionId")
    option_letter: str = Field(alias="optionLetter")
    option_text: str = Field(default="", alias="optionText")
    is_correct: bool | None = Field(default=None, alias="isCorrect")

    @field_validator("id", "question_id", "option_text", mode="before")
    @classmethod
    def text_fields(cls, value: Any) -> str:
        return _text(value)

    @field_validator("option_letter", mode="before")
    @classmethod
    def normalize_letter(cls, value: Any) -> str:
        return _text(value).strip().upper()

    @field_validator("is_correct", mode="before")
    @classmethod
    def parse_flag(cls, value: Any) -> bool | None:
        return coerce_flag(value)

    def to_domain(self) -> MCQOption:
        return MCQOption(
            id=self.id,
            question_id=self.question_id,
            option_letter=self.option_letter,
            option_text=self.option_text,
            is_correct=self.is_correct,
        )


class MarkSchemeRecord(_Record):
    id: str
    answer_text: str = Field(default="", alias="answerText")
    marks_awarded: int = Field(default=1, alias="marksAwarded")
    question_id: str | None = Field(default=None, alias="questionId")
    paper_id: str | None = Field(default=None, alias="paperId")
    entry_number: str | None = Field(default=None, alias="entryNumber")
    keywords: str = ""
    guidance: str | None = Field(default=None, alias="guidanceNotes")

    @field_validator("question_id", "paper_id", "entry_number", "guidance", mode="before")
    @classmethod
    def optional_fields(cls, value: Any) -> str | None:
        return _optional_text(value)

    @field_validator("id", "answer_text", mode="before")
    @classmethod
    def required_text(cls, value: Any) -> str:
        return _text(value)

    @field_validator("marks_awarded", mode="before")
    @classmethod
    def parse_marks_value(cls, value: Any) -> int:
        return parse_marks(value)

    @field_validator("keywords", mode="before")
    @classmethod
    def join_keywords(cls, value: Any) -> str:
        if isinstance(value, (list, tuple)):
            return ",".join(str(k) for k in value if k is not None)
        return _text(value)

    def to_domain(self) -> MarkSchemeEntry:
        return MarkSchemeEntry(
            id=self.id,
            answer_text=self.answer_text,
            marks_awarded=self.marks_awarded,
            question_id=self.question_id,
            paper_id=self.paper_id,
            entry_number=self.entry_number,
            keywords=self.keywords,
            guidance=self.guidance,
        )


class PaperRecord(_Record):
    id: str
    year: str = ""
    session: str = ""
    variant: str = ""
    subject: str = ""
    paper_type: str = Field(default="", alias="paperType")

    @field_validator("id", "year", "session", "variant", "subject", "paper_type", mode="before")
    @classmethod
    def text_fields(cls, value: Any) -> str:
        return _text(value)

    def to_domain(self) -> Paper:
        return Paper(
            id=self.id,
            year=self.year,
            session=self.session,
            variant=self.variant,
            subject=self.subject,
            paper_type=self.paper_type,
        )


T = TypeVar("T")


def _load_section(data: dict, key: str, record: type[_Record], convert: Callable[[Any], T]) -> list[T]:
    raw = data.get(key)
    if raw is None:
        return []
    if not isinstance(raw, list):
        raise PoolFormatError(f"Snapshot section '{key}' must be a list, got {type(raw).__name__}")

    items: list[T] = []
    skipped = 0
    for index, item in enumerate(raw):
        if not isinstance(item, dict):
            skipped += 1
            continue
        try:
            items.append(convert(record.model_validate(item)))
        except ValidationError as exc:
            logger.debug(f"{key}[{index}] rejected: {exc.error_count()} invalid field(s)")
            skipped += 1

    if skipped:
        logger.warning(f"Skipped {skipped} unusable record(s) in '{key}'")
    return items


def parse_pool(data: Any) -> QuestionPool:
    """Build a QuestionPool from an already decoded snapshot."""
    if not isinstance(data, dict):
        raise PoolFormatError(f"Snapshot must be a JSON object, got {type(data).__name__}")

    pool = QuestionPool(
        questions=_load_section(data, "questions", QuestionRecord, QuestionRecord.to_domain),
        options=_load_section(data, "mcqOptions", OptionRecord, OptionRecord.to_domain),
        mark_schemes=_load_section(data, "markScheme", MarkSchemeRecord, MarkSchemeRecord.to_domain),
        papers=_load_section(data, "papers", PaperRecord, PaperRecord.to_domain),
    )
    logger.debug(
        f"Loaded pool: {len(pool.questions)} questions, {len(pool.options)} options, "
        f"{len(pool.mark_schemes)} mark scheme entries, {len(pool.papers)} papers"
    )
    return pool


def load_pool(path: str | Path) -> QuestionPool:
    """Read a snapshot file from disk."""
    path = Path(path)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise PoolFormatError(f"{path} is not valid JSON: {exc}") from exc
    return parse_pool(data)
