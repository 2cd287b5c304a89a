"""
Validation for questions produced by an AI question-authoring service.

The authoring service is an external collaborator; its output is taken as
given and coerced into shape here. Nothing is re-requested:

- blank MCQ option text becomes "Option X not provided"
- a missing or invalid correct letter becomes "A"
- LaTeX is rewritten to plain text
- Mathematics keyword lists lose abstract topic words

Validated questions convert to QuizQuestion so the same session machinery
drives them.
"""

from __future__ import annotations

import math
import time
from typing import Any, Iterable, Literal, Sequence

from loguru import logger
from pydantic import BaseModel, ConfigDict, Field, ValidationError, ValidationInfo, field_validator

from quizengine.grading.keywords import filter_math_keywords
from quizengine.grading.normalize import clean_latex
from quizengine.models import (
    MarkSchemeEntry,
    MCQOption,
    Paper,
    Question,
    QuestionType,
    QuizQuestion,
    parse_marks,
)
from quizengine.sampling.sampler import requires_visual_aid

OPTION_LETTERS = ("A", "B", "C", "D")
PLACEHOLDER_OPTION_TEXT = "Option {letter} not provided"
_MARK_SCHEME_DEFAULTS = {"answer": "Answer not provided", "guidance": "No guidance provided"}


class GeneratedOptions(BaseModel):
    """Four lettered options plus the correct letter."""

    model_config = ConfigDict(validate_default=True)

    A: str = ""
    B: str = ""
    C: str = ""
    D: str = ""
    correct: str = "A"

    @field_validator("A", "B", "C", "D", mode="before")
    @classmethod
    def fill_option(cls, value: Any, info: ValidationInfo) -> str:
        text = str(value).strip() if value is not None else ""
        if not text:
            return PLACEHOLDER_OPTION_TEXT.format(letter=info.field_name)
        return clean_latex(text)

    @field_validator("correct", mode="before")
    @classmethod
    def valid_letter(cls, value: Any) -> str:
        letter = str(value or "").strip().upper()
        return letter if letter in OPTION_LETTERS else "A"

    def text_for(self, letter: str) -> str:
        return getattr(self, letter.upper(), "")


class GeneratedMarkScheme(BaseModel):
    answer: str = "Answer not provided"
    keywords: list[str] = Field(default_factory=list)
    guidance: str = "No guidance provided"

    @field_validator("answer", "guidance", mode="before")
    @classmethod
    def clean_text(cls, value: Any, info: ValidationInfo) -> str:
        if value is None or not str(value).strip():
            return _MARK_SCHEME_DEFAULTS[info.field_name]
        return clean_latex(str(value))

    @field_validator("keywords", mode="before")
    @classmethod
    def clean_keywords(cls, value: Any) -> list[str]:
        if not value:
            return []
        if isinstance(value, str):
            value = value.split(",")
        return [clean_latex(str(k)).strip() for k in value if k is not None and str(k).strip()]


class GeneratedQuizQuestion(BaseModel):
    """An AI-authored question after defensive validation."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    question_text: str = Field(default="Question text not provided", alias="questionText")
    question_type: Literal["MCQ", "FRQ"] = Field(default="FRQ", alias="questionType")
    difficulty: str = "Medium"
    topic: str = ""
    marks: int = 1
    options: GeneratedOptions | None = None
    mark_scheme: GeneratedMarkScheme = Field(default_factory=GeneratedMarkScheme, alias="markScheme")

    @field_validator("question_text", mode="before")
    @classmethod
    def clean_question(cls, value: Any) -> str:
        if value is None or not str(value).strip():
            return "Question text not provided"
        return clean_latex(str(value))

    @field_validator("question_type", mode="before")
    @classmethod
    def parse_question_type(cls, value: Any) -> str:
        return "MCQ" if str(value or "").strip().upper() == "MCQ" else "FRQ"

    @field_validator("marks", mode="before")
    @classmethod
    def parse_marks_value(cls, value: Any) -> int:
        return parse_marks(value)

    @field_validator("difficulty", mode="before")
    @classmethod
    def default_difficulty(cls, value: Any) -> str:
        return str(value) if value else "Medium"


def validate_generated(
    items: Iterable[Any],
    subject: str,
    topic: str,
    question_type: str = "FRQ",
) -> list[GeneratedQuizQuestion]:
    """Coerce raw authoring-service output into GeneratedQuizQuestion objects."""
    validated: list[GeneratedQuizQuestion] = []
    stamp = int(time.time() * 1000)
    topic_slug = "_".join(topic.split())

    for index, raw in enumerate(items):
        if not isinstance(raw, dict):
            logger.warning(f"Skipping generated item {index}: expected an object, got {type(raw).__name__}")
            continue

        data = dict(raw)
        data.setdefault("questionType", data.get("question_type") or question_type)
        data["id"] = str(data.get("id") or f"{subject}_{topic_slug}_{question_type}_{stamp}_{index}")
        data["topic"] = data.get("topic") or topic
        is_mcq = str(data["questionType"]).strip().upper() == "MCQ"
        if is_mcq and not isinstance(data.get("options"), dict):
            data["options"] = {}
        elif not is_mcq:
            data.pop("options", None)

        try:
            question = GeneratedQuizQuestion.model_validate(data)
        except ValidationError as exc:
            logger.warning(f"Skipping generated item {index}: {exc.error_count()} invalid field(s)")
            continue

        question.mark_scheme.keywords = filter_math_keywords(question.mark_scheme.keywords, subject)
        validated.append(question)

    logger.info(f"Validated {len(validated)} generated questions for {topic}")
    return validated


def split_mixed_count(count: int, mcq_share: float = 0.6) -> tuple[int, int]:
    """Split a topic's question count into (MCQ, FRQ) for mixed generation."""
    if count <= 0:
        return 0, 0
    mcq = min(count, math.ceil(count * mcq_share))
    return mcq, count - mcq


def interleave_by_type(
    mcq: Sequence[GeneratedQuizQuestion],
    frq: Sequence[GeneratedQuizQuestion],
) -> list[GeneratedQuizQuestion]:
    """Alternate MCQ and FRQ items, MCQ first; leftovers keep their order."""
    combined: list[GeneratedQuizQuestion] = []
    for i in range(max(len(mcq), len(frq))):
        if i < len(mcq):
            combined.append(mcq[i])
        if i < len(frq):
            combined.append(frq[i])
    return combined


def to_quiz_question(generated: GeneratedQuizQuestion, subject: str, position: int = 1) -> QuizQuestion:
    """Convert into the session view used by the checker and session."""
    paper_id = f"generated-{subject.lower()}"
    question_type = QuestionType.MCQ if generated.question_type == "MCQ" else QuestionType.FRQ

    question = Question(
        id=generated.id,
        paper_id=paper_id,
        question_number=str(position),
        question_text=generated.question_text,
        question_type=question_type,
        marks=generated.marks,
        difficulty=generated.difficulty,
        topic=generated.topic,
    )

    options: list[MCQOption] = []
    if question_type == QuestionType.MCQ and generated.options is not None:
        options = [
            MCQOption(
                id=f"{generated.id}-{letter}",
                question_id=generated.id,
                option_letter=letter,
                option_text=generated.options.text_for(letter),
                is_correct=letter == generated.options.correct,
            )
            for letter in OPTION_LETTERS
        ]

    mark_scheme = MarkSchemeEntry(
        id=f"{generated.id}-ms",
        question_id=generated.id,
        answer_text=generated.mark_scheme.answer,
        marks_awarded=generated.marks,
        keywords=",".join(generated.mark_scheme.keywords),
        guidance=generated.mark_scheme.guidance,
    )

    return QuizQuestion(
        question=question,
        options=options,
        mark_scheme=mark_scheme,
        paper=Paper(
            id=paper_id,
            year="",
            session="generated",
            variant="1",
            subject=subject,
            paper_type="MCQ" if question_type == QuestionType.MCQ else "Theory",
        ),
        requires_visual_aid=requires_visual_aid(generated.question_text),
        guidance=generated.mark_scheme.guidance,
    )
