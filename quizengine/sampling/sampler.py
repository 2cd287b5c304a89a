"""
Stratified question sampler.

Turns a question pool plus QuizSettings into the ordered question list of
one quiz session:

1. Filter by paper type (MCQ Only keeps MCQs that have options, Theory Only
   keeps FRQ / structured parts, Mixed keeps everything).
2. Partition into visual-aid and text-only questions.
3. Shuffle each partition (multi-pass, entropy-mixed).
4. Cap visual-aid questions at floor(requested * ratio) and fill the rest
   from the text-only partition.
5. Shuffle the combination once more and truncate to the requested count.

An empty or short pool yields a short (possibly empty) list, never an error.
"""

from __future__ import annotations

import math
from collections import defaultdict
from dataclasses import dataclass, field, replace
from typing import Iterable

from loguru import logger

from quizengine.grading.resolver import McqResolver
from quizengine.models import (
    MarkSchemeEntry,
    MCQOption,
    Paper,
    PaperType,
    Question,
    QuestionType,
    QuizQuestion,
    QuizSettings,
)

from .entropy import EntropyMixer, RandomSource, generate_unique_seed
from .shuffle import DEFAULT_PASSES, multi_pass_shuffle

# Questions mentioning these cannot be rendered without their figure.
# Blunt substring match: "graph" in a rhetorical sense also counts.
VISUAL_AID_KEYWORDS = (
    "diagram",
    "graph",
    "chart",
    "figure",
    "image",
    "picture",
    "drawing",
    "illustration",
)

DEFAULT_VISUAL_AID_RATIO = 0.2


@dataclass
class QuestionPool:
    """Read-only snapshot of the question bank handed to the sampler."""

    questions: list[Question] = field(default_factory=list)
    options: list[MCQOption] = field(default_factory=list)
    mark_schemes: list[MarkSchemeEntry] = field(default_factory=list)
    papers: list[Paper] = field(default_factory=list)

    def options_by_question(self) -> dict[str, list[MCQOption]]:
        grouped: dict[str, list[MCQOption]] = defaultdict(list)
        for option in self.options:
            grouped[option.question_id].append(option)
        return grouped


def requires_visual_aid(question_text: str) -> bool:
    """True when the question text mentions a diagram, graph, or similar."""
    lowered = (question_text or "").lower()
    return any(keyword in lowered for keyword in VISUAL_AID_KEYWORDS)


def filter_by_paper_type(
    questions: Iterable[Question],
    options_by_question: dict[str, list[MCQOption]],
    paper: PaperType,
) -> list[Question]:
    """Apply the paper-type filter."""
    if paper == PaperType.MCQ_ONLY:
        return [
            q for q in questions
            if q.question_type == QuestionType.MCQ and options_by_question.get(q.id)
        ]
    if paper == PaperType.THEORY_ONLY:
        return [q for q in questions if q.question_type.is_theory]
    return list(questions)


def find_mark_scheme(question: Question, mark_schemes: Iterable[MarkSchemeEntry]) -> MarkSchemeEntry | None:
    """Direct link first; otherwise an unlinked entry with the same paper and entry number."""
    entries = list(mark_schemes)
    direct = next((entry for entry in entries if entry.question_id and entry.question_id == question.id), None)
    if direct is not None:
        return direct

    return next(
        (
            entry
            for entry in entries
            if not entry.question_id
            and entry.paper_id == question.paper_id
            and entry.entry_number is not None
            and entry.entry_number == question.question_number
        ),
        None,
    )


def _dedupe(questions: Iterable[Question]) -> list[Question]:
    seen: set[str] = set()
    unique = []
    for question in questions:
        if question.id in seen:
            continue
        seen.add(question.id)
        unique.append(question)
    return unique


class StratifiedSampler:
    """Selects a bounded, non-repeating, visual-aid-capped question list."""

    def __init__(
        self,
        source: RandomSource | None = None,
        visual_aid_ratio: float = DEFAULT_VISUAL_AID_RATIO,
        passes: int = DEFAULT_PASSES,
        resolver: McqResolver | None = None,
    ):
        self.source = source or EntropyMixer()
        self.visual_aid_ratio = visual_aid_ratio
        self.passes = passes
        self.resolver = resolver

    def _shuffle(self, items: list) -> list:
        return multi_pass_shuffle(items, self.source, self.passes)

    def select(self, questions: list[Question], requested: int) -> list[Question]:
        """Quota-constrained selection over an already filtered question list."""
        if requested <= 0 or not questions:
            return []

        visual, text_only = [], []
        for question in questions:
            (visual if requires_visual_aid(question.question_text) else text_only).append(question)

        visual = self._shuffle(visual)
        text_only = self._shuffle(text_only)

        max_visual = math.floor(requested * self.visual_aid_ratio)
        selected_visual = visual[:max_visual]
        selected_text = text_only[: requested - len(selected_visual)]

        logger.debug(
            f"Quota: {len(selected_visual)}/{len(visual)} visual-aid (cap {max_visual}), "
            f"{len(selected_text)}/{len(text_only)} text-only"
        )

        combined = self._shuffle(selected_visual + selected_text)
        return combined[:requested]

    def sample(self, pool: QuestionPool, settings: QuizSettings) -> list[QuizQuestion]:
        """Build the ordered QuizQuestion list for one session."""
        seed = generate_unique_seed()
        logger.info(f"Generating quiz {seed} ({settings.subject}, {settings.paper.value})")

        requested = settings.requested_count
        if requested <= 0:
            logger.warning("Quiz requested with zero questions")
            return []

        options_by_question = pool.options_by_question()
        candidates = filter_by_paper_type(_dedupe(pool.questions), options_by_question, settings.paper)
        if not candidates:
            logger.warning("No questions match the selected criteria")
            return []

        selected = self.select(candidates, requested)
        if len(selected) < requested:
            logger.warning(f"Pool only supplied {len(selected)} of {requested} requested questions")

        papers = {paper.id: paper for paper in pool.papers}
        resolver = self.resolver or McqResolver()
        resolver.start_session()
        quiz = [
            self._build_quiz_question(
                question, position, options_by_question, pool.mark_schemes, papers, settings, resolver
            )
            for position, question in enumerate(selected, start=1)
        ]
        logger.info(f"Selected {len(quiz)} questions for quiz {seed}")
        return quiz

    def lookup(self, pool: QuestionPool, question_id: str, settings: QuizSettings) -> QuizQuestion | None:
        """Session view of one pool question, keeping its stored number."""
        question = next((q for q in pool.questions if q.id == question_id), None)
        if question is None:
            return None
        return self._build_quiz_question(
            question,
            question.question_number,
            pool.options_by_question(),
            pool.mark_schemes,
            {paper.id: paper for paper in pool.papers},
            settings,
            self.resolver or McqResolver(),
        )

    def _build_quiz_question(
        self,
        question: Question,
        position: int | str,
        options_by_question: dict[str, list[MCQOption]],
        mark_schemes: list[MarkSchemeEntry],
        papers: dict[str, Paper],
        settings: QuizSettings,
        resolver: McqResolver,
    ) -> QuizQuestion:
        # Mark schemes link on the question's original number, so look up before renumbering
        mark_scheme = find_mark_scheme(question, mark_schemes)
        paper = papers.get(question.paper_id) or Paper(
            id=question.paper_id,
            year="2023",
            session=settings.subject,
            variant="1",
            subject=settings.subject,
            paper_type="MCQ" if question.question_type == QuestionType.MCQ else "Theory",
        )

        quiz_question = QuizQuestion(
            question=replace(question, question_number=str(position)),
            mark_scheme=mark_scheme,
            paper=paper,
            requires_visual_aid=requires_visual_aid(question.question_text),
            guidance=mark_scheme.guidance if mark_scheme else None,
        )

        if question.question_type == QuestionType.MCQ:
            options = [replace(opt) for opt in options_by_question.get(question.id, [])]
            options.sort(key=lambda opt: opt.option_letter)
            quiz_question.options = options
            if options:
                resolver.resolve_question(quiz_question, settings.subject)

        return quiz_question
