"""
Pytest Configuration and Fixtures.

This file configures pytest and provides shared fixtures for all tests.
"""
import pytest
import sys
from pathlib import Path

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from quizengine.models import (  # noqa: E402
    MarkSchemeEntry,
    MCQOption,
    Paper,
    Question,
    QuestionType,
    QuizQuestion,
)
from quizengine.sampling.sampler import QuestionPool  # noqa: E402


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "integration: Integration tests (snapshot to session)")
    config.addinivalue_line("markers", "smoke: Smoke tests for CLI commands")
    config.addinivalue_line("markers", "slow: Slow tests")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "integration" in str(item.fspath):
            item.add_marker(pytest.mark.integration)
        elif "smoke" in str(item.fspath):
            item.add_marker(pytest.mark.smoke)


@pytest.fixture(scope="session")
def project_root():
    """Return the project root directory."""
    return PROJECT_ROOT


def make_question(qid, text="Describe the process.", qtype=QuestionType.FRQ, marks=1, paper_id="bio-2023-1", number=None):
    return Question(
        id=qid,
        paper_id=paper_id,
        question_number=number or qid,
        question_text=text,
        question_type=qtype,
        marks=marks,
    )


def make_options(qid, texts, correct=None):
    """Options A, B, C... for a question; `correct` flags one letter."""
    letters = "ABCDEFGH"
    return [
        MCQOption(
            id=f"{qid}-{letters[i]}",
            question_id=qid,
            option_letter=letters[i],
            option_text=text,
            is_correct=(letters[i] == correct) if correct else None,
        )
        for i, text in enumerate(texts)
    ]


@pytest.fixture
def biology_paper():
    return Paper(
        id="bio-2023-1",
        year="2023",
        session="May/June",
        variant="1",
        subject="Biology",
        paper_type="Mixed",
    )


@pytest.fixture
def sample_pool(biology_paper):
    """
    Small biology pool.

    - 6 text-only FRQs (frq-1..frq-6) with mark schemes
    - 2 diagram FRQs (vis-1, vis-2)
    - 2 MCQs with options (mcq-1 flagged C, mcq-2 unflagged)
    - 1 MCQ without options (mcq-bare)
    - 1 structured part (sp-1)
    """
    questions = [make_question(f"frq-{i}", f"Explain process number {i}.") for i in range(1, 7)]
    questions += [
        make_question("vis-1", "Use the diagram to identify structure X."),
        make_question("vis-2", "Study the graph and describe the trend."),
        make_question("mcq-1", "Which molecule stores energy?", QuestionType.MCQ),
        make_question("mcq-2", "Which molecule contains magnesium?", QuestionType.MCQ),
        make_question("mcq-bare", "Which organ filters blood?", QuestionType.MCQ),
        make_question("sp-1", "State two functions of the liver.", QuestionType.STRUCTURED_PART, marks=2),
    ]

    options = make_options("mcq-1", ["Water", "Oxygen", "ATP", "Salt"], correct="C")
    options += make_options("mcq-2", ["Chlorophyll", "Haemoglobin", "Insulin", "Keratin"])

    mark_schemes = [
        MarkSchemeEntry(
            id=f"ms-frq-{i}",
            question_id=f"frq-{i}",
            answer_text="the mitochondria is the powerhouse of the cell",
            marks_awarded=2,
        )
        for i in range(1, 7)
    ]
    mark_schemes.append(
        MarkSchemeEntry(
            id="ms-sp-1",
            paper_id="bio-2023-1",
            entry_number="sp-1",
            answer_text="detoxification; bile production",
            marks_awarded=2,
        )
    )

    return QuestionPool(
        questions=questions,
        options=options,
        mark_schemes=mark_schemes,
        papers=[biology_paper],
    )


@pytest.fixture
def frq_question(biology_paper):
    """Free-response question worth 2 marks."""
    return QuizQuestion(
        question=make_question("frq-x", "What is the role of the mitochondria?"),
        mark_scheme=MarkSchemeEntry(
            id="ms-frq-x",
            question_id="frq-x",
            answer_text="the mitochondria is the powerhouse of the cell",
            marks_awarded=2,
        ),
        paper=biology_paper,
    )


@pytest.fixture
def mcq_question(biology_paper):
    """MCQ with C flagged correct."""
    return QuizQuestion(
        question=make_question("mcq-x", "Which molecule stores energy?", QuestionType.MCQ),
        options=make_options("mcq-x", ["Water", "Oxygen", "ATP", "Salt"], correct="C"),
        paper=biology_paper,
    )
