"""
Quiz generation and answer-evaluation engine.

Provides:
- Stratified, entropy-mixed question sampling from a question pool
- MCQ correctness resolution (flags, answer keys, content rules)
- Keyword partial-credit grading for free-response answers
- A timed quiz session state machine
"""

from quizengine.exceptions import PoolFormatError, QuizEngineError, QuizSessionError
from quizengine.grading import AnswerChecker, FreeResponseEvaluator, McqResolver
from quizengine.models import (
    CheckResult,
    MarkSchemeEntry,
    MCQOption,
    Paper,
    PaperType,
    Question,
    QuestionType,
    QuizQuestion,
    QuizSettings,
    TopicQuestionCount,
    UserAnswer,
)
from quizengine.pool import load_pool, parse_pool
from quizengine.sampling import QuestionPool, StratifiedSampler
from quizengine.session import Countdown, QuizSession, SessionState

__version__ = "1.0.0"

__all__ = [
    "AnswerChecker",
    "CheckResult",
    "Countdown",
    "FreeResponseEvaluator",
    "MarkSchemeEntry",
    "MCQOption",
    "McqResolver",
    "Paper",
    "PaperType",
    "PoolFormatError",
    "Question",
    "QuestionPool",
    "QuestionType",
    "QuizEngineError",
    "QuizQuestion",
    "QuizSession",
    "QuizSessionError",
    "QuizSettings",
    "SessionState",
    "StratifiedSampler",
    "TopicQuestionCount",
    "UserAnswer",
    "load_pool",
    "parse_pool",
]
