"""Exception hierarchy for the quiz engine."""


class QuizEngineError(Exception):
    """Base class for quiz engine errors."""


class QuizSessionError(QuizEngineError):
    """Raised when a session operation is invalid for the current state."""


class PoolFormatError(QuizEngineError):
    """Raised when a question-pool snapshot is structurally unusable."""
