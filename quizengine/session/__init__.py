from quizengine.session.machine import QuizSession, SessionState
from quizengine.session.timer import AsyncTicker, Countdown

__all__ = ["AsyncTicker", "Countdown", "QuizSession", "SessionState"]
