"""
Unit tests for the quiz session state machine.

Tests cover:
- Submit / advance / previous transitions
- Time-up auto-submission of a pending draft
- Single completion report
- Invalid transitions

Run: pytest tests/unit/test_session.py -v
"""

import asyncio

import pytest

from conftest import make_question
from quizengine.exceptions import QuizSessionError
from quizengine.models import MarkSchemeEntry, QuizQuestion
from quizengine.session.machine import QuizSession, SessionState
from quizengine.session.timer import Countdown


def _frq(qid, answer="x^2"):
    return QuizQuestion(
        question=make_question(qid, f"Question {qid}"),
        mark_scheme=MarkSchemeEntry(id=f"ms-{qid}", question_id=qid, answer_text=answer),
    )


@pytest.fixture
def reports():
    return []


@pytest.fixture
def session(mcq_question, reports):
    """Three questions: MCQ (C correct), then two FRQs."""
    return QuizSession(
        [mcq_question, _frq("f1"), _frq("f2", "osmosis")],
        time_limit_minutes=1,
        on_finish=reports.append,
    )


class TestConstruction:
    """Test session start-up."""

    def test_empty_question_list_rejected(self):
        with pytest.raises(QuizSessionError):
            QuizSession([], time_limit_minutes=5)

    def test_initial_state(self, session):
        assert session.state == SessionState.AWAITING_ANSWER
        assert session.current_index == 0
        assert session.answers == []
        assert session.countdown.remaining == 60


class TestSubmitAndAdvance:
    """Test the answer/feedback cycle."""

    def test_submit_records_answer(self, session):
        result = session.submit("C")

        assert result.is_correct is True
        assert session.state == SessionState.FEEDBACK_SHOWN
        assert len(session.answers) == 1
        assert session.answers[0].question_id == "mcq-x"
        assert session.current_result is result

    def test_blank_submit_is_ignored(self, session):
        assert session.submit("   ") is None
        assert session.state == SessionState.AWAITING_ANSWER
        assert session.answers == []

    def test_submit_uses_draft(self, session):
        session.set_draft("C")
        assert session.submit().is_correct is True

    def test_resubmit_returns_existing_verdict(self, session):
        first = session.submit("A")
        again = session.submit("C")

        assert again is first
        assert len(session.answers) == 1

    def test_advance_requires_submission(self, session):
        with pytest.raises(QuizSessionError):
            session.advance()

    def test_advance_moves_to_next_question(self, session):
        session.submit("C")
        assert session.advance() == SessionState.AWAITING_ANSWER
        assert session.current_index == 1
        assert session.draft == ""

    def test_last_advance_finishes(self, session, reports):
        for answer in ("C", "x^2", "osmosis"):
            session.submit(answer)
            session.advance()

        assert session.state == SessionState.FINISHED
        assert session.countdown.cancelled
        assert len(reports) == 1
        assert [a.question_id for a in reports[0]] == ["mcq-x", "f1", "f2"]

    def test_calls_after_finish_rejected(self, session):
        session.expire()
        with pytest.raises(QuizSessionError):
            session.submit("C")
        with pytest.raises(QuizSessionError):
            session.advance()
        with pytest.raises(QuizSessionError):
            session.previous()


class TestPrevious:
    """Test backward navigation."""

    def test_previous_on_first_question(self, session):
        assert session.previous() is False
        assert session.current_index == 0

    def test_previous_shows_stored_verdict_without_rescoring(self, session, mcq_question):
        first = session.submit("C")
        session.advance()

        assert session.previous() is True
        assert session.state == SessionState.FEEDBACK_SHOWN
        assert session.draft == "C"
        assert session.current_result is first
        assert session.submit("A") is first
        assert len(session.answers) == 1

    def test_previous_to_unanswered_question(self, session):
        session.submit("C")
        session.advance()
        session.submit("x^2")
        session.advance()
        session.previous()
        session.previous()
        session.advance()

        assert session.current_index == 1
        assert session.state == SessionState.FEEDBACK_SHOWN


class TestTimeUp:
    """Test countdown expiry."""

    def test_expiry_submits_pending_draft(self, reports):
        session = QuizSession(
            [_frq("f1"), _frq("f2")],
            time_limit_minutes=1,
            on_finish=reports.append,
            countdown=Countdown(2),
        )
        session.set_draft("x^2")

        session.tick()
        assert session.state == SessionState.AWAITING_ANSWER
        session.tick()

        assert session.state == SessionState.FINISHED
        assert session.time_up is True
        assert len(session.answers) == 1
        assert session.answers[0].question_id == "f1"
        assert session.answers[0].answer == "x^2"
        assert len(reports) == 1

    @pytest.mark.parametrize("minutes", [0, 0.01])
    def test_zero_length_limit_expires_on_first_tick(self, reports, minutes):
        session = QuizSession([_frq("f1", "osmosis")], time_limit_minutes=minutes, on_finish=reports.append)
        session.set_draft("osmosis")

        session.tick()

        assert session.state == SessionState.FINISHED
        assert session.time_up is True
        assert [a.answer for a in session.answers] == ["osmosis"]
        assert len(reports) == 1

    def test_no_ticks_after_finish(self, session):
        session.expire()
        remaining = session.countdown.remaining

        session.tick()
        session.tick()

        assert session.countdown.remaining == remaining

    def test_expiry_without_draft_records_nothing(self, session, reports):
        session.expire()
        assert session.answers == []
        assert reports == [[]]

    def test_expiry_during_feedback_does_not_double_submit(self, session):
        session.submit("C")
        session.expire()
        assert len(session.answers) == 1

    def test_report_once(self, session, reports):
        session.expire()
        session.expire()
        session.tick()
        assert len(reports) == 1

    def test_unanswered_questions_absent(self, session):
        session.submit("C")
        session.advance()
        session.set_draft("   ")
        session.expire()
        assert [a.question_id for a in session.answers] == ["mcq-x"]


class TestSummary:
    """Test session score summary."""

    def test_summary_counts(self, session):
        session.submit("C")
        session.advance()
        session.submit("wrong")
        session.expire()

        summary = session.summary()
        assert summary["total_questions"] == 3
        assert summary["answered"] == 2
        assert summary["correct"] == 1
        assert summary["marks_awarded"] == 1
        assert summary["marks_available"] == 3
        assert summary["score_percentage"] == 33
        assert summary["time_up"] is True


class TestAsyncTicking:
    """Session driven by the async ticker."""

    @pytest.mark.asyncio
    async def test_ticker_expires_session(self, reports):
        session = QuizSession(
            [_frq("f1")],
            time_limit_minutes=1,
            on_finish=reports.append,
            countdown=Countdown(3),
        )
        session.set_draft("x^2")
        ticker = session.attach_ticker(interval=0.001)

        await asyncio.wait_for(ticker.start(), timeout=2)

        assert session.state == SessionState.FINISHED
        assert len(session.answers) == 1
        assert len(reports) == 1
        assert ticker.done

    @pytest.mark.asyncio
    async def test_ticker_expires_zero_length_session(self, reports):
        session = QuizSession([_frq("f1")], time_limit_minutes=0, on_finish=reports.append)
        session.set_draft("x^2")
        ticker = session.attach_ticker(interval=0.001)

        await asyncio.wait_for(ticker.start(), timeout=2)

        assert session.state == SessionState.FINISHED
        assert session.time_up is True
        assert len(session.answers) == 1
        assert len(reports) == 1
