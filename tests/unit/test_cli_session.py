"""
Unit tests for the interactive quiz loop behind `quiz take`.

Prompts are replaced with a function that blocks until the countdown runs
out, so the time-up path runs without a terminal.

Run: pytest tests/unit/test_cli_session.py -v
"""

import asyncio
import time

import pytest
from rich.console import Console

from config import get_settings
from conftest import make_question
from quizengine import cli
from quizengine.models import MarkSchemeEntry, QuizQuestion
from quizengine.session.machine import QuizSession
from quizengine.session.timer import Countdown


@pytest.fixture
def console(monkeypatch):
    recording = Console(record=True, width=200)
    monkeypatch.setattr(cli, "console", recording)
    return recording


@pytest.fixture
def fast_settings():
    return get_settings().model_copy(update={"quiz_timer_interval_seconds": 0.001})


def _session(seconds=2):
    question = QuizQuestion(
        question=make_question("f1", "Define osmosis."),
        mark_scheme=MarkSchemeEntry(id="ms-f1", question_id="f1", answer_text="osmosis"),
    )
    session = QuizSession([question], time_limit_minutes=1, countdown=Countdown(seconds))
    session.on_finish = lambda answers: cli._report_results(session, answers)
    return session


class TestTimeUpDuringPrompt:
    """Time running out while the learner is still typing."""

    @pytest.mark.asyncio
    async def test_late_answer_is_not_recorded(self, monkeypatch, console, fast_settings):
        session = _session()

        def answer_after_time_up(*args, **kwargs):
            deadline = time.monotonic() + 5
            while not session.finished and time.monotonic() < deadline:
                time.sleep(0.001)
            return "osmosis"

        monkeypatch.setattr(cli.Prompt, "ask", answer_after_time_up)

        await asyncio.wait_for(cli._run_session(session, fast_settings), timeout=10)

        output = console.export_text()
        assert session.time_up is True
        assert session.answers == []
        assert "TIME UP" in output
        assert "Press Enter to exit" in output
        assert "that answer was not recorded" in output


class TestReportResults:
    """Summary output at the end of a session."""

    def test_completed_session_has_no_exit_hint(self, console):
        session = _session()
        session.submit("osmosis")
        session.advance()

        output = console.export_text()
        assert "Quiz Results" in output
        assert "TIME UP" not in output
        assert "Press Enter to exit" not in output

    def test_help_text_matches_time_up_behaviour(self):
        doc = cli.take.__doc__
        assert "submitted for you" not in doc
        assert "not recorded" in doc
