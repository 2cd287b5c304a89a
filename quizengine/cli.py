"""
Quiz CLI - sample, grade, and take quizzes from a question-pool snapshot.

Usage:
    quiz sample pool.json --paper "MCQ Only" --count 10   # Preview a sampled quiz
    quiz grade pool.json q-17 "the mitochondria"          # Check one answer
    quiz take pool.json --count 10 --minutes 5            # Timed quiz session
"""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path
from typing import Annotated

import typer
from loguru import logger
from rich import box
from rich.console import Console, Group, RenderableType
from rich.panel import Panel
from rich.prompt import Prompt
from rich.table import Table

from config import Settings, get_settings
from quizengine.exceptions import QuizEngineError
from quizengine.grading.checker import AnswerChecker
from quizengine.grading.resolver import McqResolver
from quizengine.models import CheckResult, PaperType, QuizQuestion, QuizSettings, UserAnswer
from quizengine.pool import load_pool
from quizengine.sampling.entropy import SeededSource
from quizengine.sampling.sampler import QuestionPool, StratifiedSampler
from quizengine.session.machine import QuizSession, SessionState

# =============================================================================
# CLI Setup
# =============================================================================

app = typer.Typer(
    name="quiz",
    help="Quiz generation and answer evaluation",
    add_completion=False,
    rich_markup_mode="rich",
)

console = Console()

URGENCY_STYLES = {"normal": "cyan", "warning": "yellow", "critical": "bold red"}
BACK_COMMAND = ":b"


def _configure_logging(level: str) -> None:
    logger.remove()
    logger.add(
        sys.stderr,
        level=level,
        format="<dim>{time:HH:mm:ss}</dim> | <level>{level: <8}</level> | {message}",
    )


def _load(pool_path: Path) -> QuestionPool:
    try:
        return load_pool(pool_path)
    except (OSError, QuizEngineError) as exc:
        console.print(f"[red]Could not load {pool_path}: {exc}[/red]")
        raise typer.Exit(code=1) from exc


def _build_sampler(settings: Settings, resolver: McqResolver, seed: int | None) -> StratifiedSampler:
    return StratifiedSampler(
        source=SeededSource(seed) if seed is not None else None,
        visual_aid_ratio=settings.quiz_visual_aid_ratio,
        passes=settings.quiz_shuffle_passes,
        resolver=resolver,
    )


def _quiz_settings(settings: Settings, subject: str | None, paper: str, count: int | None, minutes: int | None) -> QuizSettings:
    return QuizSettings(
        subject=subject or settings.quiz_default_subject,
        paper=PaperType.parse(paper),
        number_of_questions=count if count is not None else settings.quiz_default_question_count,
        time_limit=minutes if minutes is not None else settings.quiz_default_time_limit_minutes,
    )


# =============================================================================
# Rendering
# =============================================================================


def _question_panel(quiz_question: QuizQuestion, position: int, total: int, timer: str = "", style: str = "cyan") -> Panel:
    question = quiz_question.question
    body = f"[bold]{question.question_text}[/bold]"
    if quiz_question.requires_visual_aid:
        body += "\n[dim](refers to a diagram in the original paper)[/dim]"

    content: RenderableType = body
    if quiz_question.is_mcq:
        table = Table(box=box.MINIMAL, show_header=False)
        table.add_column("Letter", style="cyan", justify="right", width=4)
        table.add_column("Option", style="white")
        for option in quiz_question.options:
            table.add_row(option.option_letter, option.option_text)
        content = Group(body, table)

    subtitle = f"{quiz_question.max_marks} mark{'s' if quiz_question.max_marks != 1 else ''}"
    if timer:
        subtitle += f" | [{style}]{timer}[/{style}]"

    return Panel(
        content,
        title=f"[bold]Question {position}/{total}[/bold] ({question.question_type.value})",
        subtitle=subtitle,
        border_style=style,
        padding=(1, 2),
    )


def _result_panel(result: CheckResult, keyword_limit: int) -> Panel:
    colour = "green" if result.is_correct else "red"
    lines = [
        f"[bold {colour}]{'CORRECT' if result.is_correct else 'INCORRECT'}[/bold {colour}]"
        f"  {result.marks_awarded}/{result.max_marks} marks",
        "",
        result.feedback,
    ]
    if result.keywords:
        shown = result.keywords[:keyword_limit]
        more = len(result.keywords) - len(shown)
        lines.append(f"[dim]Key terms: {', '.join(shown)}{f' (+{more} more)' if more > 0 else ''}[/dim]")
    return Panel("\n".join(lines), border_style=colour, box=box.ROUNDED)


def _print_summary(session: QuizSession, answers: list[UserAnswer]) -> None:
    summary = session.summary()
    table = Table(title="Quiz Results", box=box.ROUNDED)
    table.add_column("#", justify="right", style="dim")
    table.add_column("Question")
    table.add_column("Answer")
    table.add_column("Marks", justify="right")

    by_id = {a.question_id: a for a in answers}
    for position, quiz_question in enumerate(session.questions, start=1):
        answer = by_id.get(quiz_question.id)
        if answer is None:
            table.add_row(str(position), quiz_question.question.question_text[:50], "[dim]-[/dim]", f"0/{quiz_question.max_marks}")
            continue
        colour = "green" if answer.is_correct else "red"
        table.add_row(
            str(position),
            quiz_question.question.question_text[:50],
            answer.answer[:30],
            f"[{colour}]{answer.marks_awarded}/{quiz_question.max_marks}[/{colour}]",
        )

    console.print(table)
    header = "[bold red]TIME UP[/bold red]\n" if summary["time_up"] else ""
    console.print(
        Panel(
            f"{header}Answered: {summary['answered']}/{summary['total_questions']}\n"
            f"Correct: {summary['correct']}\n"
            f"Marks: {summary['marks_awarded']}/{summary['marks_available']} "
            f"({summary['score_percentage']}%)",
            title="Summary",
            border_style="cyan",
        )
    )


def _report_results(session: QuizSession, answers: list[UserAnswer]) -> None:
    _print_summary(session, answers)
    if session.time_up:
        # The answer prompt is still blocked on stdin
        console.print("[dim]Press Enter to exit[/dim]")


# =============================================================================
# Commands
# =============================================================================


@app.command()
def sample(
    pool_path: Annotated[Path, typer.Argument(help="Question-pool snapshot (JSON)")],
    paper: Annotated[str, typer.Option("--paper", "-p", help="Mixed, MCQ Only or Theory Only")] = "Mixed",
    count: Annotated[int | None, typer.Option("--count", "-n", help="Number of questions")] = None,
    subject: Annotated[str | None, typer.Option("--subject", "-s", help="Subject for answer keys")] = None,
    seed: Annotated[int | None, typer.Option("--seed", help="Reproducible shuffle seed")] = None,
) -> None:
    """Preview the question list a quiz would use."""
    settings = get_settings()
    pool = _load(pool_path)
    quiz_settings = _quiz_settings(settings, subject, paper, count, None)
    questions = _build_sampler(settings, McqResolver(), seed).sample(pool, quiz_settings)

    if not questions:
        console.print("[yellow]No questions match the selected criteria[/yellow]")
        raise typer.Exit(code=1)

    table = Table(title=f"{quiz_settings.subject} - {quiz_settings.paper.value}", box=box.ROUNDED)
    table.add_column("#", justify="right", style="cyan")
    table.add_column("ID", style="dim")
    table.add_column("Type")
    table.add_column("Marks", justify="right")
    table.add_column("Visual", justify="center")
    table.add_column("Question")

    for quiz_question in questions:
        question = quiz_question.question
        table.add_row(
            question.question_number,
            question.id,
            question.question_type.value,
            str(quiz_question.max_marks),
            "x" if quiz_question.requires_visual_aid else "",
            question.question_text[:70],
        )

    console.print(table)
    if len(questions) < quiz_settings.requested_count:
        console.print(f"[yellow]Pool supplied {len(questions)} of {quiz_settings.requested_count} requested[/yellow]")


@app.command()
def grade(
    pool_path: Annotated[Path, typer.Argument(help="Question-pool snapshot (JSON)")],
    question_id: Annotated[str, typer.Argument(help="Question ID")],
    answer: Annotated[str, typer.Argument(help="Answer text or option letter")],
    subject: Annotated[str | None, typer.Option("--subject", "-s", help="Subject for answer keys")] = None,
) -> None:
    """Check a single answer against the pool's mark scheme."""
    settings = get_settings()
    pool = _load(pool_path)
    resolver = McqResolver()
    quiz_settings = _quiz_settings(settings, subject, "Mixed", None, None)

    quiz_question = _build_sampler(settings, resolver, None).lookup(pool, question_id, quiz_settings)
    if quiz_question is None:
        console.print(f"[red]Question {question_id} not found[/red]")
        raise typer.Exit(code=1)

    checker = AnswerChecker(resolver=resolver, default_subject=quiz_settings.subject)
    result = checker.check(answer, quiz_question)

    console.print(_question_panel(quiz_question, 1, 1))
    console.print(_result_panel(result, settings.quiz_feedback_keyword_limit))


@app.command()
def take(
    pool_path: Annotated[Path, typer.Argument(help="Question-pool snapshot (JSON)")],
    paper: Annotated[str, typer.Option("--paper", "-p", help="Mixed, MCQ Only or Theory Only")] = "Mixed",
    count: Annotated[int | None, typer.Option("--count", "-n", help="Number of questions")] = None,
    minutes: Annotated[int | None, typer.Option("--minutes", "-m", help="Time limit in minutes")] = None,
    subject: Annotated[str | None, typer.Option("--subject", "-s", help="Subject for answer keys")] = None,
    seed: Annotated[int | None, typer.Option("--seed", help="Reproducible shuffle seed")] = None,
) -> None:
    """
    Take a timed quiz.

    Type an option letter or a written answer. Enter ':b' to go back to the
    previous question. When time runs out the quiz ends and the results are
    shown; an answer still being typed is not recorded. Press Enter to exit.
    """
    settings = get_settings()
    pool = _load(pool_path)
    quiz_settings = _quiz_settings(settings, subject, paper, count, minutes)

    resolver = McqResolver()
    questions = _build_sampler(settings, resolver, seed).sample(pool, quiz_settings)
    if not questions:
        console.print("[yellow]No questions match the selected criteria[/yellow]")
        raise typer.Exit(code=1)

    session = QuizSession(
        questions,
        time_limit_minutes=quiz_settings.time_limit,
        checker=AnswerChecker(resolver=resolver, default_subject=quiz_settings.subject),
    )

    session.on_finish = lambda answers: _report_results(session, answers)

    console.print(
        Panel(
            f"[bold cyan]QUIZ[/bold cyan]\n"
            f"Subject: {quiz_settings.subject}\n"
            f"Questions: {len(questions)}\n"
            f"Time limit: {quiz_settings.time_limit} min",
            border_style="cyan",
        )
    )
    asyncio.run(_run_session(session, settings))


async def _run_session(session: QuizSession, settings: Settings) -> None:
    """Prompt loop; the countdown keeps running while a prompt waits."""
    session.attach_ticker(interval=settings.quiz_timer_interval_seconds)
    total = len(session.questions)

    while not session.finished:
        countdown = session.countdown
        console.print(
            _question_panel(
                session.current_question,
                session.current_index + 1,
                total,
                timer=countdown.format_remaining(),
                style=URGENCY_STYLES[countdown.urgency()],
            )
        )

        if session.state == SessionState.AWAITING_ANSWER:
            raw = await asyncio.to_thread(Prompt.ask, "Your answer", default="", show_default=False)
            if session.finished:
                if raw.strip() and raw.strip() != BACK_COMMAND:
                    console.print("[yellow]Time was up; that answer was not recorded[/yellow]")
                break
            if raw.strip() == BACK_COMMAND:
                session.previous()
                continue
            session.set_draft(raw)
            if session.submit() is None:
                console.print("[yellow]Enter an answer to continue[/yellow]")
                continue

        console.print(_result_panel(session.current_result, settings.quiz_feedback_keyword_limit))
        raw = await asyncio.to_thread(Prompt.ask, "[dim]Enter to continue[/dim]", default="", show_default=False)
        if session.finished:
            break
        if raw.strip() == BACK_COMMAND:
            session.previous()
            continue
        session.advance()


@app.callback()
def main(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Debug logging")] = False,
) -> None:
    """Quiz generation and answer evaluation from question-pool snapshots."""
    _configure_logging("DEBUG" if verbose else get_settings().log_level)


def run() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    run()
