"""
Kybalion Path: terminal CLI for the Hermetic self-responsibility course.

A Rich terminal interface for lessons, adaptive practice and the daily
session, with progress kept in a local SQLite file.

Commands:
- kybalion practice   - Run a practice set (or --preview it)
- kybalion lesson     - Run a lesson (current lesson by default)
- kybalion daily      - Daily check-in, micro practice, questions, reflection
- kybalion status     - Show progress
- kybalion reset      - Clear saved progress
"""
from __future__ import annotations

import sys
from datetime import UTC, datetime
from typing import Any, Optional

import typer
from loguru import logger
from rich.console import Console
from rich.panel import Panel
from rich.prompt import Confirm, IntPrompt, Prompt
from rich.table import Table

from config import Settings, get_settings
from kybalion_path.content import (
    Course,
    CourseLibrary,
    CourseLoadError,
    Exercise,
    Language,
    Lesson,
    ReflectionExercise,
    SortingExercise,
)
from kybalion_path.core.text import truncate
from kybalion_path.grading import ReflectionGrader
from kybalion_path.practice import PracticeConfig, base_exercise_id, select_practice_exercises
from kybalion_path.progress import (
    LessonAccess,
    ProgressStore,
    UserProgress,
    complete_daily_session,
    complete_lesson,
    complete_practice,
    lesson_access,
    lose_heart,
)
from kybalion_path.quiz import (
    DailySessionResult,
    LessonSession,
    PracticeSession,
    daily_insight,
    heart_threshold,
    today_lesson,
)
from kybalion_path.quiz.session import DAILY_MICRO_PRACTICE, DAILY_REFLECTION_PROMPTS

# =============================================================================
# CLI Setup
# =============================================================================

app = typer.Typer(
    name="kybalion",
    help="Kybalion Path: lessons, practice and daily reflection",
    no_args_is_help=True,
)
console = Console()


# =============================================================================
# Styling
# =============================================================================

STYLES = {
    "correct": "bold green",
    "incorrect": "bold red",
    "info": "bold cyan",
    "warning": "bold yellow",
    "dim": "dim",
    "exercise_type": {
        "MULTIPLE_CHOICE": "green",
        "TRUE_FALSE": "yellow",
        "CLOZE": "magenta",
        "SCENARIO": "cyan",
        "SORTING": "blue",
        "REFLECTION": "bright_blue",
    },
}


def style_exercise_type(exercise_type: str) -> str:
    """Get styled exercise type string."""
    color = STYLES["exercise_type"].get(exercise_type, "white")
    return f"[{color}]{exercise_type.lower()}[/{color}]"


# =============================================================================
# Wiring
# =============================================================================


def _now() -> datetime:
    return datetime.now(UTC)


def _open_store(settings: Settings) -> ProgressStore:
    return ProgressStore(settings.progress_db_path)


def _load_course(settings: Settings, language: str) -> Course:
    try:
        return CourseLibrary(settings.content_dir).for_language(language)
    except CourseLoadError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)


def _practice_config(settings: Settings) -> PracticeConfig:
    return PracticeConfig.from_settings(settings.get_practice_config())


def _grader(settings: Settings) -> ReflectionGrader:
    return ReflectionGrader(
        base_url=settings.grading_proxy_url,
        timeout_seconds=settings.grading_timeout_seconds,
    )


def _language_of(progress: UserProgress, override: Optional[str]) -> str:
    return override or progress.language.value


# =============================================================================
# Display Helpers
# =============================================================================


def display_exercise(exercise: Exercise, index: int, total: int) -> None:
    """Display an exercise prompt with numbered options."""
    header = f"Question {index}/{total}  |  {style_exercise_type(exercise.type)}"

    content = exercise.prompt
    if exercise.options:
        content += "\n\n"
        for i, opt in enumerate(exercise.options, 1):
            content += f"  {i}. {opt}\n"

    console.print(Panel(
        content.rstrip(),
        title=header,
        title_align="left",
        border_style="cyan",
        padding=(1, 2),
    ))


def display_feedback(exercise: Exercise, is_correct: bool, language: str) -> None:
    """Display the verdict and explanation for an answer."""
    style = STYLES["correct"] if is_correct else STYLES["incorrect"]
    if language == Language.DE.value:
        verdict = "Richtig!" if is_correct else "Nicht ganz."
    else:
        verdict = "Correct!" if is_correct else "Not quite."
    icon = "[green]✓[/green]" if is_correct else "[red]✗[/red]"

    content = f"{icon} {verdict}"
    if exercise.explanation:
        content += f"\n\n[dim]{exercise.explanation}[/dim]"
    console.print(Panel(content, border_style=style, padding=(0, 2)))


def ask_answer(exercise: Exercise) -> Any:
    """
    Read an answer for a non-reflection exercise.

    Option exercises take the option number; sorting takes the option
    numbers in order, separated by spaces.
    """
    options = exercise.options or []

    if isinstance(exercise, SortingExercise):
        while True:
            raw = Prompt.ask("Order (e.g. 2 1 3)")
            picks = raw.replace(",", " ").split()
            if all(p.isdigit() and 1 <= int(p) <= len(options) for p in picks) and picks:
                return [options[int(p) - 1] for p in picks]
            console.print("[yellow]Enter option numbers separated by spaces.[/yellow]")

    if options:
        choices = [str(i) for i in range(1, len(options) + 1)]
        picked = Prompt.ask("Answer", choices=choices, show_choices=True)
        return options[int(picked) - 1]

    # Authored true/false items may come without options
    return Prompt.ask("Answer (true/false)")


def _display_practice_summary(correct: int, total: int, hearts: int, language: str) -> None:
    if language == Language.DE.value:
        body = f"Richtig: {correct}/{total} · Herzen: +{hearts}"
    else:
        body = f"Correct: {correct}/{total} · Hearts: +{hearts}"
    console.print(Panel(
        f"[bold]Practice complete![/bold]\n\n{body}",
        title="Summary",
        border_style="green",
    ))


# =============================================================================
# Session Runners
# =============================================================================


def _run_practice(
    settings: Settings,
    store: ProgressStore,
    progress: UserProgress,
    course: Course,
    language: str,
    count: int,
    queued_lesson_id: Optional[str] = None,
) -> UserProgress:
    now = _now()
    exercises = select_practice_exercises(
        course, progress, language, count, now, config=_practice_config(settings)
    )
    if not exercises:
        console.print("[red]No practice exercises available.[/red]")
        raise typer.Exit(1)

    threshold = heart_threshold(len(exercises))
    if language == Language.DE.value:
        console.print(f"[dim]1 Herz ab {threshold} von {len(exercises)} richtigen Antworten.[/dim]")
    else:
        console.print(f"[dim]Earn 1 heart with {threshold} of {len(exercises)} correct.[/dim]")

    session = PracticeSession(exercises=exercises, language=language)
    try:
        for i, exercise in enumerate(exercises, 1):
            display_exercise(exercise, i, len(exercises))
            is_correct = session.answer(exercise, ask_answer(exercise))
            display_feedback(exercise, is_correct, language)
    except KeyboardInterrupt:
        console.print("\n\n[yellow]Practice interrupted.[/yellow]")
        raise typer.Exit(130)

    result = session.result()
    practice = settings.get_practice_config()
    completion = complete_practice(
        progress,
        result,
        _now(),
        min_answers=practice["gate"]["min_answers"],
        pass_ratio=practice["gate"]["pass_ratio"],
    )
    progress = completion.progress
    store.save(progress)
    _display_practice_summary(result.correct, result.total, result.hearts_earned, language)

    if completion.gate_cleared:
        console.print("[green]Mastery gate cleared.[/green]")
        if queued_lesson_id and Confirm.ask(f"Continue with {queued_lesson_id}?", default=True):
            progress = _run_lesson(settings, store, progress, course, language, queued_lesson_id)
    return progress


def _run_lesson(
    settings: Settings,
    store: ProgressStore,
    progress: UserProgress,
    course: Course,
    language: str,
    lesson_id: str,
) -> UserProgress:
    lesson = course.find_lesson(lesson_id)
    if lesson is None:
        console.print(f"[red]Unknown lesson: {lesson_id}[/red]")
        raise typer.Exit(1)

    _display_lesson_intro(lesson)
    session = LessonSession(lesson=lesson, language=language)
    grader = _grader(settings)
    try:
        for i, exercise in enumerate(lesson.exercises, 1):
            display_exercise(exercise, i, len(lesson.exercises))
            if isinstance(exercise, ReflectionExercise):
                text = Prompt.ask("Your reflection")
                feedback = grader.evaluate(exercise.prompt, text, language)
                is_correct = session.answer_reflection(exercise, feedback)
                console.print(f"[dim]{feedback.feedback} ({feedback.score}/100)[/dim]")
            else:
                is_correct = session.answer(exercise, ask_answer(exercise))
                display_feedback(exercise, is_correct, language)

            if not is_correct:
                progress = lose_heart(progress)
                store.save(progress)
                console.print(f"[red]♥ {progress.hearts}/{progress.max_hearts}[/red]")
                if progress.hearts == 0:
                    console.print("[yellow]Out of hearts. Practice to earn more.[/yellow]")
                    return progress
    except KeyboardInterrupt:
        console.print("\n\n[yellow]Lesson interrupted.[/yellow]")
        raise typer.Exit(130)
    finally:
        grader.close()

    progress = complete_lesson(
        progress, course, lesson.id, session.score_percent, session.passed, _now()
    )
    store.save(progress)

    style = "green" if session.passed else "red"
    console.print(Panel(
        f"[bold]{lesson.title}[/bold]\n\n"
        f"Score: {session.score_percent:.0f}% (required {lesson.required_score_percent}%)",
        title="Passed" if session.passed else "Not passed",
        border_style=style,
    ))
    if progress.active_gate is not None:
        console.print(f"[yellow]{progress.active_gate.message}[/yellow]")
    return progress


def _display_lesson_intro(lesson: Lesson) -> None:
    body = lesson.intro_text or lesson.description
    if lesson.quote:
        body += f'\n\n[italic]"{lesson.quote.text}"[/italic]'
        if lesson.quote.source:
            body += f"\n[dim]- {lesson.quote.source}[/dim]"
    if lesson.interpretation:
        body += f"\n\n{lesson.interpretation}"
    console.print(Panel(body, title=lesson.title, border_style="cyan", padding=(1, 2)))


# =============================================================================
# Commands
# =============================================================================


@app.command()
def practice(
    count: Optional[int] = typer.Option(
        None,
        "--count", "-c",
        help="Number of exercises (defaults to the configured session size)",
    ),
    preview: bool = typer.Option(
        False,
        "--preview", "-p",
        help="List today's practice set without answering",
    ),
    lang: Optional[str] = typer.Option(None, "--lang", "-l", help="Course language (de/en)"),
) -> None:
    """
    Run an adaptive practice set.

    The set is stable for the day and changes once you earn XP or complete
    a lesson.
    """
    settings = get_settings()
    store = _open_store(settings)
    try:
        progress = store.load(settings.default_language)
        language = _language_of(progress, lang)
        course = _load_course(settings, language)
        size = settings.practice_session_size if count is None else count

        if preview:
            exercises = select_practice_exercises(
                course, progress, language, size, _now(), config=_practice_config(settings)
            )
            if not exercises:
                console.print("[red]No practice exercises available.[/red]")
                raise typer.Exit(1)

            table = Table(title="Practice Set")
            table.add_column("#", justify="right")
            table.add_column("Type")
            table.add_column("Prompt")
            table.add_column("Source", style="dim")
            for i, exercise in enumerate(exercises, 1):
                table.add_row(
                    str(i),
                    style_exercise_type(exercise.type),
                    truncate(exercise.prompt, 70),
                    base_exercise_id(exercise.id),
                )
            console.print(table)
            return

        _run_practice(settings, store, progress, course, language, size)
    finally:
        store.close()


@app.command()
def lesson(
    lesson_id: Optional[str] = typer.Argument(None, help="Lesson id (defaults to the current lesson)"),
    lang: Optional[str] = typer.Option(None, "--lang", "-l", help="Course language (de/en)"),
) -> None:
    """Run a lesson. Practice first if a mastery gate is open or hearts are empty."""
    settings = get_settings()
    store = _open_store(settings)
    try:
        progress = store.load(settings.default_language)
        language = _language_of(progress, lang)
        course = _load_course(settings, language)
        target = lesson_id or progress.current_lesson_id
        if course.find_lesson(target) is None:
            console.print(f"[red]Unknown lesson: {target}[/red]")
            raise typer.Exit(1)

        access = lesson_access(progress, target)
        if access == LessonAccess.LOCKED:
            console.print(
                f"[yellow]{target} is locked. Finish {progress.current_lesson_id} first.[/yellow]"
            )
            raise typer.Exit(1)

        if access == LessonAccess.GATED:
            console.print(f"[yellow]{progress.active_gate.message}[/yellow]")
            if not Confirm.ask("Start practice now?", default=True):
                raise typer.Exit(0)
            _run_practice(
                settings, store, progress, course, language,
                settings.practice_session_size, queued_lesson_id=target,
            )
            return

        if access == LessonAccess.NEEDS_PRACTICE:
            console.print("[yellow]No hearts left. Practice to earn a heart back.[/yellow]")
            if not Confirm.ask("Start practice now?", default=True):
                raise typer.Exit(0)
            _run_practice(settings, store, progress, course, language, settings.practice_session_size)
            return

        _run_lesson(settings, store, progress, course, language, target)
    finally:
        store.close()


@app.command()
def daily(
    lang: Optional[str] = typer.Option(None, "--lang", "-l", help="Course language (de/en)"),
) -> None:
    """Daily session: check-in, insight, micro practice, questions and reflection."""
    settings = get_settings()
    store = _open_store(settings)
    try:
        progress = store.load(settings.default_language)
        language = _language_of(progress, lang)
        course = _load_course(settings, language)
        focus = today_lesson(course, progress)
        if focus is None:
            console.print("[red]Course has no lessons.[/red]")
            raise typer.Exit(1)

        console.print(f"\n[bold cyan]Today[/bold cyan] - {focus.title}")
        console.print("=" * 40)

        # 1. Check-in
        scale = [str(n) for n in range(1, 11)]
        clarity = IntPrompt.ask("Clarity (1-10)", choices=scale, default=6, show_choices=False)
        reactivity = IntPrompt.ask("Reactivity (1-10)", choices=scale, default=6, show_choices=False)
        agency = IntPrompt.ask("Agency (1-10)", choices=scale, default=6, show_choices=False)

        # 2. Insight and micro practice
        console.print(Panel(daily_insight(focus), title="Insight", border_style="cyan"))
        console.print(Panel(DAILY_MICRO_PRACTICE[language], title="Micro practice", border_style="blue"))
        Prompt.ask("[dim]Press Enter when done[/dim]", default="", show_default=False)

        # 3. Questions
        exercises = select_practice_exercises(
            course, progress, language, settings.daily_practice_size, _now(),
            config=_practice_config(settings),
        )
        session = PracticeSession(exercises=exercises, language=language)
        for i, exercise in enumerate(exercises, 1):
            display_exercise(exercise, i, len(exercises))
            display_feedback(exercise, session.answer(exercise, ask_answer(exercise)), language)

        # 4. Reflection
        prompt = DAILY_REFLECTION_PROMPTS[language]
        console.print(Panel(prompt, title="Reflection", border_style="magenta"))
        text = Prompt.ask("Your reflection").strip()
        while len(text) < 10:
            console.print("[yellow]Write at least a sentence.[/yellow]")
            text = Prompt.ask("Your reflection").strip()

        with _grader(settings) as grader:
            feedback = grader.evaluate(prompt, text, language)
        console.print(f"[dim]{feedback.feedback} ({feedback.score}/100)[/dim]")

        result = DailySessionResult(
            reflection_text=text,
            reflection_passed=feedback.is_pass,
            reflection_score=feedback.score,
            clarity=clarity,
            reactivity=reactivity,
            agency=agency,
            practice_answers=session.answers,
        )
        progress = complete_daily_session(progress, result, _now())
        store.save(progress)

        console.print(Panel(
            f"[bold]Daily session complete![/bold]\n\n"
            f"XP: +{result.xp_earned} · Gems: +{result.gems_earned}",
            title="Summary",
            border_style="green",
        ))
    except KeyboardInterrupt:
        console.print("\n\n[yellow]Daily session interrupted.[/yellow]")
        raise typer.Exit(130)
    finally:
        store.close()


@app.command()
def status() -> None:
    """Show progress: hearts, XP, gems, current lesson and mastery gate."""
    settings = get_settings()
    store = _open_store(settings)
    try:
        progress = store.load(settings.default_language)
    finally:
        store.close()

    console.print("\n[bold cyan]Progress[/bold cyan]")
    console.print("=" * 40)

    table = Table(show_header=False, box=None)
    table.add_column("Metric", style="dim")
    table.add_column("Value", style="bold")

    table.add_row("Language", progress.language.value)
    table.add_row("Hearts", f"{progress.hearts}/{progress.max_hearts}")
    table.add_row("XP", str(progress.xp))
    table.add_row("Gems", str(progress.gems))
    table.add_row("Streak", str(progress.streak))
    table.add_row("Current lesson", progress.current_lesson_id)
    table.add_row("Lessons completed", str(len(progress.completed_lessons)))
    table.add_row("Exercises practiced", str(len(progress.practice_stats)))
    table.add_row("Last daily session", progress.last_daily_completed_date or "-")
    gate = "[yellow]practice required[/yellow]" if progress.has_practice_gate else "[green]none[/green]"
    table.add_row("Mastery gate", gate)
    console.print(table)

    if progress.outcome_history:
        console.print("\n[bold]Recent Check-ins[/bold]")
        outcomes = Table()
        outcomes.add_column("Date")
        outcomes.add_column("Clarity")
        outcomes.add_column("Reactivity")
        outcomes.add_column("Agency")
        for entry in progress.outcome_history[-7:]:
            outcomes.add_row(entry.date, str(entry.clarity), str(entry.reactivity), str(entry.agency))
        console.print(outcomes)


@app.command()
def reset(
    confirm: bool = typer.Option(
        False,
        "--yes", "-y",
        help="Skip confirmation",
    ),
) -> None:
    """Clear saved progress for a fresh start."""
    if not confirm and not Confirm.ask("Reset ALL progress? This cannot be undone!", default=False):
        raise typer.Exit(0)

    settings = get_settings()
    store = _open_store(settings)
    try:
        store.reset()
    finally:
        store.close()
    console.print("[green]Progress has been reset.[/green]")


# =============================================================================
# Entry Point
# =============================================================================

def main() -> None:
    """CLI entry point."""
    logger.remove()
    logger.add(
        sys.stderr,
        level=get_settings().log_level.upper(),
        format="<level>{message}</level>",
    )

    app()


if __name__ == "__main__":
    main()
