"""Command-line interface for cronkit.

Commands:
    cronkit next: List upcoming matches of an expression
    cronkit contains: Test whether a time matches (exit code 0/1)
    cronkit check: Validate an expression and report whether it can match
    cronkit describe: Describe an expression in English
    cronkit presets: List predefined schedules
"""

from __future__ import annotations

import time
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.table import Table

from cronkit.config import configure_logging, get_config
from cronkit.describe import describe
from cronkit.exceptions import CronError, CronParseError
from cronkit.gregorian import format_timestamp, in_range, parse_timestamp
from cronkit.parser import parse
from cronkit.presets import PRESETS
from cronkit.schedule import Schedule

app = typer.Typer(
    name="cronkit",
    help="Cron expression engine: parse, match and find upcoming times.",
    add_completion=False,
    no_args_is_help=True,
)

console = Console()
err_console = Console(stderr=True)

EXIT_NO_MATCH = 1
EXIT_ERROR = 2


# =============================================================================
# Type Aliases
# =============================================================================

ExprArg = Annotated[str, typer.Argument(help="Cron expression, e.g. '0 9 * * MON-FRI'")]

FromOpt = Annotated[
    Optional[str],
    typer.Option(
        "--from", "-f",
        help="Start time as epoch seconds or UTC ISO-8601 (default: now)",
    ),
]

LogLevelOpt = Annotated[
    Optional[str],
    typer.Option("--log-level", help="Log level (DEBUG, INFO, WARNING, ...)"),
]


# =============================================================================
# Helper Functions
# =============================================================================


def _load(expression: str) -> Schedule:
    try:
        return parse(expression)
    except CronParseError as e:
        err_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(EXIT_ERROR)


def _resolve_time(value: Optional[str]) -> int:
    if value is None:
        return int(time.time())
    try:
        ts = parse_timestamp(value)
    except ValueError as e:
        err_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(EXIT_ERROR)
    if not in_range(ts):
        err_console.print(f"[red]Error:[/red] {value} is outside the supported range")
        raise typer.Exit(EXIT_ERROR)
    return ts


@app.callback()
def main(log_level: LogLevelOpt = None) -> None:
    """Cron expression engine."""
    try:
        configure_logging(log_level or get_config().log_level)
    except CronError as e:
        err_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(EXIT_ERROR)


# =============================================================================
# Commands
# =============================================================================


@app.command(name="next")
def next_cmd(
    expression: ExprArg,
    start: FromOpt = None,
    after: Annotated[
        bool,
        typer.Option("--after", "-a", help="Exclude the start time itself"),
    ] = False,
    count: Annotated[
        int,
        typer.Option("--count", "-n", min=1, help="Number of times to list"),
    ] = 5,
) -> None:
    """List upcoming times matching an expression."""
    schedule = _load(expression)
    ts = _resolve_time(start)

    iterator = schedule.iter_after(ts) if after else schedule.iter_from(ts)
    times = iterator.take(count)

    if not times:
        err_console.print("No matching times.")
        raise typer.Exit(EXIT_NO_MATCH)

    for found in times:
        console.print(f"{format_timestamp(found)}  {found}", highlight=False)


@app.command(name="contains")
def contains_cmd(
    expression: ExprArg,
    at: Annotated[str, typer.Argument(help="Time as epoch seconds or UTC ISO-8601")],
) -> None:
    """Exit 0 if the time matches the expression, 1 otherwise."""
    schedule = _load(expression)
    ts = _resolve_time(at)

    if schedule.contains(ts):
        console.print(f"{format_timestamp(ts)} matches", highlight=False)
        return
    console.print(f"{format_timestamp(ts)} does not match", highlight=False)
    raise typer.Exit(EXIT_NO_MATCH)


@app.command(name="check")
def check_cmd(expression: ExprArg) -> None:
    """Validate an expression and report whether it can ever match."""
    schedule = _load(expression)

    if not schedule.any():
        console.print("[yellow]Valid, but never matches[/yellow]")
        raise typer.Exit(EXIT_NO_MATCH)
    console.print(f"[green]Valid[/green]: {describe(schedule)}")


@app.command(name="describe")
def describe_cmd(expression: ExprArg) -> None:
    """Describe an expression in English."""
    console.print(describe(_load(expression)), highlight=False)


@app.command(name="presets")
def presets_cmd() -> None:
    """List predefined schedules."""
    table = Table(title="Presets")
    table.add_column("Name", style="cyan")
    table.add_column("Expression")
    table.add_column("Description")

    for name, schedule in PRESETS.items():
        table.add_row(name, schedule.expression, describe(schedule))

    console.print(table)


if __name__ == "__main__":
    app()
