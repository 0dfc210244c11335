"""Rich formatting helpers for the Textcall CLI.

Status and diagnostic lines are styled and prefixed so they stand apart
from the model's final answers. Rich auto-detects TTY and degrades
gracefully when piped (no ANSI codes).
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from textcall.dispatch.config import ChoiceOutcome

if TYPE_CHECKING:
    from textcall.dispatch.models import StepResult


def get_console() -> Console:
    """Create a Rich Console that auto-detects TTY for graceful pipe degradation."""
    return Console(stderr=False)


def configure_logging(verbosity: int) -> None:
    """Route library logging through Rich. 0 = warnings, 1 = info, 2+ = debug."""
    if verbosity >= 2:
        level = logging.DEBUG
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(show_path=False, markup=False)],
        force=True,
    )


def format_step(step: StepResult, console: Console) -> None:
    """Display one resolved choice."""
    indent = "  " * step.depth

    if step.outcome is ChoiceOutcome.ANSWERED:
        console.print(
            f"{indent}[bold green]Chatbot:[/bold green] {escape(step.text)}",
            highlight=False,
        )
        return

    if step.function_name:
        console.print(
            f"{indent}[cyan]>> Model requested function:[/cyan] "
            f"{escape(step.function_name)}",
            highlight=False,
        )
        console.print(
            f"{indent}[dim]   With parameters: {escape(step.raw_parameters)}[/dim]",
            highlight=False,
        )

    if step.outcome is ChoiceOutcome.DISPATCHED:
        console.print(
            f"{indent}[dim]   Function output: {escape(step.handler_result or '')}[/dim]",
            highlight=False,
        )
        console.print(f"{indent}[green]   Function executed successfully[/green]")
        return

    format_diagnostic(step.diagnostic, console, indent=indent)


def format_diagnostic(message: str, console: Console, indent: str = "") -> None:
    """Display a recoverable problem reported by the dispatch loop."""
    console.print(f"{indent}[yellow]!! {escape(message)}[/yellow]", highlight=False)


def format_error(message: str, console: Console) -> None:
    """Display an error message."""
    console.print(f"[red]Error:[/red] {escape(message)}", highlight=False)
