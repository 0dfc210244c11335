"""Textcall CLI -- interactive chat with local function calling.

This module is NEVER imported from textcall/__init__.py.
It is only loaded via the ``textcall`` entry point defined in pyproject.toml.
"""

from __future__ import annotations

import dataclasses
from typing import TYPE_CHECKING

import click
from dotenv import load_dotenv

from textcall._version import __version__
from textcall.cli.formatting import (
    configure_logging,
    format_error,
    format_step,
    get_console,
)
from textcall.config import INTENT_STRATEGIES, AgentConfig, parse_max_continuations
from textcall.conversation import Conversation
from textcall.exceptions import ConfigError, TextcallError
from textcall.llm.errors import LLMConfigError

if TYPE_CHECKING:
    from rich.console import Console

EXIT_COMMAND = "exit"
PROMPT = "Enter your message: "


@click.command()
@click.option("--model", default=None, help="Model identifier (env: TEXTCALL_MODEL).")
@click.option(
    "--base-url",
    default=None,
    help="OpenAI-compatible API base URL (env: TEXTCALL_BASE_URL).",
)
@click.option(
    "--max-continuations",
    default=None,
    help="Follow-up requests allowed per turn, or 'none' for no cap.",
)
@click.option(
    "--context",
    "follow_up_context",
    type=click.Choice(["fresh", "carry"]),
    default=None,
    help="What follow-up requests carry besides the function result.",
)
@click.option(
    "--strategy",
    "intent_strategy",
    type=click.Choice(list(INTENT_STRATEGIES)),
    default=None,
    help="How function calls are detected in model output.",
)
@click.option("-v", "--verbose", count=True, help="Show log output (-vv for debug).")
@click.version_option(__version__, prog_name="textcall")
def cli(
    model: str | None,
    base_url: str | None,
    max_continuations: str | None,
    follow_up_context: str | None,
    intent_strategy: str | None,
    verbose: int,
) -> None:
    """Chat with a remote model that can call local functions.

    Type 'exit' to quit.
    """
    load_dotenv()
    configure_logging(verbose)
    console = get_console()

    try:
        config = AgentConfig.from_env(
            model=model,
            base_url=base_url,
            follow_up_context=follow_up_context,
            intent_strategy=intent_strategy,
        )
        if max_continuations is not None:
            config = dataclasses.replace(
                config,
                max_continuations=parse_max_continuations(max_continuations),
            )
        conversation = Conversation.from_config(
            config,
            on_step=lambda step: format_step(step, console),
        )
    except (ConfigError, LLMConfigError) as e:
        format_error(str(e), console)
        raise SystemExit(1) from None

    console.print("[dim]Loaded API key[/dim]")
    with conversation:
        _repl(conversation, console)


def _repl(conversation: Conversation, console: Console) -> None:
    """Read lines until 'exit' or end of input, running one turn per line.

    A failed turn is reported and the prompt comes back.
    """
    while True:
        try:
            line = console.input(PROMPT)
        except (EOFError, KeyboardInterrupt):
            console.print()
            break

        text = line.strip()
        if text.lower() == EXIT_COMMAND:
            break
        if not text:
            continue

        try:
            conversation.turn(text)
        except TextcallError as e:
            format_error(str(e), console)

    console.print("Exiting...")
