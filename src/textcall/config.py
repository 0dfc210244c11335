"""Agent configuration.

AgentConfig collects every setting the CLI and Conversation need. Values
come from constructor arguments or from the process environment (the CLI
loads a ``.env`` file first).
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping

from textcall.dispatch.config import DEFAULT_MAX_CONTINUATIONS, FollowUpContext
from textcall.exceptions import ConfigError
from textcall.llm.client import API_KEY_ENV, DEFAULT_BASE_URL, DEFAULT_MODEL

INTENT_STRATEGIES = ("marker", "legacy", "native", "auto")


@dataclass
class AgentConfig:
    """Settings for one agent session.

    Attributes:
        api_key: Bearer credential for the endpoint.
        base_url: OpenAI-compatible API base URL.
        model: Model identifier sent with every request.
        max_continuations: Follow-up cap per turn (None = unbounded).
        follow_up_context: Context policy for follow-up requests.
        intent_strategy: Intent extraction strategy name.
        system_prompt: Override for the generated system prompt.
        timeout: HTTP timeout in seconds.
        max_retries: Total attempts per request (1 = no retry).
    """

    api_key: str = ""
    base_url: str = DEFAULT_BASE_URL
    model: str = DEFAULT_MODEL
    max_continuations: int | None = DEFAULT_MAX_CONTINUATIONS
    follow_up_context: FollowUpContext = FollowUpContext.FRESH
    intent_strategy: str = "marker"
    system_prompt: str | None = None
    timeout: float = 60.0
    max_retries: int = 1

    def __post_init__(self) -> None:
        if self.max_continuations is not None and self.max_continuations < 0:
            raise ConfigError("max_continuations must be >= 0 or None")
        if self.intent_strategy not in INTENT_STRATEGIES:
            raise ConfigError(
                f"Unknown intent strategy {self.intent_strategy!r}; "
                f"expected one of {', '.join(INTENT_STRATEGIES)}"
            )
        try:
            self.follow_up_context = FollowUpContext(self.follow_up_context)
        except ValueError:
            raise ConfigError(
                f"Unknown follow-up context {self.follow_up_context!r}; "
                "expected 'fresh' or 'carry'"
            ) from None
        if self.timeout <= 0:
            raise ConfigError("timeout must be positive")
        if self.max_retries < 1:
            raise ConfigError("max_retries must be at least 1")

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None, **overrides) -> AgentConfig:
        """Build a config from environment variables.

        Overrides whose value is None are ignored, so CLI options can be
        passed straight through.

        Raises:
            ConfigError: If a variable holds an invalid value.
        """
        env = os.environ if environ is None else environ
        values: dict = {"api_key": env.get(API_KEY_ENV, "").strip()}

        if env.get("TEXTCALL_BASE_URL"):
            values["base_url"] = env["TEXTCALL_BASE_URL"]
        if env.get("TEXTCALL_MODEL"):
            values["model"] = env["TEXTCALL_MODEL"]
        if env.get("TEXTCALL_MAX_CONTINUATIONS"):
            values["max_continuations"] = parse_max_continuations(
                env["TEXTCALL_MAX_CONTINUATIONS"]
            )
        if env.get("TEXTCALL_FOLLOW_UP_CONTEXT"):
            values["follow_up_context"] = env["TEXTCALL_FOLLOW_UP_CONTEXT"].lower()
        if env.get("TEXTCALL_INTENT_STRATEGY"):
            values["intent_strategy"] = env["TEXTCALL_INTENT_STRATEGY"].lower()
        if env.get("TEXTCALL_TIMEOUT"):
            try:
                values["timeout"] = float(env["TEXTCALL_TIMEOUT"])
            except ValueError:
                raise ConfigError(
                    f"TEXTCALL_TIMEOUT must be a number, got {env['TEXTCALL_TIMEOUT']!r}"
                ) from None

        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)


def parse_max_continuations(raw: str) -> int | None:
    """Parse a continuation cap; "none" (any case) means unbounded."""
    text = raw.strip().lower()
    if text == "none":
        return None
    try:
        return int(text)
    except ValueError:
        raise ConfigError(
            f"max continuations must be an integer or 'none', got {raw!r}"
        ) from None
