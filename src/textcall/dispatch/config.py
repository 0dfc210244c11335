"""Dispatch loop configuration types.

Provides ChoiceOutcome, FollowUpContext, and DispatchConfig.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable

if TYPE_CHECKING:
    from textcall.dispatch.models import StepResult

DEFAULT_MAX_CONTINUATIONS = 8


class ChoiceOutcome(str, enum.Enum):
    """How the loop finished with one choice.

    - ``ANSWERED``: no marker; the text is a final answer.
    - ``DISPATCHED``: a handler ran and a follow-up request was sent.
    - ``MALFORMED``: a marker was found but its parameters did not decode.
    - ``UNKNOWN_FUNCTION``: the marker names no registered function.
    - ``LIMIT_REACHED``: a call was requested after the continuation cap.
    - ``EMPTY``: the choice carried neither a message nor text.
    """

    ANSWERED = "answered"
    DISPATCHED = "dispatched"
    MALFORMED = "malformed"
    UNKNOWN_FUNCTION = "unknown_function"
    LIMIT_REACHED = "limit_reached"
    EMPTY = "empty"


class FollowUpContext(str, enum.Enum):
    """What a follow-up request carries besides the handler result.

    - ``FRESH``: only the result message; no system prompt, no tools.
    - ``CARRY``: the previous request's messages, the assistant message
      that asked for the call, then the result; tools are kept.
    """

    FRESH = "fresh"
    CARRY = "carry"


@dataclass
class DispatchConfig:
    """Configuration for the dispatch loop.

    Attributes:
        max_continuations: Maximum follow-up requests per user turn.
            None removes the cap.
        follow_up_context: Context policy for follow-up requests.
        on_step: Callback invoked with each StepResult as soon as the
            choice is resolved, before any follow-up request is sent.
    """

    max_continuations: int | None = DEFAULT_MAX_CONTINUATIONS
    follow_up_context: FollowUpContext = FollowUpContext.FRESH
    on_step: Callable[[StepResult], None] | None = None
