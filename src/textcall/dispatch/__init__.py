"""Dispatch loop: function call detection, execution, and continuation.

Provides the DispatchLoop state machine, its configuration, and the
per-choice and per-turn result records.
"""

from textcall.dispatch.config import (
    DEFAULT_MAX_CONTINUATIONS,
    ChoiceOutcome,
    DispatchConfig,
    FollowUpContext,
)
from textcall.dispatch.loop import DispatchLoop
from textcall.dispatch.models import StepResult, TurnResult

__all__ = [
    "DEFAULT_MAX_CONTINUATIONS",
    "ChoiceOutcome",
    "DispatchConfig",
    "DispatchLoop",
    "FollowUpContext",
    "StepResult",
    "TurnResult",
]
