"""Dispatch loop result models.

Frozen dataclasses recording what happened to each choice of a turn.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from textcall.dispatch.config import ChoiceOutcome

if TYPE_CHECKING:
    from textcall.toolkit.models import FunctionCallIntent


@dataclass(frozen=True)
class StepResult:
    """Result of resolving a single choice.

    Attributes:
        depth: 0 for the initial response, n for the nth follow-up chain level.
        choice_index: Position of the choice within its response.
        outcome: How the choice was resolved.
        text: Choice content as received ("" for an empty choice).
        function_name: Requested function, when a marker was found.
        raw_parameters: Parameter text as it appeared, when a marker was found.
        intent: The parsed call, when parameters decoded.
        handler_result: Text returned by the handler (DISPATCHED only).
        diagnostic: Operator-facing message for non-answer outcomes.
    """

    depth: int
    choice_index: int
    outcome: ChoiceOutcome
    text: str = ""
    function_name: str = ""
    raw_parameters: str = ""
    intent: FunctionCallIntent | None = None
    handler_result: str | None = None
    diagnostic: str = ""

    @property
    def is_answer(self) -> bool:
        return self.outcome is ChoiceOutcome.ANSWERED


@dataclass(frozen=True)
class TurnResult:
    """Every step of one user turn, in depth-first order."""

    steps: list[StepResult] = field(default_factory=list)
    follow_ups: int = 0

    @property
    def answers(self) -> list[str]:
        """Final answer texts in the order they were produced."""
        return [s.text for s in self.steps if s.is_answer]

    @property
    def diagnostics(self) -> list[str]:
        """Diagnostic messages in the order they were produced."""
        return [s.diagnostic for s in self.steps if s.diagnostic]

    @property
    def dispatched(self) -> list[StepResult]:
        """Steps that ran a handler."""
        return [s for s in self.steps if s.outcome is ChoiceOutcome.DISPATCHED]
