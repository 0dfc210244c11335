"""Dispatch loop: resolve each choice and continue the conversation.

For every choice of a response the loop extracts a function call intent,
runs the matching handler, sends the result back as a user message, and
processes the follow-up response the same way. Follow-ups are handled
depth-first with an explicit stack, so a follow-up chain finishes before
the next sibling choice is looked at and output order is deterministic.

The loop ends when every choice in the chain has been answered or ended
with a diagnostic. A continuation cap bounds the number of follow-up
requests per turn.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from textcall.dispatch.config import ChoiceOutcome, DispatchConfig, FollowUpContext
from textcall.dispatch.models import StepResult, TurnResult
from textcall.models.messages import ChatRequest, Message, Role
from textcall.parsing.extractors import ExtractionKind, MarkerExtractor
from textcall.toolkit.models import ERROR_PREFIX

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator

    from textcall.llm.protocols import LLMClient
    from textcall.models.messages import ChatResponse, Choice
    from textcall.parsing.extractors import IntentExtractor
    from textcall.toolkit.registry import FunctionRegistry

logger = logging.getLogger(__name__)


@dataclass
class _Frame:
    """One response being worked through, plus the request that produced it."""

    request: ChatRequest
    choices: Iterator[tuple[int, Choice]]
    depth: int


class DispatchLoop:
    """Resolves the choices of a response, following function calls.

    The loop owns no conversation state between runs; each ``run()`` call
    works on its own request/response chain, so one loop can serve many
    conversations.

    Usage::

        loop = DispatchLoop(client, registry)
        result = loop.run(request, client.chat(request))
        for answer in result.answers:
            print(answer)
    """

    def __init__(
        self,
        client: LLMClient,
        registry: FunctionRegistry,
        config: DispatchConfig | None = None,
        extractor: IntentExtractor | None = None,
    ) -> None:
        self._client = client
        self._registry = registry
        self._config = config or DispatchConfig()
        self._extractor = extractor or MarkerExtractor()

    @property
    def config(self) -> DispatchConfig:
        return self._config

    def run(self, request: ChatRequest, response: ChatResponse) -> TurnResult:
        """Process ``response`` (the answer to ``request``) to completion.

        Args:
            request: The request that produced ``response``. Used as the
                base of follow-up requests under the CARRY policy.
            response: The response to resolve.

        Returns:
            TurnResult with one StepResult per choice seen, depth-first.

        Raises:
            LLMClientError: If a follow-up request fails. The turn is
                abandoned; steps already emitted through ``on_step`` stand.
        """
        steps: list[StepResult] = []
        follow_ups = 0
        stack = [_Frame(request, iter(enumerate(response.choices)), 0)]

        while stack:
            frame = stack[-1]
            item = next(frame.choices, None)
            if item is None:
                stack.pop()
                continue

            index, choice = item
            step, follow_up = self._resolve(frame, index, choice, follow_ups)
            steps.append(step)
            self._emit(step)

            if follow_up is None:
                continue

            follow_ups += 1
            logger.info(
                "Sending follow-up %d for %s (depth %d)",
                follow_ups,
                step.function_name,
                frame.depth + 1,
            )
            next_response = self._client.chat(follow_up)
            stack.append(
                _Frame(follow_up, iter(enumerate(next_response.choices)), frame.depth + 1)
            )

        return TurnResult(steps=steps, follow_ups=follow_ups)

    # ------------------------------------------------------------------
    # Internal methods
    # ------------------------------------------------------------------

    def _resolve(
        self,
        frame: _Frame,
        index: int,
        choice: Choice,
        follow_ups: int,
    ) -> tuple[StepResult, ChatRequest | None]:
        """Decide what to do with one choice.

        Returns the step record and, for a dispatched call, the follow-up
        request to send.
        """
        depth = frame.depth
        text = choice.content()
        if text is None:
            diagnostic = f"Choice {index} carried neither a message nor text"
            logger.warning(diagnostic)
            return StepResult(
                depth=depth,
                choice_index=index,
                outcome=ChoiceOutcome.EMPTY,
                diagnostic=diagnostic,
            ), None

        message = choice.message or Message(role=Role.ASSISTANT, content=text)
        extraction = self._extractor.extract(message)

        if extraction.kind is ExtractionKind.NONE:
            return StepResult(
                depth=depth,
                choice_index=index,
                outcome=ChoiceOutcome.ANSWERED,
                text=text,
            ), None

        name = extraction.function_name
        raw = extraction.raw_parameters
        logger.info("Model requested function %s with parameters %s", name, raw)

        if extraction.kind is ExtractionKind.MALFORMED:
            diagnostic = f"Invalid parameter format for '{name}': {raw}"
            logger.warning("%s (%s)", diagnostic, extraction.error)
            return StepResult(
                depth=depth,
                choice_index=index,
                outcome=ChoiceOutcome.MALFORMED,
                text=text,
                function_name=name,
                raw_parameters=raw,
                diagnostic=diagnostic,
            ), None

        intent = extraction.intent
        handler = self._registry.lookup(name)
        if handler is None:
            diagnostic = f"Function '{name}' not found in registry"
            logger.warning(diagnostic)
            return StepResult(
                depth=depth,
                choice_index=index,
                outcome=ChoiceOutcome.UNKNOWN_FUNCTION,
                text=text,
                function_name=name,
                raw_parameters=raw,
                intent=intent,
                diagnostic=diagnostic,
            ), None

        limit = self._config.max_continuations
        if limit is not None and follow_ups >= limit:
            diagnostic = (
                f"Continuation limit of {limit} reached; "
                f"not calling '{name}'"
            )
            logger.warning(diagnostic)
            return StepResult(
                depth=depth,
                choice_index=index,
                outcome=ChoiceOutcome.LIMIT_REACHED,
                text=text,
                function_name=name,
                raw_parameters=raw,
                intent=intent,
                diagnostic=diagnostic,
            ), None

        result = self._invoke(name, handler, intent.parameters)
        follow_up = self._build_follow_up(frame.request, message, result)
        return StepResult(
            depth=depth,
            choice_index=index,
            outcome=ChoiceOutcome.DISPATCHED,
            text=text,
            function_name=name,
            raw_parameters=raw,
            intent=intent,
            handler_result=result,
        ), follow_up

    def _invoke(self, name: str, handler: Callable[[Any], str], params: dict) -> str:
        """Run a handler, turning an unexpected exception into error text."""
        try:
            return str(handler(params))
        except Exception as exc:
            logger.warning("Handler %s raised: %s", name, exc, exc_info=True)
            return f"{ERROR_PREFIX} {type(exc).__name__}: {exc}"

    def _build_follow_up(
        self,
        previous: ChatRequest,
        assistant: Message,
        result: str,
    ) -> ChatRequest:
        """Build the request that hands a handler result back to the model."""
        result_message = Message(role=Role.USER, content=result)
        if self._config.follow_up_context == FollowUpContext.CARRY:
            return ChatRequest(
                model=previous.model,
                messages=[*previous.messages, assistant, result_message],
                tools=list(previous.tools),
                tool_choice=previous.tool_choice,
            )
        return ChatRequest(model=previous.model, messages=[result_message])

    def _emit(self, step: StepResult) -> None:
        if self._config.on_step is None:
            return
        try:
            self._config.on_step(step)
        except Exception:
            logger.warning("on_step callback error", exc_info=True)
