"""Conversation driver: one user turn end-to-end.

Builds the initial request (system prompt, tool declarations, user text),
sends it, and hands the response to the dispatch loop.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Callable

from textcall.dispatch.config import DispatchConfig
from textcall.dispatch.loop import DispatchLoop
from textcall.exceptions import ConversationError
from textcall.llm.client import DEFAULT_MODEL, GroqClient
from textcall.models.messages import ChatRequest, Message, Role
from textcall.parsing.extractors import make_extractor
from textcall.prompts.system import build_system_prompt
from textcall.toolkit.calculator import default_registry

if TYPE_CHECKING:
    from textcall.config import AgentConfig
    from textcall.dispatch.models import StepResult, TurnResult
    from textcall.llm.protocols import LLMClient
    from textcall.parsing.extractors import IntentExtractor
    from textcall.toolkit.registry import FunctionRegistry

logger = logging.getLogger(__name__)


class Conversation:
    """Runs user turns against a completion endpoint.

    The tool declarations and system prompt are computed once from the
    registry and shared read-only by every request. Each ``turn()`` builds
    a fresh request; no message history is kept between turns.

    Usage::

        with Conversation.from_config(AgentConfig.from_env()) as conv:
            result = conv.turn("What is 6 + 3?")
            print(result.answers)
    """

    def __init__(
        self,
        client: LLMClient,
        registry: FunctionRegistry,
        *,
        model: str = DEFAULT_MODEL,
        system_prompt: str | None = None,
        dispatch_config: DispatchConfig | None = None,
        extractor: IntentExtractor | None = None,
    ) -> None:
        self._client = client
        self._registry = registry
        self._model = model
        self._system_prompt = system_prompt or build_system_prompt(registry)
        self._declarations = tuple(registry.declarations())
        self._loop = DispatchLoop(
            client,
            registry,
            config=dispatch_config,
            extractor=extractor,
        )

    @classmethod
    def from_config(
        cls,
        config: AgentConfig,
        registry: FunctionRegistry | None = None,
        on_step: Callable[[StepResult], None] | None = None,
    ) -> Conversation:
        """Build a conversation with a GroqClient from ``config``.

        Raises:
            LLMConfigError: If the config holds no API key.
        """
        client = GroqClient(
            api_key=config.api_key,
            base_url=config.base_url,
            timeout=config.timeout,
            max_retries=config.max_retries,
        )
        return cls(
            client,
            default_registry() if registry is None else registry,
            model=config.model,
            system_prompt=config.system_prompt,
            dispatch_config=DispatchConfig(
                max_continuations=config.max_continuations,
                follow_up_context=config.follow_up_context,
                on_step=on_step,
            ),
            extractor=make_extractor(config.intent_strategy),
        )

    @property
    def system_prompt(self) -> str:
        return self._system_prompt

    def build_request(self, user_text: str) -> ChatRequest:
        """Build the initial request of a turn."""
        return ChatRequest(
            model=self._model,
            messages=[
                Message(role=Role.SYSTEM, content=self._system_prompt),
                Message(role=Role.USER, content=user_text),
            ],
            tools=list(self._declarations),
            tool_choice="auto",
        )

    def turn(self, user_text: str) -> TurnResult:
        """Run one user turn to completion.

        Raises:
            ConversationError: If ``user_text`` is blank.
            LLMClientError: If any request of the turn fails.
        """
        if not user_text.strip():
            raise ConversationError("User input is empty")
        request = self.build_request(user_text)
        logger.info("Starting turn (%d chars of user input)", len(user_text))
        response = self._client.chat(request)
        result = self._loop.run(request, response)
        logger.info(
            "Turn finished: %d steps, %d follow-ups",
            len(result.steps),
            result.follow_ups,
        )
        return result

    def close(self) -> None:
        """Close the underlying client."""
        self._client.close()

    def __enter__(self) -> Conversation:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()
