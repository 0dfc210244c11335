"""Intent extraction strategies.

An extractor looks at one model message and decides whether it asks for a
local function call. Three outcomes are possible: no intent (the text is a
final answer), an intent with decoded parameters, or a marker whose
parameters could not be decoded.

The marker grammar is ``<function=NAME{JSON_PARAMS}>`` where NAME matches
``[A-Za-z0-9_]+``. Only the first marker in a message is considered.
"""

from __future__ import annotations

import enum
import json
import logging
import re
from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from textcall.toolkit.models import FunctionCallIntent

if TYPE_CHECKING:
    from textcall.models.messages import Message

logger = logging.getLogger(__name__)

MARKER_PATTERN = re.compile(r"<function=([A-Za-z0-9_]+)(\{.*?\})>")
_MARKER_HEAD = re.compile(r"<function=([A-Za-z0-9_]+)(?=\{)")
_DECODER = json.JSONDecoder()


class ExtractionKind(str, enum.Enum):
    """Outcome of running an extractor over a message."""

    NONE = "none"
    INTENT = "intent"
    MALFORMED = "malformed"


@dataclass(frozen=True)
class Extraction:
    """Result of intent extraction.

    Attributes:
        kind: Which of the three outcomes occurred.
        intent: The parsed call when ``kind`` is INTENT.
        function_name: Name found in the marker (INTENT or MALFORMED).
        raw_parameters: Parameter text as it appeared (INTENT or MALFORMED).
        error: Decoder message when ``kind`` is MALFORMED.
    """

    kind: ExtractionKind
    intent: FunctionCallIntent | None = None
    function_name: str = ""
    raw_parameters: str = ""
    error: str = ""

    @classmethod
    def none(cls) -> Extraction:
        return cls(kind=ExtractionKind.NONE)

    @classmethod
    def found(cls, name: str, raw: str, params: dict) -> Extraction:
        return cls(
            kind=ExtractionKind.INTENT,
            intent=FunctionCallIntent(
                function_name=name, raw_parameters=raw, parameters=params
            ),
            function_name=name,
            raw_parameters=raw,
        )

    @classmethod
    def malformed(cls, name: str, raw: str, error: str) -> Extraction:
        return cls(
            kind=ExtractionKind.MALFORMED,
            function_name=name,
            raw_parameters=raw,
            error=error,
        )


@runtime_checkable
class IntentExtractor(Protocol):
    """Protocol for pluggable intent extraction strategies."""

    def extract(self, message: Message) -> Extraction:
        """Inspect one message and report the call it requests, if any."""
        ...


def _decode_object(raw: str) -> tuple[dict | None, str]:
    try:
        value = json.loads(raw)
    except (ValueError, RecursionError) as exc:
        # ValueError covers JSONDecodeError and oversized integer literals.
        return None, str(exc) or type(exc).__name__
    if not isinstance(value, dict):
        return None, f"expected a JSON object, got {type(value).__name__}"
    return value, ""


def _legacy_malformed(text: str, head: re.Match, error: str) -> Extraction | None:
    """Report the legacy span at ``head`` as malformed, if there is one."""
    legacy = MARKER_PATTERN.match(text, head.start())
    if legacy is None:
        return None
    name = legacy.group(1)
    logger.debug("Marker for %s has undecodable parameters: %s", name, error)
    return Extraction.malformed(name, legacy.group(2), error)


class MarkerExtractor:
    """Extract ``<function=NAME{...}>`` markers from message text.

    With ``nested=True`` (the default) the parameter span is found by
    decoding one JSON value starting at the opening brace, so objects
    containing nested objects are supported. With ``nested=False`` the
    legacy grammar is used: the span ends at the first ``}`` that is
    directly followed by ``>``.
    """

    def __init__(self, nested: bool = True) -> None:
        self.nested = nested

    def extract(self, message: Message) -> Extraction:
        return self.extract_text(message.content)

    def extract_text(self, text: str) -> Extraction:
        """Run extraction over plain text."""
        if self.nested:
            return self._extract_scanning(text)
        return self._extract_legacy(text)

    def _extract_legacy(self, text: str) -> Extraction:
        match = MARKER_PATTERN.search(text)
        if match is None:
            return Extraction.none()
        name, raw = match.group(1), match.group(2)
        params, error = _decode_object(raw)
        if params is None:
            logger.debug("Marker for %s has undecodable parameters: %s", name, error)
            return Extraction.malformed(name, raw, error)
        return Extraction.found(name, raw, params)

    def _extract_scanning(self, text: str) -> Extraction:
        for head in _MARKER_HEAD.finditer(text):
            name = head.group(1)
            start = head.end()
            try:
                value, end = _DECODER.raw_decode(text, start)
            except (ValueError, RecursionError) as exc:
                error = str(exc) or type(exc).__name__
                malformed = _legacy_malformed(text, head, error)
                if malformed is not None:
                    return malformed
                continue
            if not text.startswith(">", end):
                malformed = _legacy_malformed(text, head, "expected '>' after parameters")
                if malformed is not None:
                    return malformed
                continue
            raw = text[start:end]
            if not isinstance(value, dict):
                return Extraction.malformed(
                    name, raw, f"expected a JSON object, got {type(value).__name__}"
                )
            return Extraction.found(name, raw, value)
        return Extraction.none()


class NativeToolCallExtractor:
    """Extract the first structured ``tool_calls`` entry of a message.

    Used with endpoints that answer tool declarations with native tool
    calls instead of text markers.
    """

    def extract(self, message: Message) -> Extraction:
        calls = message.tool_calls or []
        if not calls:
            return Extraction.none()
        function = calls[0].get("function")
        if not isinstance(function, dict):
            name = function if isinstance(function, str) else ""
            return Extraction.malformed(
                name, "", f"expected a function object, got {type(function).__name__}"
            )
        name = function.get("name")
        name = name if isinstance(name, str) else ""
        raw = function.get("arguments")
        if isinstance(raw, dict):
            return Extraction.found(name, json.dumps(raw), raw)
        raw = raw if isinstance(raw, str) else ""
        params, error = _decode_object(raw or "{}")
        if params is None:
            return Extraction.malformed(name, raw, error)
        return Extraction.found(name, raw, params)


class FirstMatchExtractor:
    """Try several extractors in order; the first non-NONE outcome wins."""

    def __init__(self, *extractors: IntentExtractor) -> None:
        self.extractors = extractors

    def extract(self, message: Message) -> Extraction:
        for extractor in self.extractors:
            result = extractor.extract(message)
            if result.kind is not ExtractionKind.NONE:
                return result
        return Extraction.none()


_STRATEGIES = ("marker", "legacy", "native", "auto")


def make_extractor(strategy: str = "marker") -> IntentExtractor:
    """Build an extractor from a strategy name.

    Args:
        strategy: "marker" (default), "legacy" (non-nested marker grammar),
            "native" (structured tool calls), or "auto" (native, then marker).

    Raises:
        ValueError: If the strategy name is unknown.
    """
    if strategy == "marker":
        return MarkerExtractor()
    if strategy == "legacy":
        return MarkerExtractor(nested=False)
    if strategy == "native":
        return NativeToolCallExtractor()
    if strategy == "auto":
        return FirstMatchExtractor(NativeToolCallExtractor(), MarkerExtractor())
    raise ValueError(
        f"Unknown intent strategy: {strategy!r}. Expected one of {', '.join(_STRATEGIES)}."
    )
