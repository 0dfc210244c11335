"""Intent extraction: turning model output into function call requests."""

from textcall.parsing.extractors import (
    MARKER_PATTERN,
    Extraction,
    ExtractionKind,
    FirstMatchExtractor,
    IntentExtractor,
    MarkerExtractor,
    NativeToolCallExtractor,
    make_extractor,
)

__all__ = [
    "MARKER_PATTERN",
    "Extraction",
    "ExtractionKind",
    "FirstMatchExtractor",
    "IntentExtractor",
    "MarkerExtractor",
    "NativeToolCallExtractor",
    "make_extractor",
]
