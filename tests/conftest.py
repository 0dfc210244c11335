"""Shared test fixtures for Textcall."""

import pytest

from tests.helpers import StubClient
from textcall.toolkit import default_registry


@pytest.fixture
def registry():
    """Registry holding only the calculator."""
    return default_registry()


@pytest.fixture
def stub_client():
    """Stub client with an empty response queue."""
    return StubClient()


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    """Keep real credentials and settings out of tests."""
    for name in (
        "GROQ_API_KEY",
        "TEXTCALL_BASE_URL",
        "TEXTCALL_MODEL",
        "TEXTCALL_MAX_CONTINUATIONS",
        "TEXTCALL_FOLLOW_UP_CONTEXT",
        "TEXTCALL_INTENT_STRATEGY",
        "TEXTCALL_TIMEOUT",
    ):
        monkeypatch.delenv(name, raising=False)
