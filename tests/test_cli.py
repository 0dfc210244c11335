"""CLI tests for Textcall via Click's CliRunner.

The REPL reads from the runner's input. Conversation.from_config is
patched to return a conversation over a StubClient, so no request ever
leaves the process.
"""

from __future__ import annotations

import pytest
from click.testing import CliRunner

import textcall.cli as cli_module
from tests.helpers import StubClient, marker, message_response
from textcall.cli import cli
from textcall.conversation import Conversation
from textcall.dispatch import DispatchConfig, FollowUpContext
from textcall.exceptions import ConversationError
from textcall.llm import LLMStatusError
from textcall.toolkit import default_registry


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def runner():
    """Create a Click test runner."""
    return CliRunner()


@pytest.fixture(autouse=True)
def _no_dotenv(monkeypatch):
    """Keep a developer's .env file out of the tests."""
    monkeypatch.setattr(cli_module, "load_dotenv", lambda *a, **kw: False)


@pytest.fixture
def stubbed(monkeypatch):
    """Patch Conversation.from_config; returns (client, captured configs)."""
    client = StubClient()
    configs = []

    def fake_from_config(config, registry=None, on_step=None):
        configs.append(config)
        return Conversation(
            client,
            default_registry(),
            dispatch_config=DispatchConfig(
                max_continuations=config.max_continuations,
                follow_up_context=config.follow_up_context,
                on_step=on_step,
            ),
        )

    monkeypatch.setattr(Conversation, "from_config", fake_from_config)
    return client, configs


# ===========================================================================
# Startup
# ===========================================================================


class TestStartup:

    def test_missing_api_key_exits(self, runner):
        result = runner.invoke(cli, [], input="exit\n")
        assert result.exit_code == 1
        assert "Error:" in result.output
        assert "GROQ_API_KEY" in result.output

    def test_invalid_max_continuations_exits(self, runner, monkeypatch):
        monkeypatch.setenv("GROQ_API_KEY", "k")
        result = runner.invoke(cli, ["--max-continuations", "many"], input="exit\n")
        assert result.exit_code == 1
        assert "Error:" in result.output

    def test_loads_key_and_exits(self, runner, stubbed):
        result = runner.invoke(cli, [], input="exit\n", env={"GROQ_API_KEY": "k"})
        assert result.exit_code == 0
        assert "Loaded API key" in result.output
        assert "Exiting..." in result.output

    def test_options_reach_config(self, runner, stubbed):
        _, configs = stubbed
        result = runner.invoke(
            cli,
            [
                "--model",
                "other-model",
                "--max-continuations",
                "none",
                "--context",
                "carry",
                "--strategy",
                "auto",
            ],
            input="exit\n",
            env={"GROQ_API_KEY": "k"},
        )
        assert result.exit_code == 0
        config = configs[0]
        assert config.model == "other-model"
        assert config.max_continuations is None
        assert config.follow_up_context is FollowUpContext.CARRY
        assert config.intent_strategy == "auto"

    def test_version(self, runner):
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert "textcall" in result.output


# ===========================================================================
# REPL
# ===========================================================================


class TestRepl:

    @pytest.mark.parametrize("command", ["exit", "EXIT", "  Exit  "])
    def test_exit_any_case(self, runner, stubbed, command):
        client, _ = stubbed
        result = runner.invoke(cli, [], input=f"{command}\n", env={"GROQ_API_KEY": "k"})
        assert result.exit_code == 0
        assert client.requests == []

    def test_end_of_input_exits(self, runner, stubbed):
        result = runner.invoke(cli, [], input="", env={"GROQ_API_KEY": "k"})
        assert result.exit_code == 0
        assert "Exiting..." in result.output

    def test_blank_lines_skipped(self, runner, stubbed):
        client, _ = stubbed
        result = runner.invoke(cli, [], input="\n   \nexit\n", env={"GROQ_API_KEY": "k"})
        assert result.exit_code == 0
        assert client.requests == []

    def test_plain_answer(self, runner, stubbed):
        client, _ = stubbed
        client.queue(message_response("Hello!"))
        result = runner.invoke(cli, [], input="Hi\nexit\n", env={"GROQ_API_KEY": "k"})
        assert result.exit_code == 0
        assert "Chatbot: Hello!" in result.output
        assert client.requests[0].messages[-1].content == "Hi"

    def test_function_call_flow(self, runner, stubbed):
        client, _ = stubbed
        client.queue(
            message_response(marker("calculate", {"a": 6, "b": 3, "operation": "+"})),
            message_response("6 + 3 = 9"),
        )
        result = runner.invoke(
            cli, [], input="What is 6 + 3?\nexit\n", env={"GROQ_API_KEY": "k"}
        )
        assert result.exit_code == 0
        out = result.output
        assert ">> Model requested function: calculate" in out
        assert "With parameters:" in out
        assert "Function output: The result of 6 + 3 is 9" in out
        assert "Function executed successfully" in out
        assert "Chatbot: 6 + 3 = 9" in out
        assert out.index("Function executed successfully") < out.index("Chatbot:")

    def test_unknown_function_reported(self, runner, stubbed):
        client, _ = stubbed
        client.queue(message_response(marker("weather", {"city": "Oslo"})))
        result = runner.invoke(cli, [], input="Weather?\nexit\n", env={"GROQ_API_KEY": "k"})
        assert result.exit_code == 0
        assert "!! Function 'weather' not found in registry" in result.output

    def test_request_failure_keeps_repl_alive(self, runner, stubbed, monkeypatch):
        client, _ = stubbed
        calls = []

        def failing_chat(request):
            calls.append(request)
            if len(calls) == 1:
                raise LLMStatusError("HTTP 500 - boom", status_code=500)
            return message_response("recovered")

        monkeypatch.setattr(client, "chat", failing_chat)
        result = runner.invoke(
            cli, [], input="one\ntwo\nexit\n", env={"GROQ_API_KEY": "k"}
        )
        assert result.exit_code == 0
        assert "Error: HTTP 500 - boom" in result.output
        assert "Chatbot: recovered" in result.output
        assert "Exiting..." in result.output

    def test_undecodable_reply_keeps_repl_alive(self, runner, stubbed):
        client, _ = stubbed
        client.queue(
            message_response('<function=calculate{"a": ' + "[" * 100_000 + "}>"),
            message_response("second answer"),
        )
        result = runner.invoke(
            cli, [], input="hello\nagain\nexit\n", env={"GROQ_API_KEY": "k"}
        )
        assert result.exit_code == 0
        assert "!! Invalid parameter format for 'calculate'" in result.output
        assert "Chatbot: second answer" in result.output
        assert "Exiting..." in result.output

    def test_turn_error_keeps_repl_alive(self, runner, stubbed, monkeypatch):
        client, _ = stubbed
        client.queue(message_response("recovered"))
        real_turn = Conversation.turn
        calls = []

        def flaky_turn(self, text):
            calls.append(text)
            if len(calls) == 1:
                raise ConversationError("turn could not start")
            return real_turn(self, text)

        monkeypatch.setattr(Conversation, "turn", flaky_turn)
        result = runner.invoke(
            cli, [], input="one\ntwo\nexit\n", env={"GROQ_API_KEY": "k"}
        )
        assert result.exit_code == 0
        assert "Error: turn could not start" in result.output
        assert "Chatbot: recovered" in result.output
