"""
Tests for the OpenAI-backed reasoning client.
"""

from types import SimpleNamespace

import pytest

from matcher.reasoning import CHAT_PRIMER, ReasoningClient, resolve_credential
from shared.config import Settings
from shared.exceptions import CredentialRequiredError, ReasoningServiceError
from shared.models import ConversationTurn, Speaker


class FakeCompletions:
    """Records create() calls and returns a canned completion."""

    def __init__(self, content="{}", error=None):
        self.content = content
        self.error = error
        self.calls = []

    async def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.error:
            raise self.error
        message = SimpleNamespace(content=self.content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


def client_with(completions: FakeCompletions, settings: Settings) -> ReasoningClient:
    reasoning = ReasoningClient(settings)
    fake = SimpleNamespace(chat=SimpleNamespace(completions=completions))
    reasoning.client = lambda credential: fake
    return reasoning


class TestResolveCredential:
    """Test credential pre-flight."""

    def test_explicit_wins(self, settings):
        assert resolve_credential("  user-key ", settings) == "user-key"

    def test_falls_back_to_ambient(self, settings):
        assert resolve_credential(None, settings) == "test-key"
        assert resolve_credential("   ", settings) == "test-key"

    def test_missing_everywhere(self, keyless_settings):
        with pytest.raises(CredentialRequiredError):
            resolve_credential(None, keyless_settings)


def test_clients_cached_per_credential(settings):
    reasoning = ReasoningClient(settings)
    assert reasoning.client("a") is reasoning.client("a")
    assert reasoning.client("a") is not reasoning.client("b")


@pytest.mark.asyncio
class TestReasoningClient:
    """Test request shaping and error mapping."""

    async def test_analyze_requests_json(self, settings):
        completions = FakeCompletions(content='  {"ai_score_0_to_100": 70}  ')
        reply = await client_with(completions, settings).analyze("PROMPT", "key")

        assert reply == '{"ai_score_0_to_100": 70}'
        call = completions.calls[0]
        assert call["model"] == settings.openai_model
        assert call["response_format"] == {"type": "json_object"}
        assert call["messages"][-1] == {"role": "user", "content": "PROMPT"}

    async def test_empty_completion(self, settings):
        reply = await client_with(FakeCompletions(content=None), settings).analyze("PROMPT", "key")
        assert reply == ""

    async def test_failure_wrapped(self, settings):
        completions = FakeCompletions(error=ConnectionError("network down"))
        with pytest.raises(ReasoningServiceError) as excinfo:
            await client_with(completions, settings).analyze("PROMPT", "key")
        assert isinstance(excinfo.value.original_error, ConnectionError)

    async def test_chat_message_layout(self, settings):
        completions = FakeCompletions(content="Looks good.")
        prior = [
            ConversationTurn(speaker=Speaker.USER, text="q1"),
            ConversationTurn(speaker=Speaker.ASSISTANT, text="a1"),
        ]

        reply = await client_with(completions, settings).chat(prior, "q2", "JD: x... Resume: y...", "key")

        assert reply == "Looks good."
        messages = completions.calls[0]["messages"]
        assert messages[0]["role"] == "system"
        assert "JD: x... Resume: y..." in messages[0]["content"]
        assert messages[1] == {"role": "assistant", "content": CHAT_PRIMER}
        assert messages[2:] == [
            {"role": "user", "content": "q1"},
            {"role": "assistant", "content": "a1"},
            {"role": "user", "content": "q2"},
        ]
        assert "response_format" not in completions.calls[0]
