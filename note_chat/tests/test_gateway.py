import asyncio

import pytest

from note_chat.domain.exceptions import ConfigurationError, EmptyInputError
from note_chat.domain.models import ChatContext, ChatResult, Turn
from note_chat.providers.gateway import ProviderGateway, merge_overrides, resolve_context, resolve_system


class SettingsStub:
    selected_provider = "openai"
    openai_api_key = "sk-test"
    openai_model = "gpt-5-mini"
    anthropic_api_key = "sk-ant-test"
    anthropic_model = "claude-3-opus-20240229"
    gemini_api_key = None
    gemini_model = "gemini-1.5-flash"
    system_prompt = "Default prompt."


class FakeProvider:
    def __init__(self, name):
        self.name = name
        self.requests = []

    async def chat(self, req):
        self.requests.append(req)
        return ChatResult(provider=self.name, model=req.model, content="reply")


def test_resolve_defaults():
    resolved = resolve_context(None, SettingsStub())
    assert resolved.provider == "openai"
    assert resolved.model == "gpt-5-mini"
    assert resolved.system == "Default prompt."


def test_resolve_overrides_replace():
    ctx = ChatContext(provider="Anthropic", model="claude-x", system="Only this.")
    resolved = resolve_context(ctx, SettingsStub())
    assert resolved.provider == "anthropic"
    assert resolved.model == "claude-x"
    assert resolved.system == "Only this."


def test_provider_override_uses_that_providers_default_model():
    resolved = resolve_context(ChatContext(provider="gemini"), SettingsStub())
    assert resolved.model == "gemini-1.5-flash"


def test_append_sentinel_extends_default_instruction():
    assert resolve_system("+++ Also rhyme.", "Default prompt.") == "Default prompt.\nAlso rhyme."


def test_empty_instruction_means_none():
    assert resolve_system(None, "") is None


def test_unknown_provider_is_configuration_error():
    with pytest.raises(ConfigurationError):
        resolve_context(ChatContext(provider="mistral"), SettingsStub())


def test_merge_overrides_call_site_beats_frontmatter():
    merged = merge_overrides(
        ChatContext(model="from-call"),
        {"provider": "gemini", "model": "from-note", "system": "", "unrelated": "x"},
    )
    assert merged.provider == "gemini"
    assert merged.model == "from-call"
    assert merged.system is None


def test_dispatch_resolves_once_and_appends_suffix():
    created = []

    def factory(name, cfg):
        provider = FakeProvider(name)
        created.append(provider)
        return provider

    gateway = ProviderGateway(SettingsStub(), client_factory=factory)
    turns = [Turn(role="user", content="hi")]
    reply = asyncio.run(gateway.dispatch(turns, ChatContext(provider="anthropic"), instruction_suffix="TOOLS"))
    assert reply == "reply"
    assert len(created) == 1
    req = created[0].requests[0]
    assert req.provider == "anthropic"
    assert req.model == "claude-3-opus-20240229"
    assert req.system == "Default prompt.\n\nTOOLS"
    assert [t.content for t in req.messages] == ["hi"]


def test_dispatch_rejects_empty_turns_before_any_call():
    created = []
    gateway = ProviderGateway(SettingsStub(), client_factory=lambda name, cfg: created.append(name))
    with pytest.raises(EmptyInputError):
        asyncio.run(gateway.dispatch([], None))
    assert created == []


def test_dispatch_missing_key_is_configuration_error():
    gateway = ProviderGateway(SettingsStub())
    with pytest.raises(ConfigurationError):
        asyncio.run(gateway.dispatch([Turn(role="user", content="hi")], ChatContext(provider="gemini")))
