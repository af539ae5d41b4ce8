import asyncio
from types import SimpleNamespace

import pytest

from app.core.config import get_settings
from app.services.ai import AIFactory, AIProviderError
from app.services.ai import gemini_service
from app.services.ai.azure_openai_service import AzureOpenAIProvider
from app.services.ai.gemini_service import GeminiProvider


@pytest.fixture
def settings(monkeypatch):
    monkeypatch.setattr(AIFactory, "_instances", {})
    return get_settings()


def test_factory_disabled(settings, monkeypatch):
    monkeypatch.setattr(settings, "ai_provider", "none")
    assert AIFactory.get_provider() is None


def test_factory_unknown_provider(settings, monkeypatch):
    monkeypatch.setattr(settings, "ai_provider", "deepmind-9000")
    assert AIFactory.get_provider() is None


def test_factory_without_credentials(settings, monkeypatch):
    monkeypatch.setattr(settings, "gemini_api_key", "")
    monkeypatch.setattr(settings, "azure_openai_key", "")
    assert AIFactory.get_provider("gemini") is None
    assert AIFactory.get_provider("azure") is None


def test_factory_builds_and_caches_gemini(settings, monkeypatch):
    monkeypatch.setattr(settings, "gemini_api_key", "test-key")
    monkeypatch.setattr(gemini_service.genai, "configure", lambda **kwargs: None)

    provider = AIFactory.get_provider("gemini")

    assert isinstance(provider, GeminiProvider)
    assert provider.name == "gemini"
    assert AIFactory.get_provider("GEMINI") is provider


def test_factory_builds_azure(settings, monkeypatch):
    monkeypatch.setattr(settings, "azure_openai_endpoint", "https://example.openai.azure.com")
    monkeypatch.setattr(settings, "azure_openai_key", "test-key")
    monkeypatch.setattr(settings, "azure_openai_deployment", "gpt-4o-mini")

    provider = AIFactory.get_provider("azure")

    assert isinstance(provider, AzureOpenAIProvider)
    assert provider.deployment == "gpt-4o-mini"


# ============================================================
# PROVIDER ADAPTERS (client calls replaced)
# ============================================================

class FakeGeminiModel:
    last = None

    def __init__(self, model_name, system_instruction=None):
        self.model_name = model_name
        self.system_instruction = system_instruction
        FakeGeminiModel.last = self

    async def generate_content_async(self, prompt, generation_config=None):
        self.prompt = prompt
        if prompt == "fail":
            raise RuntimeError("quota exceeded")
        return SimpleNamespace(text='{"ok": true}')


def test_gemini_generate_json(settings, monkeypatch):
    monkeypatch.setattr(gemini_service.genai, "configure", lambda **kwargs: None)
    monkeypatch.setattr(gemini_service.genai, "GenerativeModel", FakeGeminiModel)
    provider = GeminiProvider()

    result = asyncio.run(provider.generate_json("hello", system_prompt="be brief"))

    assert result == {"ok": True}
    assert FakeGeminiModel.last.system_instruction == "be brief"
    assert FakeGeminiModel.last.prompt == "hello"


def test_gemini_errors_are_wrapped(settings, monkeypatch):
    monkeypatch.setattr(gemini_service.genai, "configure", lambda **kwargs: None)
    monkeypatch.setattr(gemini_service.genai, "GenerativeModel", FakeGeminiModel)

    with pytest.raises(AIProviderError):
        asyncio.run(GeminiProvider().generate_text("fail"))


class FakeCompletions:
    def __init__(self, content):
        self.content = content
        self.kwargs = None

    async def create(self, **kwargs):
        self.kwargs = kwargs
        message = SimpleNamespace(content=self.content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


def _azure_with(settings, monkeypatch, content):
    monkeypatch.setattr(settings, "azure_openai_endpoint", "https://example.openai.azure.com")
    monkeypatch.setattr(settings, "azure_openai_key", "test-key")
    monkeypatch.setattr(settings, "azure_openai_deployment", "resume-writer")
    provider = AzureOpenAIProvider()
    completions = FakeCompletions(content)
    provider.client = SimpleNamespace(chat=SimpleNamespace(completions=completions))
    return provider, completions


def test_azure_sends_system_and_user_messages(settings, monkeypatch):
    provider, completions = _azure_with(settings, monkeypatch, "Hello there")

    text = asyncio.run(provider.generate_text("hi", system_prompt="be kind", max_tokens=50))

    assert text == "Hello there"
    assert completions.kwargs["model"] == "resume-writer"
    assert completions.kwargs["max_tokens"] == 50
    assert completions.kwargs["messages"] == [
        {"role": "system", "content": "be kind"},
        {"role": "user", "content": "hi"},
    ]


def test_azure_empty_answer_is_an_error(settings, monkeypatch):
    provider, _ = _azure_with(settings, monkeypatch, None)

    with pytest.raises(AIProviderError):
        asyncio.run(provider.generate_text("hi"))
