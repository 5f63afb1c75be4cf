"""
Unit Tests for LLM Provider Factory

No network calls: providers are only constructed and inspected.
"""

import pytest

from wellness.config import get_settings
from wellness.infrastructure.llm import (
    LLMProviderError,
    LLMProviderType,
    clear_provider_cache,
    get_llm_provider,
    get_provider_chain,
)
from wellness.infrastructure.llm.gemini_provider import GeminiProvider
from wellness.infrastructure.llm.openai_provider import OpenAIProvider
from wellness.services.prompt import BuiltPrompt


@pytest.fixture
def configure_keys(monkeypatch):
    """Set provider keys and primary provider, then rebuild settings."""
    def _configure(gemini: str = "", openai: str = "", primary: str = "gemini") -> None:
        monkeypatch.setenv("WELLNESS_GEMINI_API_KEY", gemini)
        monkeypatch.setenv("WELLNESS_OPENAI_API_KEY", openai)
        monkeypatch.setenv("WELLNESS_LLM_PRIMARY_PROVIDER", primary)
        get_settings.cache_clear()
        clear_provider_cache()

    return _configure


class TestProviderFactory:
    """Test suite for provider creation and chain order."""

    def test_no_keys_gives_empty_chain(self, configure_keys) -> None:
        configure_keys()

        assert get_provider_chain() == []

    def test_primary_first(self, configure_keys) -> None:
        configure_keys(gemini="g-key", openai="o-key", primary="openai")

        chain = get_provider_chain()

        assert [p.provider_name for p in chain] == ["openai", "gemini"]

    def test_only_configured_providers(self, configure_keys) -> None:
        configure_keys(openai="o-key")

        assert [p.provider_name for p in get_provider_chain()] == ["openai"]

    def test_instances_cached(self, configure_keys) -> None:
        configure_keys(openai="o-key")

        first = get_llm_provider(LLMProviderType.OPENAI)

        assert get_llm_provider(LLMProviderType.OPENAI) is first
        assert get_llm_provider(LLMProviderType.OPENAI, force_new=True) is not first

    def test_default_type_from_settings(self, configure_keys) -> None:
        configure_keys(primary="openai")

        assert isinstance(get_llm_provider(), OpenAIProvider)


class TestProviders:
    """Provider behaviour that needs no network."""

    async def test_unconfigured_openai_raises(self, configure_keys) -> None:
        configure_keys()
        provider = OpenAIProvider()

        assert not provider.is_configured()
        with pytest.raises(LLMProviderError):
            await provider.generate(BuiltPrompt(system_prompt="s", user_message="hi"))

    async def test_unconfigured_gemini_health(self, configure_keys) -> None:
        configure_keys()

        assert await GeminiProvider().health_check() is False

    def test_gemini_history_starts_with_user(self) -> None:
        prompt = BuiltPrompt(
            system_prompt="s",
            conversation_history=[
                {"role": "assistant", "content": "earlier reply"},
                {"role": "user", "content": "question"},
                {"role": "assistant", "content": "answer"},
            ],
            user_message="now",
        )

        history = GeminiProvider._to_gemini_history(prompt)

        assert history == [
            {"role": "user", "parts": ["question"]},
            {"role": "model", "parts": ["answer"]},
        ]
