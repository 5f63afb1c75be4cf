"""
LLM Provider Factory

Creates and caches LLM providers, and assembles the fallback chain
used by the chat service.

CONFIGURATION:
    WELLNESS_LLM_PRIMARY_PROVIDER=gemini  # or: openai
"""

from enum import StrEnum
from typing import Optional

from wellness.config import get_settings
from wellness.config.logging_config import get_logger
from wellness.infrastructure.llm.provider import LLMProvider

logger = get_logger(__name__)


class LLMProviderType(StrEnum):
    """Supported LLM provider types."""

    GEMINI = "gemini"
    OPENAI = "openai"


_provider_instances: dict[LLMProviderType, LLMProvider] = {}


def get_llm_provider(
    provider_type: Optional[LLMProviderType] = None,
    force_new: bool = False,
) -> LLMProvider:
    """
    Get LLM provider instance.

    Provider type defaults to WELLNESS_LLM_PRIMARY_PROVIDER.

    Args:
        provider_type: Override provider type
        force_new: Create new instance instead of cached

    Returns:
        LLM provider (possibly unconfigured)
    """
    if provider_type is None:
        provider_type = LLMProviderType(get_settings().llm_primary_provider)

    if not force_new and provider_type in _provider_instances:
        return _provider_instances[provider_type]

    provider = _create_provider(provider_type)

    if not force_new:
        _provider_instances[provider_type] = provider

    logger.info(
        "LLM provider initialized",
        provider=provider_type.value,
        configured=provider.is_configured(),
    )
    return provider


def get_provider_chain() -> list[LLMProvider]:
    """
    Configured providers in the order they should be tried.

    The primary provider comes first, then every other configured
    provider. An empty list means replies come from canned fallbacks.
    """
    primary = LLMProviderType(get_settings().llm_primary_provider)
    order = [primary] + [p for p in LLMProviderType if p != primary]

    chain = []
    for provider_type in order:
        provider = get_llm_provider(provider_type)
        if provider.is_configured():
            chain.append(provider)
    return chain


def _create_provider(provider_type: LLMProviderType) -> LLMProvider:
    """Create provider instance by type."""
    if provider_type == LLMProviderType.GEMINI:
        from wellness.infrastructure.llm.gemini_provider import GeminiProvider
        return GeminiProvider()

    elif provider_type == LLMProviderType.OPENAI:
        from wellness.infrastructure.llm.openai_provider import OpenAIProvider
        return OpenAIProvider()

    else:
        raise ValueError(f"Unknown provider type: {provider_type}")


def clear_provider_cache() -> None:
    """Clear cached provider instances (for testing)."""
    _provider_instances.clear()
