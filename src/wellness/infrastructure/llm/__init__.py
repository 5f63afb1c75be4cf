"""LLM provider abstraction package."""

from wellness.infrastructure.llm.provider import (
    ContentFilterError,
    EmptyResponseError,
    LLMProvider,
    LLMProviderError,
    LLMResponse,
    RateLimitError,
)
from wellness.infrastructure.llm.provider_factory import (
    LLMProviderType,
    clear_provider_cache,
    get_llm_provider,
    get_provider_chain,
)

__all__ = [
    # Base types
    "LLMProvider",
    "LLMResponse",
    "LLMProviderError",
    "RateLimitError",
    "ContentFilterError",
    "EmptyResponseError",
    # Factory
    "LLMProviderType",
    "get_llm_provider",
    "get_provider_chain",
    "clear_provider_cache",
]
