"""
Reply Provider Interface

Gemini and OpenAI sit behind `LLMProvider` so ChatService can walk
its provider chain and fall back to canned text on any
`LLMProviderError`.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Optional

from wellness.services.prompt.prompt_builder import BuiltPrompt


@dataclass
class LLMResponse:
    """
    One generated companion reply.

    `usage` holds prompt/completion/total token counts. Gemini's are
    estimated from word counts.
    """

    content: str
    model: str = ""
    provider: str = ""
    latency_ms: int = 0
    finish_reason: str = "stop"
    usage: dict = field(default_factory=dict)

    def ai_metadata(self) -> dict:
        """Fields stored on the AI message's `ai_metadata` column."""
        return {
            "provider": self.provider,
            "model": self.model,
            "latency_ms": self.latency_ms,
            "finish_reason": self.finish_reason,
            "tokens": self.usage.get("total_tokens", 0),
        }


class LLMProvider(ABC):
    """A vendor API that turns a BuiltPrompt into a reply."""

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Chain entry name, also recorded as the reply `source`."""

    @property
    @abstractmethod
    def default_model(self) -> str:
        pass

    @abstractmethod
    async def generate(
        self,
        prompt: BuiltPrompt,
        *,
        model: Optional[str] = None,
        max_tokens: Optional[int] = None,
        temperature: Optional[float] = None,
    ) -> LLMResponse:
        """
        Generate a reply. Overrides fall back to the prompt's own
        temperature and token budget.

        Raises:
            LLMProviderError: Any vendor failure, after retries
        """

    @abstractmethod
    async def health_check(self) -> bool:
        pass

    @abstractmethod
    def is_configured(self) -> bool:
        """True when an API key is set. Never touches the network."""


class LLMProviderError(Exception):
    """A provider could not produce a reply; the chain moves on."""

    def __init__(
        self,
        message: str,
        provider: str,
        is_retryable: bool = False,
        original_error: Optional[Exception] = None,
    ) -> None:
        super().__init__(message)
        self.provider = provider
        self.is_retryable = is_retryable
        self.original_error = original_error


class RateLimitError(LLMProviderError):
    """Vendor quota hit (HTTP 429 / resource exhausted)."""

    def __init__(
        self,
        provider: str,
        retry_after_seconds: Optional[int] = None,
    ) -> None:
        super().__init__(
            f"Rate limit exceeded for {provider}",
            provider=provider,
            is_retryable=True,
        )
        self.retry_after_seconds = retry_after_seconds


class ContentFilterError(LLMProviderError):
    """The vendor's safety filter blocked the prompt or the reply."""

    def __init__(self, provider: str, filter_reason: str = "") -> None:
        super().__init__(
            f"Content filtered by {provider}: {filter_reason}",
            provider=provider,
            is_retryable=False,
        )
        self.filter_reason = filter_reason


class EmptyResponseError(LLMProviderError):
    """Provider returned no usable text."""

    def __init__(self, provider: str) -> None:
        super().__init__(f"Empty response from {provider}", provider=provider)
