"""
Google Gemini LLM Provider

Implementation of the LLM provider interface for the Google Gemini API.
Gemini is the primary provider by default.
"""

import time
from typing import Optional

import google.generativeai as genai
from google.generativeai.types import GenerationConfig
from tenacity import retry, retry_if_exception, stop_after_attempt, wait_exponential

from wellness.config import get_settings
from wellness.config.logging_config import get_logger
from wellness.infrastructure.llm.provider import (
    ContentFilterError,
    EmptyResponseError,
    LLMProvider,
    LLMProviderError,
    LLMResponse,
    RateLimitError,
)
from wellness.services.prompt.prompt_builder import BuiltPrompt

logger = get_logger(__name__)


def _is_retryable(error: BaseException) -> bool:
    return isinstance(error, LLMProviderError) and error.is_retryable


class GeminiProvider(LLMProvider):
    """
    Google Gemini API provider implementation.

    Usage:
        provider = GeminiProvider()
        response = await provider.generate(prompt)
    """

    # Dangerous-content threshold is relaxed so replies can discuss
    # self-harm safety resources without being blocked.
    SAFETY_SETTINGS = [
        {"category": "HARM_CATEGORY_HARASSMENT", "threshold": "BLOCK_MEDIUM_AND_ABOVE"},
        {"category": "HARM_CATEGORY_HATE_SPEECH", "threshold": "BLOCK_MEDIUM_AND_ABOVE"},
        {"category": "HARM_CATEGORY_SEXUALLY_EXPLICIT", "threshold": "BLOCK_MEDIUM_AND_ABOVE"},
        {"category": "HARM_CATEGORY_DANGEROUS_CONTENT", "threshold": "BLOCK_ONLY_HIGH"},
    ]

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
    ) -> None:
        """
        Initialize Gemini provider.

        Args:
            api_key: Gemini API key (defaults to settings)
            model: Model identifier (defaults to settings)
        """
        settings = get_settings()

        self._api_key = api_key or settings.gemini.api_key.get_secret_value()
        self._default_model = model or settings.gemini.model
        self._default_max_tokens = settings.gemini.max_output_tokens
        self._default_temperature = settings.gemini.temperature
        self._configured = False

        if self._api_key:
            genai.configure(api_key=self._api_key)
            self._configured = True

    @property
    def provider_name(self) -> str:
        return "gemini"

    @property
    def default_model(self) -> str:
        return self._default_model

    def is_configured(self) -> bool:
        return self._configured

    @staticmethod
    def _to_gemini_history(prompt: BuiltPrompt) -> list[dict]:
        history = [
            {
                "role": "user" if turn["role"] == "user" else "model",
                "parts": [turn["content"]],
            }
            for turn in prompt.conversation_history
        ]
        # Gemini chat history must open with a user turn
        while history and history[0]["role"] == "model":
            history.pop(0)
        return history

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=1, max=10),
        retry=retry_if_exception(_is_retryable),
        reraise=True,
    )
    async def generate(
        self,
        prompt: BuiltPrompt,
        *,
        model: Optional[str] = None,
        max_tokens: Optional[int] = None,
        temperature: Optional[float] = None,
    ) -> LLMResponse:
        """
        Generate completion using Gemini API.

        Earlier turns are passed as chat history; the system prompt
        travels with the current message since it changes per turn.
        """
        if not self.is_configured():
            raise LLMProviderError(
                "Gemini API key not configured",
                provider=self.provider_name,
            )

        model_name = model or self._default_model
        gemini_model = genai.GenerativeModel(
            model_name=model_name,
            safety_settings=self.SAFETY_SETTINGS,
        )
        chat = gemini_model.start_chat(history=self._to_gemini_history(prompt))

        full_prompt = (
            f"System Instructions:\n{prompt.system_prompt}\n\n---\n\n"
            f"User message: {prompt.user_message}"
        )
        generation_config = GenerationConfig(
            max_output_tokens=max_tokens or prompt.max_tokens or self._default_max_tokens,
            temperature=temperature if temperature is not None else (
                prompt.temperature if prompt.temperature is not None else self._default_temperature
            ),
        )

        start_time = time.time()

        try:
            response = await chat.send_message_async(
                full_prompt,
                generation_config=generation_config,
            )
        except Exception as e:
            error_msg = str(e).lower()

            if "quota" in error_msg or "rate" in error_msg or "429" in error_msg:
                logger.warning("Gemini rate limit hit", error=str(e))
                raise RateLimitError(provider=self.provider_name, retry_after_seconds=60) from e

            if "safety" in error_msg or "blocked" in error_msg:
                raise ContentFilterError(provider=self.provider_name, filter_reason=str(e)) from e

            logger.error("Gemini API error", error=str(e))
            raise LLMProviderError(
                f"Gemini API error: {e}",
                provider=self.provider_name,
                is_retryable="unavailable" in error_msg or "503" in error_msg,
                original_error=e,
            ) from e

        latency_ms = int((time.time() - start_time) * 1000)

        feedback = getattr(response, "prompt_feedback", None)
        if feedback is not None and getattr(feedback, "block_reason", None):
            raise ContentFilterError(
                provider=self.provider_name,
                filter_reason=str(feedback.block_reason),
            )

        try:
            content = (response.text or "").strip()
        except ValueError as e:
            # .text raises when the candidate was stopped by safety filters
            raise ContentFilterError(provider=self.provider_name, filter_reason=str(e)) from e

        if not content:
            raise EmptyResponseError(provider=self.provider_name)

        # Gemini reports usage separately; estimate from word counts
        prompt_words = len(full_prompt.split())
        completion_words = len(content.split())
        usage = {
            "prompt_tokens": int(prompt_words * 1.3),
            "completion_tokens": int(completion_words * 1.3),
            "total_tokens": int((prompt_words + completion_words) * 1.3),
        }

        logger.debug("Gemini completion generated", model=model_name, latency_ms=latency_ms)

        return LLMResponse(
            content=content,
            finish_reason="stop",
            usage=usage,
            model=model_name,
            provider=self.provider_name,
            latency_ms=latency_ms,
        )

    async def health_check(self) -> bool:
        """Check Gemini API availability."""
        if not self.is_configured():
            return False

        try:
            for _ in genai.list_models():
                break
            return True
        except Exception as e:
            logger.warning("Gemini health check failed", error=str(e))
            return False
