"""Google Gemini text generation backend."""

from __future__ import annotations

import time
from typing import Any

import httpx

from parley.config import Settings, get_settings
from parley.logging_config import get_logger
from parley.services.llm.exceptions import (
    LLMAuthenticationError,
    LLMConnectionError,
    LLMRateLimitError,
    LLMServiceError,
)

logger: Any = get_logger(__name__)


class GeminiService:
    """Gemini ``generate_content`` wrapped as a single-prompt text backend."""

    def __init__(
        self,
        settings: Settings | None = None,
        model: str | None = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._model = model or self._settings.gemini_model
        self._client: Any = None

    @property
    def model(self) -> str:
        return self._model

    @property
    def client(self) -> Any:
        """Lazy initialization of the google-genai client."""
        if self._client is None:
            api_key = self._settings.gemini_api_key
            if not api_key or not api_key.get_secret_value():
                raise LLMAuthenticationError(
                    "GEMINI_API_KEY or GOOGLE_GENAI_API_KEY is required"
                )
            from google import genai

            self._client = genai.Client(api_key=api_key.get_secret_value())
        return self._client

    async def generate(
        self,
        prompt: str,
        *,
        max_tokens: int = 256,
        temperature: float = 0.7,
    ) -> str:
        """Generate a completion for the composed prompt.

        Raises:
            LLMRateLimitError: On HTTP 429
            LLMAuthenticationError: On HTTP 401/403
            LLMConnectionError: When the API is unreachable
            LLMServiceError: For other API errors
        """
        from google.genai import errors, types

        start_time = time.perf_counter()

        try:
            response = await self.client.aio.models.generate_content(
                model=self._model,
                contents=prompt,
                config=types.GenerateContentConfig(
                    max_output_tokens=max_tokens,
                    temperature=temperature,
                ),
            )

        except errors.APIError as e:
            code = getattr(e, "code", None)
            if code == 429:
                logger.warning(f"Gemini rate limit hit: {e}")
                raise LLMRateLimitError("Rate limit exceeded") from e
            if code in (401, 403):
                logger.error("Gemini authentication failed")
                raise LLMAuthenticationError("Invalid Gemini API key") from e
            logger.error(f"Gemini API error: {code} - {e}")
            raise LLMServiceError(f"Gemini API error: {code}") from e

        except httpx.TransportError as e:
            logger.error(f"Gemini connection error: {e}")
            raise LLMConnectionError("Failed to connect to Gemini API") from e

        elapsed_ms = (time.perf_counter() - start_time) * 1000
        logger.debug(f"Gemini completion in {elapsed_ms:.1f}ms")

        return response.text or ""

    async def health_check(self) -> bool:
        """Check if Gemini API answers a trivial prompt."""
        try:
            text = await self.generate('Say "Hello" if you can hear me.', max_tokens=8)
            return bool(text)
        except Exception as e:
            logger.warning(f"Gemini health check failed: {e}")
            return False

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aio.aclose()
            self._client = None
