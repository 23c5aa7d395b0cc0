"""Groq text generation backend."""

from __future__ import annotations

import time
from typing import Any

import groq
from groq import AsyncGroq

from parley.config import Settings, get_settings
from parley.logging_config import get_logger
from parley.services.llm.exceptions import (
    LLMAuthenticationError,
    LLMConnectionError,
    LLMRateLimitError,
    LLMServiceError,
)

logger: Any = get_logger(__name__)


class GroqService:
    """Groq chat completions wrapped as a single-prompt text backend."""

    def __init__(
        self,
        settings: Settings | None = None,
        model: str | None = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._model = model or self._settings.groq_model
        self._client: AsyncGroq | None = None

    @property
    def model(self) -> str:
        return self._model

    @property
    def client(self) -> AsyncGroq:
        """Lazy initialization of AsyncGroq client."""
        if self._client is None:
            api_key = self._settings.groq_api_key
            if not api_key or not api_key.get_secret_value():
                raise LLMAuthenticationError("GROQ_API_KEY is not configured")
            self._client = AsyncGroq(
                api_key=api_key.get_secret_value(),
                timeout=30.0,
                max_retries=2,
            )
        return self._client

    async def generate(
        self,
        prompt: str,
        *,
        max_tokens: int = 256,
        temperature: float = 0.7,
    ) -> str:
        """Send the prompt as a single user message.

        Raises:
            LLMRateLimitError: When rate limit exceeded
            LLMConnectionError: When API unreachable
            LLMAuthenticationError: When API key invalid
            LLMServiceError: For other API errors
        """
        return await self.chat(
            [{"role": "user", "content": prompt}],
            max_tokens=max_tokens,
            temperature=temperature,
        )

    async def chat(
        self,
        messages: list[dict],
        *,
        max_tokens: int = 256,
        temperature: float = 0.7,
        model: str | None = None,
    ) -> str:
        """Run a non-streaming chat completion and return the message text."""
        start_time = time.perf_counter()

        try:
            response = await self.client.chat.completions.create(
                messages=messages,  # type: ignore[arg-type]
                model=model or self._model,
                temperature=temperature,
                max_tokens=max_tokens,
            )

        except groq.RateLimitError as e:
            logger.warning(f"Groq rate limit hit: {e}")
            raise LLMRateLimitError(
                "Rate limit exceeded",
                retry_after=self._extract_retry_after(e),
            ) from e

        except groq.APIConnectionError as e:
            logger.error(f"Groq connection error: {e.__cause__}")
            raise LLMConnectionError("Failed to connect to Groq API") from e

        except groq.AuthenticationError as e:
            logger.error("Groq authentication failed")
            raise LLMAuthenticationError("Invalid Groq API key") from e

        except groq.APIStatusError as e:
            logger.error(f"Groq API error: {e.status_code} - {e.message}")
            raise LLMServiceError(f"Groq API error: {e.status_code}") from e

        elapsed_ms = (time.perf_counter() - start_time) * 1000
        logger.debug(f"Groq completion in {elapsed_ms:.1f}ms")

        if not response.choices:
            return ""
        return response.choices[0].message.content or ""

    def _extract_retry_after(self, error: groq.RateLimitError) -> float:
        """Extract retry-after from rate limit error."""
        if hasattr(error, "response") and error.response:
            retry_after = error.response.headers.get("retry-after")
            if retry_after:
                try:
                    return float(retry_after)
                except ValueError:
                    pass
        return 60.0

    async def health_check(self) -> bool:
        """Check if Groq API is reachable."""
        try:
            response = await self.client.chat.completions.create(
                messages=[{"role": "user", "content": "hi"}],
                model=self._model,
                max_tokens=1,
            )
            return bool(response.choices)
        except Exception as e:
            logger.warning(f"Groq health check failed: {e}")
            return False

    async def close(self) -> None:
        """Close the client connection."""
        if self._client:
            await self._client.close()
            self._client = None
