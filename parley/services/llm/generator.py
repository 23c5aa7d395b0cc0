"""Response generation for live voice sessions."""

from __future__ import annotations

import time
from collections.abc import Sequence
from typing import Any

from parley.config import Settings, get_settings
from parley.logging_config import get_logger, preview_text
from parley.observability.metrics import GENERATION_LATENCY
from parley.prompts.voice import build_voice_prompt
from parley.services.llm.exceptions import GenerationError
from parley.services.llm.protocol import ConversationTurn, TextGenerationService

logger: Any = get_logger(__name__)

FALLBACK_RESPONSE = "I apologize, but I could not generate a response."


class ResponseGenerator:
    """Turns a session's conversation history into the next assistant utterance."""

    def __init__(
        self,
        backend: TextGenerationService,
        *,
        max_tokens: int = 256,
        temperature: float = 0.7,
    ) -> None:
        self._backend = backend
        self._max_tokens = max_tokens
        self._temperature = temperature

    @property
    def backend(self) -> TextGenerationService:
        return self._backend

    async def generate(
        self,
        instructions: str,
        history: Sequence[ConversationTurn],
    ) -> str:
        """Generate the assistant reply for the conversation so far.

        Returns:
            The backend's text, or FALLBACK_RESPONSE when it came back empty.

        Raises:
            GenerationError: If the backend call itself failed.
        """
        prompt = build_voice_prompt(instructions, history)
        logger.debug(f"Generating response with {self._backend.model}...")

        start_time = time.perf_counter()
        try:
            text = await self._backend.generate(
                prompt,
                max_tokens=self._max_tokens,
                temperature=self._temperature,
            )
        except Exception as e:
            raise GenerationError(f"Text generation failed: {e}") from e
        finally:
            GENERATION_LATENCY.observe(time.perf_counter() - start_time)

        logger.debug(f"Generated response text: {preview_text(text)}")

        if not text or not text.strip():
            logger.warning("Text backend returned an empty response, using fallback")
            return FALLBACK_RESPONSE
        return text.strip()

    async def close(self) -> None:
        await self._backend.close()


def create_text_backend(settings: Settings | None = None) -> TextGenerationService:
    """Build the configured text generation backend."""
    settings = settings or get_settings()
    if settings.llm_provider == "gemini":
        from parley.services.llm.gemini import GeminiService

        return GeminiService(settings=settings)

    from parley.services.llm.groq import GroqService

    return GroqService(settings=settings)
