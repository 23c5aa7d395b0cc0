"""Speech synthesis step of the live voice pipeline."""

from __future__ import annotations

import time
from typing import Any

from parley.logging_config import get_logger
from parley.observability.metrics import SYNTHESIS_LATENCY
from parley.services.tts.exceptions import SynthesisError, TTSConnectionError, TTSServiceError
from parley.services.tts.protocol import TTSService

logger: Any = get_logger(__name__)


class SpeechSynthesizer:
    """Converts assistant utterances to audio when a TTS backend is available.

    The backend is resolved once at startup; ``None`` means text-only mode.
    """

    def __init__(self, backend: TTSService | None) -> None:
        self._backend = backend

    @property
    def enabled(self) -> bool:
        return self._backend is not None

    @property
    def backend(self) -> TTSService | None:
        return self._backend

    async def synthesize(self, text: str) -> bytes | None:
        """Return audio bytes for the text, or None in text-only mode.

        Raises:
            TTSServiceError: When a configured backend failed or returned no
                audio. Unexpected backend errors are wrapped as
                TTSConnectionError.
        """
        if self._backend is None:
            logger.debug("TTS not configured - skipping audio generation")
            return None

        start_time = time.perf_counter()
        try:
            audio, metadata = await self._backend.synthesize(text)
        except TTSServiceError:
            raise
        except Exception as e:
            raise TTSConnectionError(f"TTS backend failed: {e}") from e
        finally:
            SYNTHESIS_LATENCY.observe(time.perf_counter() - start_time)

        if not audio:
            raise SynthesisError("Failed to generate audio from text")

        logger.debug(
            f"Synthesized {metadata.output_bytes} bytes with voice {metadata.voice}"
        )
        return audio

    async def close(self) -> None:
        if self._backend is not None:
            await self._backend.close()
