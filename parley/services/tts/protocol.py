"""TTS (Text-to-Speech) service protocol and data types."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol


@dataclass(frozen=True, slots=True)
class VoiceParams:
    """Fixed voice and audio configuration sent with every request."""

    language_code: str = "en-US"
    voice_name: str = "en-US-Neural2-F"
    ssml_gender: str = "FEMALE"
    audio_encoding: str = "LINEAR16"
    sample_rate: int = 16000


@dataclass
class SynthesisMetadata:
    """Metadata collected after synthesis."""

    voice: str = ""
    input_chars: int = 0
    output_bytes: int = 0
    sample_rate: int = 0
    total_synthesis_ms: float | None = None


class TTSService(Protocol):
    """Protocol for TTS (Text-to-Speech) service implementations."""

    @property
    def voice(self) -> VoiceParams:
        """Voice configuration used for every request."""
        ...

    async def synthesize(self, text: str) -> tuple[bytes, SynthesisMetadata]:
        """Synthesize text to a complete audio buffer.

        Returns:
            Tuple of (audio bytes, metadata)

        Raises:
            SynthesisError: When the backend returned no audio
            TTSConnectionError: When the backend call failed
        """
        ...

    async def close(self) -> None:
        """Close any open connections and clean up resources."""
        ...

    async def health_check(self) -> bool:
        """Check if the service is operational."""
        ...
