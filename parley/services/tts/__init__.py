"""Text-to-Speech services.

TTS is optional: without Google Cloud credentials the app runs in
text-only mode and ``resolve_tts_service`` returns None.
"""

from __future__ import annotations

from typing import Any

from parley.config import Settings, get_settings
from parley.logging_config import get_logger
from parley.services.tts.exceptions import (
    SynthesisError,
    TTSConnectionError,
    TTSNotConfiguredError,
    TTSServiceError,
)
from parley.services.tts.google_cloud import GoogleCloudTTSService
from parley.services.tts.protocol import SynthesisMetadata, TTSService, VoiceParams
from parley.services.tts.synthesizer import SpeechSynthesizer

logger: Any = get_logger(__name__)


def resolve_tts_service(settings: Settings | None = None) -> TTSService | None:
    """Build the TTS backend once at startup, or None when unconfigured."""
    settings = settings or get_settings()
    try:
        return GoogleCloudTTSService(settings=settings)
    except TTSNotConfiguredError:
        logger.info("TTS not configured - responses will be text-only")
        return None


__all__ = [
    # Services
    "GoogleCloudTTSService",
    "resolve_tts_service",
    "SpeechSynthesizer",
    # Protocol
    "TTSService",
    # Data types
    "SynthesisMetadata",
    "VoiceParams",
    # Exceptions
    "TTSServiceError",
    "TTSNotConfiguredError",
    "SynthesisError",
    "TTSConnectionError",
]
