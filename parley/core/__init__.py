"""Core voice session orchestration."""

from parley.core.feed import ResponseFeed
from parley.core.registry import VoiceSessionRegistry
from parley.core.session import ResponseEntry, VoiceSession
from parley.core.voice import VoiceService, create_voice_service

__all__ = [
    "ResponseEntry",
    "ResponseFeed",
    "VoiceService",
    "VoiceSession",
    "VoiceSessionRegistry",
    "create_voice_service",
]
