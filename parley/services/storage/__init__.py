"""Storage for audio artifacts."""

from parley.services.storage.audio_store import AudioStore, FileAudioStore, safe_call_id

__all__ = [
    "AudioStore",
    "FileAudioStore",
    "safe_call_id",
]
