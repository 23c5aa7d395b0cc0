"""Durable storage for synthesized audio responses.

Audio is written to ``<audio_dir>/<call_id>-<time_ns>.wav`` and served
by the app under ``<audio_url_prefix>/``.
"""

from __future__ import annotations

import asyncio
import re
import time
from pathlib import Path
from typing import Any, Protocol

from parley.config import Settings, get_settings
from parley.logging_config import get_logger

logger: Any = get_logger(__name__)

UNSAFE_FILENAME_CHARS = re.compile(r"[^A-Za-z0-9_-]")


class AudioStore(Protocol):
    """Persists audio bytes and returns a public locator."""

    async def save(self, call_id: str, audio_bytes: bytes) -> str:
        """Store audio for a call.

        Returns:
            URL path under which the audio can be fetched.

        Raises:
            OSError: When the artifact could not be written.
        """
        ...


def safe_call_id(call_id: str) -> str:
    """Reduce a call id to characters that are safe in a file name."""
    return UNSAFE_FILENAME_CHARS.sub("_", call_id) or "call"


class FileAudioStore:
    """Audio store backed by files in a local directory."""

    def __init__(
        self,
        audio_dir: str | Path,
        url_prefix: str = "/audio-responses",
        *,
        suffix: str = ".wav",
    ) -> None:
        self._audio_dir = Path(audio_dir)
        self._url_prefix = url_prefix.rstrip("/")
        self._suffix = suffix

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> FileAudioStore:
        s = settings or get_settings()
        return cls(s.audio_dir, s.audio_url_prefix)

    @property
    def audio_dir(self) -> Path:
        return self._audio_dir

    @property
    def url_prefix(self) -> str:
        return self._url_prefix

    def ensure_dir(self) -> None:
        self._audio_dir.mkdir(parents=True, exist_ok=True)

    async def save(self, call_id: str, audio_bytes: bytes) -> str:
        """Write the audio file off the event loop and return its URL path."""
        filename = await asyncio.to_thread(self._write, call_id, audio_bytes)
        logger.info(f"Saved audio response {filename} ({len(audio_bytes)} bytes)")
        return f"{self._url_prefix}/{filename}"

    def _write(self, call_id: str, audio_bytes: bytes) -> str:
        self.ensure_dir()
        stem = safe_call_id(call_id)
        stamp = time.time_ns()

        while True:
            path = self._audio_dir / f"{stem}-{stamp}{self._suffix}"
            try:
                # "xb" fails instead of overwriting an artifact from the same tick
                with path.open("xb") as f:
                    f.write(audio_bytes)
                return path.name
            except FileExistsError:
                stamp += 1

    def path_for(self, audio_url: str) -> Path | None:
        """Map a locator produced by this store back to its file."""
        prefix = f"{self._url_prefix}/"
        if not audio_url.startswith(prefix):
            return None
        name = audio_url[len(prefix):]
        if not name or "/" in name or name.startswith("."):
            return None
        return self._audio_dir / name
