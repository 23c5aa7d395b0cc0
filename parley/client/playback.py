"""Client-side playback of a call's response feed.

The poller fetches the latest feed entry at a fixed interval and plays
audio it has not seen before. A new entry never interrupts audio that is
already playing; it is held as a pending swap until playback ends.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from enum import Enum, auto
from typing import Any, Protocol
from urllib.parse import quote

import httpx

from parley.logging_config import get_logger, preview_text

logger: Any = get_logger(__name__)

DEFAULT_POLL_INTERVAL = 1.5


class PlaybackState(Enum):
    """State machine for the playback poller."""

    IDLE = auto()  # Nothing playing
    PLAYING = auto()  # An utterance is being played


@dataclass(frozen=True, slots=True)
class FeedEntry:
    """Latest feed entry as returned by the retrieval endpoint."""

    audio_url: str | None
    text: str | None
    timestamp: str | None = None

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> FeedEntry:
        return cls(
            audio_url=data.get("audioUrl") or None,
            text=data.get("text"),
            timestamp=data.get("timestamp"),
        )


class AudioPlayer(Protocol):
    """Plays audio by locator.

    ``play`` starts playback and returns; the player must call the
    poller's ``on_playback_ended`` when the audio finishes.
    """

    async def play(self, audio_url: str) -> None:
        ...

    async def stop(self) -> None:
        ...


class FeedClient:
    """Fetches the latest response for a call over HTTP."""

    def __init__(self, client: httpx.AsyncClient, call_id: str) -> None:
        self._client = client
        self._call_id = call_id

    @property
    def call_id(self) -> str:
        return self._call_id

    async def fetch_latest(self) -> FeedEntry | None:
        """Return the latest entry, or None if the server did not answer 2xx.

        Raises:
            httpx.HTTPError: On transport failures or an unreadable body.
        """
        response = await self._client.get(f"/api/voice-audio/{quote(self._call_id, safe='')}")
        if not response.is_success:
            logger.debug(f"Feed request returned HTTP {response.status_code}")
            return None

        data = response.json()
        if not isinstance(data, dict):
            logger.warning(f"Unexpected feed payload for call {self._call_id}: {data!r}")
            return None
        return FeedEntry.from_json(data)


class PlaybackPoller:
    """Polls the feed and plays each new audio response exactly once."""

    def __init__(
        self,
        feed: FeedClient,
        player: AudioPlayer,
        *,
        interval: float = DEFAULT_POLL_INTERVAL,
    ) -> None:
        self._feed = feed
        self._player = player
        self._interval = interval
        self._state = PlaybackState.IDLE
        self._current: str | None = None
        self._pending: str | None = None
        self._seen: set[str] = set()
        self._lock = asyncio.Lock()

    @property
    def state(self) -> PlaybackState:
        return self._state

    @property
    def current(self) -> str | None:
        return self._current

    @property
    def pending(self) -> str | None:
        return self._pending

    async def handle_entry(self, entry: FeedEntry | None) -> None:
        """Apply one polled entry to the state machine."""
        if entry is None:
            return

        if not entry.audio_url:
            if entry.text:
                logger.debug(f"Text response (no audio): {preview_text(entry.text)}")
            return

        async with self._lock:
            if entry.audio_url in self._seen:
                return
            self._seen.add(entry.audio_url)

            if self._state is PlaybackState.PLAYING:
                logger.debug("Currently playing; delaying swap")
                self._pending = entry.audio_url
                return

            await self._start(entry.audio_url)

    async def on_playback_ended(self) -> None:
        """Called by the player when the current audio finishes."""
        async with self._lock:
            if self._pending is not None:
                audio_url, self._pending = self._pending, None
                await self._start(audio_url)
                return

            self._state = PlaybackState.IDLE
            self._current = None

    async def _start(self, audio_url: str) -> None:
        logger.info(f"Playing new audio: {audio_url}")
        self._state = PlaybackState.PLAYING
        self._current = audio_url
        try:
            await self._player.play(audio_url)
        except Exception as e:
            # Treat a failed start as an immediate end so the queue keeps moving
            logger.error(f"Error playing audio {audio_url}: {e}")
            self._state = PlaybackState.IDLE
            self._current = None

    async def poll_once(self) -> None:
        """Fetch and apply the latest entry; fetch errors are logged and ignored."""
        try:
            entry = await self._feed.fetch_latest()
        except (httpx.HTTPError, ValueError) as e:
            logger.warning(f"Error polling feed for call {self._feed.call_id}: {e}")
            return
        await self.handle_entry(entry)

    async def run(self, stop: asyncio.Event) -> None:
        """Poll until ``stop`` is set, then stop playback."""
        try:
            while not stop.is_set():
                await self.poll_once()
                try:
                    await asyncio.wait_for(stop.wait(), timeout=self._interval)
                except TimeoutError:
                    pass
        finally:
            await self._player.stop()
            self._state = PlaybackState.IDLE
            self._current = None
            self._pending = None
