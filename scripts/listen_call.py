#!/usr/bin/env python3
"""Listen to the AI participant of a live call from a terminal.

Polls the response feed and plays each new audio response through the
default output device. Requires the playback extra:
    pip install -e ".[playback]"

Usage:
    python scripts/listen_call.py <call_id> [--base-url http://localhost:8000]
"""

import argparse
import asyncio
import io
import time
import wave

import httpx
import numpy as np
import sounddevice as sd

from parley.client.playback import FeedClient, PlaybackPoller
from parley.config import get_settings
from parley.logging_config import setup_logging


def decode_wav(data: bytes) -> tuple[np.ndarray, int]:
    """Decode 16-bit PCM WAV bytes to float samples in [-1, 1]."""
    with wave.open(io.BytesIO(data), "rb") as wav:
        sample_rate = wav.getframerate()
        frames = wav.readframes(wav.getnframes())
    samples = np.frombuffer(frames, dtype=np.int16).astype(np.float32) / 32768.0
    return samples, sample_rate


class SoundDevicePlayer:
    """Fetches audio over HTTP and plays it with sounddevice."""

    def __init__(self, client: httpx.AsyncClient) -> None:
        self._client = client
        self._task: asyncio.Task | None = None
        self.poller: PlaybackPoller | None = None

    async def play(self, audio_url: str) -> None:
        # Cache-bust so proxies never hand back a previous response
        response = await self._client.get(audio_url, params={"t": int(time.time() * 1000)})
        response.raise_for_status()
        samples, sample_rate = decode_wav(response.content)

        print(f"  Playing {audio_url} ({len(samples) / sample_rate:.1f}s)")
        sd.play(samples, samplerate=sample_rate)
        self._task = asyncio.create_task(self._wait_until_done(len(samples) / sample_rate))

    async def _wait_until_done(self, duration: float) -> None:
        await asyncio.sleep(duration)
        if self.poller is not None:
            await self.poller.on_playback_ended()

    async def stop(self) -> None:
        sd.stop()
        if self._task is not None:
            self._task.cancel()
            self._task = None


async def listen(call_id: str, base_url: str, interval: float) -> None:
    stop = asyncio.Event()

    async with httpx.AsyncClient(base_url=base_url, timeout=10.0) as client:
        player = SoundDevicePlayer(client)
        poller = PlaybackPoller(FeedClient(client, call_id), player, interval=interval)
        player.poller = poller

        print(f"Listening to call {call_id} on {base_url} (Ctrl+C to stop)")
        try:
            await poller.run(stop)
        except asyncio.CancelledError:
            stop.set()


def main():
    parser = argparse.ArgumentParser(description="Play a call's AI voice responses")
    parser.add_argument("call_id", help="Call identifier")
    parser.add_argument("--base-url", default="http://localhost:8000", help="Parley server URL")
    args = parser.parse_args()

    settings = get_settings()
    setup_logging(level=settings.log_level)

    try:
        asyncio.run(listen(args.call_id, args.base_url, settings.poll_interval_seconds))
    except KeyboardInterrupt:
        print("\nStopped.")


if __name__ == "__main__":
    main()
