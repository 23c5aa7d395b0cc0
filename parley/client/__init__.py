"""Client-side helpers for consuming a call's response feed."""

from parley.client.playback import (
    AudioPlayer,
    FeedClient,
    FeedEntry,
    PlaybackPoller,
    PlaybackState,
)

__all__ = [
    "AudioPlayer",
    "FeedClient",
    "FeedEntry",
    "PlaybackPoller",
    "PlaybackState",
]
