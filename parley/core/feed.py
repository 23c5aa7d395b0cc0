"""Per-call response feed read by the playback client."""

from __future__ import annotations

from typing import Any

from parley.core.registry import VoiceSessionRegistry
from parley.core.session import ResponseEntry, VoiceSession
from parley.logging_config import get_logger

logger: Any = get_logger(__name__)


class ResponseFeed:
    """Append-only view over the responses of registered sessions."""

    def __init__(self, registry: VoiceSessionRegistry) -> None:
        self._registry = registry

    async def record(
        self,
        call_id: str,
        text: str,
        audio_url: str | None = None,
    ) -> ResponseEntry | None:
        """Append a response for the call; no-op if there is no session."""
        session = await self._registry.get(call_id)
        if session is None:
            logger.debug(f"No session for call {call_id}, response not recorded")
            return None
        return session.append_response(text, audio_url)

    async def record_for(
        self,
        session: VoiceSession,
        text: str,
        audio_url: str | None = None,
    ) -> ResponseEntry | None:
        """Append to a specific session if it is still registered.

        Used by in-flight cycles: a session that was ended or replaced
        while generating must not receive the late response.
        """
        if not await self._registry.is_current(session):
            logger.info(
                f"Session for call {session.call_id} ended during generation, "
                "dropping response"
            )
            return None
        return session.append_response(text, audio_url)

    async def latest(self, call_id: str) -> ResponseEntry | None:
        session = await self._registry.get(call_id)
        if session is None:
            return None
        return session.latest_response

    async def all(self, call_id: str) -> list[ResponseEntry]:
        session = await self._registry.get(call_id)
        if session is None:
            return []
        return list(session.responses)
