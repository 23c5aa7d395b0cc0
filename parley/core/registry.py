"""Registry of live voice sessions keyed by call id."""

from __future__ import annotations

import asyncio
from typing import Any

from parley.core.session import VoiceSession
from parley.logging_config import get_logger
from parley.observability.metrics import ACTIVE_SESSIONS

logger: Any = get_logger(__name__)


class VoiceSessionRegistry:
    """Async-safe registry of active voice sessions.

    Owned by the application (``app.state``) and handed to the services
    that need it. Unknown call ids never raise; lookups return None.
    """

    def __init__(self) -> None:
        self._sessions: dict[str, VoiceSession] = {}
        self._lock = asyncio.Lock()

    async def start(
        self,
        call_id: str,
        agent_participant_id: str,
        instructions: str,
    ) -> VoiceSession:
        """Create a fresh session, replacing any existing one for the call."""
        session = VoiceSession(
            call_id=call_id,
            agent_participant_id=agent_participant_id,
            instructions=instructions,
        )
        async with self._lock:
            replaced = call_id in self._sessions
            self._sessions[call_id] = session
            ACTIVE_SESSIONS.set(len(self._sessions))

        if replaced:
            logger.info(f"Replaced voice session for call {call_id}")
        else:
            logger.info(
                f"Started voice session for call {call_id} "
                f"(active: {len(self._sessions)})"
            )
        return session

    def has(self, call_id: str) -> bool:
        return call_id in self._sessions

    async def get(self, call_id: str) -> VoiceSession | None:
        async with self._lock:
            return self._sessions.get(call_id)

    async def is_current(self, session: VoiceSession) -> bool:
        """True while ``session`` is still the registered one for its call."""
        async with self._lock:
            return self._sessions.get(session.call_id) is session

    async def end(self, call_id: str) -> VoiceSession | None:
        """Remove the session.

        Returns the removed session for final cleanup, or None.
        """
        async with self._lock:
            session = self._sessions.pop(call_id, None)
            ACTIVE_SESSIONS.set(len(self._sessions))

        if session:
            logger.info(f"Session ended for call {call_id}")
        return session

    async def close_all(self) -> None:
        """Drop all sessions (for shutdown)."""
        async with self._lock:
            count = len(self._sessions)
            self._sessions.clear()
            ACTIVE_SESSIONS.set(0)
        if count:
            logger.info(f"Closed {count} voice sessions on shutdown")

    @property
    def active_count(self) -> int:
        """Number of active sessions."""
        return len(self._sessions)
