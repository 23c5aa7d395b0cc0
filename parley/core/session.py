"""Live voice session state for a single call."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime

from parley.services.llm.protocol import ConversationTurn, Role


@dataclass(frozen=True, slots=True)
class ResponseEntry:
    """One produced assistant response, as exposed by the response feed."""

    text: str
    audio_url: str | None
    produced_at: datetime

    def to_dict(self) -> dict[str, str | None]:
        """Shape returned by the retrieval endpoint."""
        return {
            "audioUrl": self.audio_url,
            "text": self.text,
            "timestamp": self.produced_at.isoformat(),
        }


@dataclass
class VoiceSession:
    """Manages the AI voice conversation for a single call.

    Created when the agent joins the call, destroyed when the call ends.
    Nothing is persisted; the session lives only in the registry.
    """

    call_id: str
    agent_participant_id: str
    instructions: str
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    _history: list[ConversationTurn] = field(default_factory=list, init=False, repr=False)
    _responses: list[ResponseEntry] = field(default_factory=list, init=False, repr=False)
    _busy: bool = field(default=False, init=False)

    @property
    def history(self) -> tuple[ConversationTurn, ...]:
        return tuple(self._history)

    @property
    def responses(self) -> tuple[ResponseEntry, ...]:
        return tuple(self._responses)

    @property
    def busy(self) -> bool:
        return self._busy

    def is_agent(self, speaker_id: str) -> bool:
        return speaker_id == self.agent_participant_id

    # -------------------------------------------------------------------------
    # Single-flight guard
    # -------------------------------------------------------------------------

    def try_acquire(self) -> bool:
        """Claim the session for one generation cycle.

        Returns False if a cycle is already in flight. There is no await
        between the check and the set, so this is atomic on the event loop.
        """
        if self._busy:
            return False
        self._busy = True
        return True

    def release(self) -> None:
        self._busy = False

    # -------------------------------------------------------------------------
    # Append-only state
    # -------------------------------------------------------------------------

    def add_user_turn(self, content: str) -> None:
        self._history.append(ConversationTurn(role=Role.USER, content=content))

    def add_assistant_turn(self, content: str) -> None:
        self._history.append(ConversationTurn(role=Role.ASSISTANT, content=content))

    def append_response(self, text: str, audio_url: str | None) -> ResponseEntry:
        """Append a response stamped with the current time.

        The timestamp never goes backwards within a session, even if the
        wall clock does.
        """
        produced_at = datetime.now(UTC)
        if self._responses and produced_at < self._responses[-1].produced_at:
            produced_at = self._responses[-1].produced_at

        entry = ResponseEntry(text=text, audio_url=audio_url or None, produced_at=produced_at)
        self._responses.append(entry)
        return entry

    @property
    def latest_response(self) -> ResponseEntry | None:
        return self._responses[-1] if self._responses else None
