"""Post-call meeting summary pipeline.

Steps, each usable on its own:
1. fetch_transcript: download the JSON Lines transcript
2. parse_transcript_jsonl: parse it into TranscriptItem objects
3. attach_speaker_names: resolve speaker ids to user/agent names
4. MeetingSummarizer.summarize: markdown summary via the LLM
"""

from __future__ import annotations

import json
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import asdict, dataclass
from typing import TYPE_CHECKING, Any

import httpx
from sqlmodel import select

from parley.db.models import Agent, User
from parley.logging_config import get_logger
from parley.prompts.summary import build_summary_messages

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from parley.services.llm.groq import GroqService

logger: Any = get_logger(__name__)

UNKNOWN_SPEAKER = "Unknown"


class TranscriptError(Exception):
    """Base exception for transcript handling."""

    pass


class TranscriptFetchError(TranscriptError):
    """Raised when the transcript could not be downloaded."""

    def __init__(self, message: str, *, retryable: bool) -> None:
        super().__init__(message)
        self.retryable = retryable


class TranscriptParseError(TranscriptError):
    """Raised when a transcript line is not valid JSON."""

    def __init__(self, line_number: int, detail: str) -> None:
        super().__init__(f"Invalid transcript line {line_number}: {detail}")
        self.line_number = line_number


@dataclass(frozen=True, slots=True)
class TranscriptItem:
    """One speech segment of a recorded call."""

    speaker_id: str
    text: str
    type: str = "speech"
    start_ts: int | None = None
    stop_ts: int | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> TranscriptItem:
        return cls(
            speaker_id=str(data.get("speaker_id", "")),
            text=str(data.get("text", "")),
            type=str(data.get("type", "speech")),
            start_ts=data.get("start_ts"),
            stop_ts=data.get("stop_ts"),
        )


@dataclass(frozen=True, slots=True)
class NamedTranscriptItem:
    """A transcript item with the speaker's display name attached."""

    item: TranscriptItem
    speaker_name: str

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self.item)
        data["user"] = {"name": self.speaker_name}
        return data


async def fetch_transcript(url: str, client: httpx.AsyncClient) -> str:
    """Download a transcript.

    Raises:
        TranscriptFetchError: retryable for transport errors and 5xx,
            not retryable for 4xx.
    """
    try:
        response = await client.get(url)
        response.raise_for_status()
    except httpx.HTTPStatusError as e:
        status = e.response.status_code
        raise TranscriptFetchError(
            f"Transcript download failed with HTTP {status}",
            retryable=status >= 500,
        ) from e
    except httpx.TransportError as e:
        raise TranscriptFetchError(f"Transcript download failed: {e}", retryable=True) from e

    return response.text


def parse_transcript_jsonl(raw: str) -> list[TranscriptItem]:
    """Parse a JSON Lines transcript, skipping blank lines."""
    items: list[TranscriptItem] = []
    for line_number, line in enumerate(raw.splitlines(), start=1):
        line = line.strip()
        if not line:
            continue
        try:
            data = json.loads(line)
        except json.JSONDecodeError as e:
            raise TranscriptParseError(line_number, str(e)) from e
        if not isinstance(data, dict):
            raise TranscriptParseError(line_number, "expected a JSON object")
        items.append(TranscriptItem.from_dict(data))
    return items


def speaker_ids(items: Iterable[TranscriptItem]) -> list[str]:
    """Distinct speaker ids in first-appearance order."""
    return list(dict.fromkeys(item.speaker_id for item in items))


async def load_speaker_names(session: AsyncSession, ids: Sequence[str]) -> dict[str, str]:
    """Look up display names for users and agents among the given ids."""
    if not ids:
        return {}

    names: dict[str, str] = {}
    users = await session.execute(select(User).where(User.id.in_(ids)))  # type: ignore[attr-defined]
    for user in users.scalars():
        names[user.id] = user.name

    agents = await session.execute(select(Agent).where(Agent.id.in_(ids)))  # type: ignore[attr-defined]
    for agent in agents.scalars():
        names[agent.id] = agent.name

    return names


def attach_speaker_names(
    items: Sequence[TranscriptItem],
    names: Mapping[str, str],
) -> list[NamedTranscriptItem]:
    """Pair each item with its speaker name ("Unknown" when not found)."""
    return [
        NamedTranscriptItem(item=item, speaker_name=names.get(item.speaker_id, UNKNOWN_SPEAKER))
        for item in items
    ]


class MeetingSummarizer:
    """Summarizes a named transcript into markdown."""

    def __init__(self, llm: GroqService, *, model: str | None = None) -> None:
        self._llm = llm
        self._model = model

    async def summarize(self, items: Sequence[NamedTranscriptItem]) -> str:
        """Return the markdown summary, or "" when the model returned nothing."""
        if not items:
            return ""

        summary = await self._llm.chat(
            build_summary_messages(items),
            max_tokens=2048,
            temperature=0.3,
            model=self._model,
        )
        return summary.strip()

    async def close(self) -> None:
        await self._llm.close()
