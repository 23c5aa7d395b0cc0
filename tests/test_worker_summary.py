"""Tests for the worker's meeting summary job flow."""

from __future__ import annotations

import json
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest
import pytest_asyncio
from arq import Retry

from parley.db.models import Agent, Meeting, MeetingStatus, User
from parley.services.analysis.meeting_summary import MeetingSummarizer
from parley.worker import MAX_TRIES, WorkerSettings, process_meeting

TRANSCRIPT_URL = "https://storage.example.com/transcripts/call-1.jsonl"

TRANSCRIPT = "\n".join(
    json.dumps(line)
    for line in [
        {"speaker_id": "u1", "type": "speech", "text": "Morning", "start_ts": 0, "stop_ts": 500},
        {"speaker_id": "a1", "type": "speech", "text": "Good morning!", "start_ts": 600, "stop_ts": 1200},
    ]
)


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def patch_db(monkeypatch, session_context):
    """Route the worker's database access to the test engine."""
    monkeypatch.setattr("parley.worker.get_session_context", session_context)


@pytest_asyncio.fixture
async def meeting(session_factory) -> Meeting:
    async with session_factory() as session:
        session.add(User(id="u1", name="Alice"))
        session.add(Agent(id="a1", name="Standup Bot"))
        meeting = Meeting(
            id="meeting-1",
            name="Daily standup",
            agent_id="a1",
            status=MeetingStatus.processing,
            transcript_url=TRANSCRIPT_URL,
        )
        session.add(meeting)
        await session.commit()
    return meeting


@pytest.fixture
def llm():
    llm = MagicMock()
    llm.chat = AsyncMock(return_value="### Overview\nShort standup.")
    llm.close = AsyncMock()
    return llm


def make_ctx(handler, llm, job_try: int = 1) -> dict:
    return {
        "http": httpx.AsyncClient(transport=httpx.MockTransport(handler)),
        "summarizer": MeetingSummarizer(llm, model="summary-model"),
        "job_try": job_try,
    }


async def load_meeting(session_factory, meeting_id: str = "meeting-1") -> Meeting:
    async with session_factory() as session:
        return await session.get(Meeting, meeting_id)


# =============================================================================
# Tests
# =============================================================================


class TestProcessMeeting:
    """Tests for process_meeting."""

    @pytest.mark.asyncio
    async def test_completes_meeting_with_summary(
        self, patch_db, meeting, session_factory, llm
    ) -> None:
        requested: list[str] = []

        def handler(request: httpx.Request) -> httpx.Response:
            requested.append(str(request.url))
            return httpx.Response(200, text=TRANSCRIPT)

        await process_meeting(make_ctx(handler, llm), "meeting-1")

        saved = await load_meeting(session_factory)
        assert saved.summary == "### Overview\nShort standup."
        assert saved.status == MeetingStatus.completed
        assert requested == [TRANSCRIPT_URL]

        # Speaker names resolved from users and agents
        user_message = llm.chat.call_args.args[0][1]["content"]
        assert '"name": "Alice"' in user_message
        assert '"name": "Standup Bot"' in user_message

    @pytest.mark.asyncio
    async def test_explicit_transcript_url_wins(
        self, patch_db, meeting, session_factory, llm
    ) -> None:
        requested: list[str] = []

        def handler(request: httpx.Request) -> httpx.Response:
            requested.append(str(request.url))
            return httpx.Response(200, text=TRANSCRIPT)

        other_url = "https://storage.example.com/other.jsonl"
        await process_meeting(make_ctx(handler, llm), "meeting-1", other_url)

        assert requested == [other_url]

    @pytest.mark.asyncio
    async def test_missing_meeting_is_skipped(self, patch_db, session_factory, llm) -> None:
        handler = MagicMock()

        await process_meeting(make_ctx(handler, llm), "does-not-exist")

        handler.assert_not_called()
        llm.chat.assert_not_called()

    @pytest.mark.asyncio
    async def test_server_error_retries(self, patch_db, meeting, llm) -> None:
        ctx = make_ctx(lambda request: httpx.Response(503), llm, job_try=2)

        with pytest.raises(Retry):
            await process_meeting(ctx, "meeting-1")

        llm.chat.assert_not_called()

    @pytest.mark.asyncio
    async def test_gives_up_after_max_tries(
        self, patch_db, meeting, session_factory, llm
    ) -> None:
        ctx = make_ctx(lambda request: httpx.Response(503), llm, job_try=MAX_TRIES)

        await process_meeting(ctx, "meeting-1")

        saved = await load_meeting(session_factory)
        assert saved.status == MeetingStatus.processing
        assert saved.summary is None

    @pytest.mark.asyncio
    async def test_client_error_does_not_retry(
        self, patch_db, meeting, session_factory, llm
    ) -> None:
        ctx = make_ctx(lambda request: httpx.Response(404), llm)

        await process_meeting(ctx, "meeting-1")

        saved = await load_meeting(session_factory)
        assert saved.status == MeetingStatus.processing

    @pytest.mark.asyncio
    async def test_unparseable_transcript(self, patch_db, meeting, session_factory, llm) -> None:
        ctx = make_ctx(lambda request: httpx.Response(200, text="not json"), llm)

        await process_meeting(ctx, "meeting-1")

        llm.chat.assert_not_called()
        saved = await load_meeting(session_factory)
        assert saved.summary is None


class TestWorkerSettings:
    def test_registers_summary_job(self) -> None:
        assert process_meeting in WorkerSettings.functions
        assert WorkerSettings.max_tries == MAX_TRIES
