"""Background tasks for Parley (arq worker)."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

import httpx
from arq import Retry

from parley.config import get_settings
from parley.db.models import Meeting, MeetingStatus
from parley.db.session import close_db, get_session_context, init_db
from parley.logging_config import get_logger, setup_logging
from parley.observability.metrics import SUMMARY_JOBS_TOTAL
from parley.services.analysis.meeting_summary import (
    MeetingSummarizer,
    TranscriptFetchError,
    TranscriptParseError,
    attach_speaker_names,
    fetch_transcript,
    load_speaker_names,
    parse_transcript_jsonl,
    speaker_ids,
)

logger: Any = get_logger(__name__)

MAX_TRIES = 5
RETRY_BACKOFF_SECONDS = 10


async def startup(ctx: dict[str, Any]) -> None:
    settings = get_settings()
    setup_logging(level=settings.log_level, enable_file=settings.is_production)
    await init_db()
    ctx["http"] = httpx.AsyncClient(timeout=30.0, follow_redirects=True)


async def shutdown(ctx: dict[str, Any]) -> None:
    http: httpx.AsyncClient | None = ctx.get("http")
    if http is not None:
        await http.aclose()
    await close_db()


def _build_summarizer() -> MeetingSummarizer:
    from parley.services.llm.groq import GroqService

    settings = get_settings()
    return MeetingSummarizer(GroqService(settings=settings), model=settings.summary_model)


async def process_meeting(
    ctx: dict[str, Any],
    meeting_id: str,
    transcript_url: str | None = None,
) -> None:
    """Summarize a finished meeting and mark it completed.

    fetch transcript -> parse JSON Lines -> add speaker names -> summarize -> save.
    Download failures that may be transient are retried by arq.
    """
    async with get_session_context() as session:
        meeting = await session.get(Meeting, meeting_id)
        if not meeting:
            logger.warning(f"Meeting not found for summary: {meeting_id}")
            SUMMARY_JOBS_TOTAL.labels(outcome="missing").inc()
            return
        url = transcript_url or meeting.transcript_url

    if not url:
        logger.warning(f"No transcript URL for meeting {meeting_id}, skipping summary")
        SUMMARY_JOBS_TOTAL.labels(outcome="no_transcript").inc()
        return

    http: httpx.AsyncClient = ctx["http"]
    try:
        raw = await fetch_transcript(url, http)
    except TranscriptFetchError as e:
        job_try = int(ctx.get("job_try", 1))
        if e.retryable and job_try < MAX_TRIES:
            logger.warning(f"Transcript fetch failed for {meeting_id} (try {job_try}): {e}")
            raise Retry(defer=job_try * RETRY_BACKOFF_SECONDS) from e
        logger.error(f"Giving up on transcript for meeting {meeting_id}: {e}")
        SUMMARY_JOBS_TOTAL.labels(outcome="fetch_failed").inc()
        return

    try:
        items = parse_transcript_jsonl(raw)
    except TranscriptParseError as e:
        logger.error(f"Unreadable transcript for meeting {meeting_id}: {e}")
        SUMMARY_JOBS_TOTAL.labels(outcome="parse_failed").inc()
        return

    async with get_session_context() as session:
        names = await load_speaker_names(session, speaker_ids(items))
    named_items = attach_speaker_names(items, names)

    summarizer: MeetingSummarizer = ctx.get("summarizer") or _build_summarizer()
    try:
        summary = await summarizer.summarize(named_items)
    finally:
        if "summarizer" not in ctx:
            await summarizer.close()

    async with get_session_context() as session:
        meeting = await session.get(Meeting, meeting_id)
        if not meeting:
            logger.warning(f"Meeting {meeting_id} deleted before summary was saved")
            SUMMARY_JOBS_TOTAL.labels(outcome="missing").inc()
            return
        meeting.summary = summary
        meeting.status = MeetingStatus.completed
        meeting.updated_at = datetime.now(UTC)
        session.add(meeting)

    SUMMARY_JOBS_TOTAL.labels(outcome="completed").inc()
    logger.info(
        f"Summarized meeting {meeting_id}: {len(items)} segments, "
        f"{len(names)} known speakers"
    )


class WorkerSettings:
    functions = [process_meeting]
    on_startup = startup
    on_shutdown = shutdown
    max_tries = MAX_TRIES
    redis_settings = get_settings().redis_settings
