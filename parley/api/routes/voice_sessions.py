"""Voice session lifecycle and transcription ingest endpoints.

Called by the call-setup collaborator and the transcription source:
- POST   /calls/{call_id}/voice-session   start (or replace) a session
- GET    /calls/{call_id}/voice-session   is a session active
- DELETE /calls/{call_id}/voice-session   end it, optionally queue the summary
- POST   /calls/{call_id}/transcriptions  hand a transcript fragment to the session
"""

from __future__ import annotations

from typing import Annotated, Any

from fastapi import APIRouter, BackgroundTasks, Depends, status
from pydantic import BaseModel, StringConstraints

from parley.api.deps import get_voice_service
from parley.config import Settings, get_settings
from parley.core.voice import VoiceService
from parley.logging_config import get_logger

logger: Any = get_logger(__name__)

router = APIRouter()

NonBlankStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


class StartSessionRequest(BaseModel):
    """Request body for starting a voice session."""

    agent_participant_id: NonBlankStr
    instructions: str = ""


class SessionStatusResponse(BaseModel):
    call_id: str
    active: bool


class EndSessionRequest(BaseModel):
    """Optional body for ending a session; enables the summary job."""

    meeting_id: str | None = None
    transcript_url: str | None = None


class EndSessionResponse(BaseModel):
    call_id: str
    ended: bool
    responses: int
    summary_queued: bool


class TranscriptionEvent(BaseModel):
    """A speaker-attributed transcript fragment."""

    text: NonBlankStr
    speaker_id: NonBlankStr


class TranscriptionAccepted(BaseModel):
    accepted: bool = True


@router.post(
    "/calls/{call_id}/voice-session",
    response_model=SessionStatusResponse,
    status_code=status.HTTP_201_CREATED,
)
async def start_voice_session(
    call_id: str,
    request: StartSessionRequest,
    voice: VoiceService = Depends(get_voice_service),
) -> SessionStatusResponse:
    """Start the AI participant's session for a call.

    An existing session for the same call is replaced, not merged.
    """
    await voice.start_session(call_id, request.agent_participant_id, request.instructions)
    return SessionStatusResponse(call_id=call_id, active=True)


@router.get("/calls/{call_id}/voice-session", response_model=SessionStatusResponse)
async def get_voice_session(
    call_id: str,
    voice: VoiceService = Depends(get_voice_service),
) -> SessionStatusResponse:
    return SessionStatusResponse(call_id=call_id, active=voice.has_session(call_id))


@router.delete("/calls/{call_id}/voice-session", response_model=EndSessionResponse)
async def end_voice_session(
    call_id: str,
    request: EndSessionRequest | None = None,
    voice: VoiceService = Depends(get_voice_service),
    settings: Settings = Depends(get_settings),
) -> EndSessionResponse:
    """End a call's session.

    Ending an unknown call is not an error. When a meeting id is given,
    the post-call summary job is queued (best effort).
    """
    session = await voice.end_session(call_id)

    summary_queued = False
    if request and request.meeting_id:
        summary_queued = await _enqueue_summary(
            settings, request.meeting_id, request.transcript_url
        )

    return EndSessionResponse(
        call_id=call_id,
        ended=session is not None,
        responses=len(session.responses) if session else 0,
        summary_queued=summary_queued,
    )


async def _enqueue_summary(
    settings: Settings,
    meeting_id: str,
    transcript_url: str | None,
) -> bool:
    try:
        from arq import create_pool

        pool = await create_pool(settings.redis_settings)
        await pool.enqueue_job("process_meeting", meeting_id, transcript_url)
        await pool.close()
        logger.info(f"Queued summary for meeting {meeting_id}")
        return True
    except Exception as e:
        logger.warning(f"Failed to queue summary job for {meeting_id}: {e}")
        return False


@router.post(
    "/calls/{call_id}/transcriptions",
    response_model=TranscriptionAccepted,
    status_code=status.HTTP_202_ACCEPTED,
)
async def ingest_transcription(
    call_id: str,
    event: TranscriptionEvent,
    background_tasks: BackgroundTasks,
    voice: VoiceService = Depends(get_voice_service),
) -> TranscriptionAccepted:
    """Accept a transcript fragment; the response cycle runs after the reply."""
    background_tasks.add_task(
        voice.process_transcription, call_id, event.text, event.speaker_id
    )
    return TranscriptionAccepted()
