"""Response feed retrieval for the in-call playback client."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from parley.api.deps import get_voice_service
from parley.core.voice import VoiceService
from parley.logging_config import get_logger

logger: Any = get_logger(__name__)

router = APIRouter()


def _missing_call_id() -> JSONResponse:
    return JSONResponse({"error": "Missing call id"}, status_code=400)


@router.get("/voice-audio")
async def latest_audio_without_call() -> JSONResponse:
    return _missing_call_id()


@router.get("/voice-audio/{call_id}")
async def latest_audio(
    call_id: str,
    voice: VoiceService = Depends(get_voice_service),
) -> JSONResponse:
    """Latest response for a call.

    Returns ``{audioUrl, text, timestamp}``, or ``{audioUrl: null, text: null}``
    before the first response (and for unknown calls).
    """
    if not call_id.strip():
        return _missing_call_id()

    try:
        entry = await voice.latest_response(call_id)
    except Exception:
        logger.exception(f"Failed to get audio response for call {call_id}")
        return JSONResponse({"error": "Failed to get audio response"}, status_code=500)

    if entry is None:
        return JSONResponse({"audioUrl": None, "text": None})
    return JSONResponse(entry.to_dict())


@router.get("/voice-audio/{call_id}/history")
async def audio_history(
    call_id: str,
    voice: VoiceService = Depends(get_voice_service),
) -> JSONResponse:
    """All responses for a call, oldest first."""
    if not call_id.strip():
        return _missing_call_id()

    try:
        entries = await voice.responses(call_id)
    except Exception:
        logger.exception(f"Failed to list audio responses for call {call_id}")
        return JSONResponse({"error": "Failed to get audio responses"}, status_code=500)

    return JSONResponse({"responses": [entry.to_dict() for entry in entries]})
