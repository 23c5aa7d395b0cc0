"""FastAPI dependencies shared by the route modules."""

from __future__ import annotations

from fastapi import Request

from parley.core.voice import VoiceService


def get_voice_service(request: Request) -> VoiceService:
    """The application's voice service (owned by ``app.state``)."""
    return request.app.state.voice_service
