"""Live configuration probe.

GET /config/check calls the text backend and (if configured) the TTS
backend once, and reports whether audio responses are available.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from parley.api.deps import get_voice_service
from parley.config import Settings, get_settings
from parley.core.voice import VoiceService
from parley.logging_config import get_logger

logger: Any = get_logger(__name__)

router = APIRouter()


class ConfigCheckResults(BaseModel):
    llm_api_key: bool = False
    llm_connection: bool = False
    google_cloud_keyfile: bool = False
    google_cloud_project_id: bool = False
    text_to_speech: bool = False
    errors: list[str] = Field(default_factory=list)


class ConfigCheckResponse(BaseModel):
    success: bool
    text_only: bool
    message: str
    results: ConfigCheckResults


@router.get("/config/check", response_model=ConfigCheckResponse)
async def check_configuration(
    settings: Settings = Depends(get_settings),
    voice: VoiceService = Depends(get_voice_service),
) -> ConfigCheckResponse:
    """Probe the configured backends."""
    results = ConfigCheckResults()

    results.llm_api_key = settings.llm_configured
    if results.llm_api_key:
        results.llm_connection = await voice.generator.backend.health_check()
        if not results.llm_connection:
            results.errors.append(f"{settings.llm_provider} API connection failed")
    else:
        results.errors.append(f"{settings.llm_provider} API key not found")

    keyfile = settings.google_cloud_keyfile
    if keyfile:
        if Path(keyfile).is_file():
            results.google_cloud_keyfile = True
        else:
            results.errors.append(f"Keyfile path not found: {Path(keyfile).resolve()}")
    results.google_cloud_project_id = bool(settings.google_cloud_project_id)

    tts_backend = voice.synthesizer.backend
    if tts_backend is not None:
        results.text_to_speech = await tts_backend.health_check()
        if not results.text_to_speech:
            results.errors.append("Text-to-Speech API connection failed")

    success = results.llm_api_key and results.llm_connection
    for error in results.errors:
        logger.warning(f"Configuration check: {error}")

    if not success:
        message = "Configuration has errors. Check server logs for details."
    elif results.text_to_speech:
        message = "Full configuration is working. Audio responses are enabled."
    else:
        message = "Text generation is working. Text-only mode is active."

    return ConfigCheckResponse(
        success=success,
        text_only=not results.text_to_speech,
        message=message,
        results=results,
    )
