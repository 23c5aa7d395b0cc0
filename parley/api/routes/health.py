"""Health check endpoints.

Provides:
- Basic health check (GET /health)
- Detailed health check with dependency status (GET /health/detailed)
"""

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import text

from parley import __version__
from parley.api.deps import get_voice_service
from parley.config import Settings, get_settings
from parley.core.voice import VoiceService
from parley.db.session import get_session

router = APIRouter()


class HealthResponse(BaseModel):
    """Basic health check response."""

    status: str


class DetailedHealthResponse(BaseModel):
    """Detailed health check response."""

    status: str
    checks: dict[str, str]
    active_sessions: int
    version: str


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Basic health check endpoint."""
    return HealthResponse(status="healthy")


@router.get("/health/detailed", response_model=DetailedHealthResponse)
async def detailed_health_check(
    session: AsyncSession = Depends(get_session),
    settings: Settings = Depends(get_settings),
    voice: VoiceService = Depends(get_voice_service),
) -> DetailedHealthResponse:
    """Detailed health check including dependency status.

    Checks:
    - Database connectivity
    - Redis connectivity (summary queue)
    - Text backend configuration
    - TTS mode (audio or text-only)

    External APIs are not called here; see /api/config/check for live probes.
    """
    checks = {}

    try:
        await session.execute(text("SELECT 1"))
        checks["database"] = "ok"
    except Exception as e:
        checks["database"] = f"error: {type(e).__name__}"

    try:
        from arq import create_pool

        redis = await create_pool(settings.redis_settings)
        await redis.ping()
        await redis.close()
        checks["redis"] = "ok"
    except Exception as e:
        checks["redis"] = f"error: {type(e).__name__}"

    checks["llm"] = (
        f"{settings.llm_provider}: configured"
        if settings.llm_configured
        else f"{settings.llm_provider}: missing"
    )
    checks["tts"] = "configured" if voice.synthesizer.enabled else "text-only"

    status = "healthy" if checks["database"] == "ok" and settings.llm_configured else "degraded"

    return DetailedHealthResponse(
        status=status,
        checks=checks,
        active_sessions=voice.registry.active_count,
        version=__version__,
    )
