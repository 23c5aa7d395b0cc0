"""FastAPI application entry point.

Parley - live AI voice responses and summaries for video meetings.
"""

from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from parley import __version__
from parley.api.routes import config_check, health, metrics, voice_audio, voice_sessions
from parley.config import Settings, get_settings
from parley.core.voice import VoiceService, create_voice_service
from parley.db.session import close_db, init_db
from parley.logging_config import setup_logging


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler.

    Startup:
    - Initialize logging
    - Initialize database (development only)

    Shutdown:
    - Drop active voice sessions and close backend clients
    - Close database connections
    """
    settings: Settings = app.state.settings

    setup_logging(
        level=settings.log_level,
        enable_file=settings.is_production,
    )

    # Production should create tables out of band
    if not settings.is_production:
        await init_db()

    yield

    voice_service: VoiceService = app.state.voice_service
    await voice_service.close()

    await close_db()


def create_app(
    settings: Settings | None = None,
    voice_service: VoiceService | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Settings override (defaults to environment settings)
        voice_service: Pre-built voice service (defaults to one wired from settings)
    """
    explicit_settings = settings is not None
    settings = settings or get_settings()

    app = FastAPI(
        title="Parley API",
        description="Live AI voice responses and summaries for video meetings",
        version=__version__,
        docs_url="/docs" if not settings.is_production else None,
        redoc_url="/redoc" if not settings.is_production else None,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.voice_service = voice_service or create_voice_service(settings)

    if explicit_settings:
        app.dependency_overrides[get_settings] = lambda: settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if settings.debug else [],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Health check routes
    app.include_router(health.router, tags=["Health"])

    # Voice session lifecycle and transcription ingest
    app.include_router(voice_sessions.router, prefix="/api", tags=["Voice Sessions"])

    # Response feed polled by the in-call player
    app.include_router(voice_audio.router, prefix="/api", tags=["Voice Audio"])

    # Live backend probe
    app.include_router(config_check.router, prefix="/api", tags=["Config"])

    # Metrics endpoint for Prometheus scraping
    app.include_router(metrics.router, tags=["Observability"])

    # Synthesized audio files
    audio_dir = Path(settings.audio_dir)
    audio_dir.mkdir(parents=True, exist_ok=True)
    app.mount(
        settings.audio_url_prefix.rstrip("/"),
        StaticFiles(directory=audio_dir),
        name="audio-responses",
    )

    return app


# Application instance
app = create_app()
