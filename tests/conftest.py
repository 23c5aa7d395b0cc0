"""Shared pytest fixtures for Parley tests."""

from __future__ import annotations

from collections.abc import AsyncGenerator, Callable, Generator
from contextlib import asynccontextmanager
from pathlib import Path

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel

from parley.config import Settings
from parley.core.registry import VoiceSessionRegistry
from parley.core.voice import VoiceService
from parley.services.llm.generator import ResponseGenerator
from parley.services.storage.audio_store import FileAudioStore
from parley.services.tts.protocol import SynthesisMetadata, VoiceParams
from parley.services.tts.synthesizer import SpeechSynthesizer

FAKE_WAV = b"RIFF\x24\x00\x00\x00WAVEfmt " + b"\x00" * 32


def build_settings(**overrides) -> Settings:
    """Create a Settings object with safe test defaults."""
    base = {
        "llm_provider": "groq",
        "groq_api_key": "test-groq-key",
        "gemini_api_key": None,
        "google_cloud_keyfile": None,
        "google_cloud_project_id": None,
        "database_url": "sqlite+aiosqlite:///:memory:",
        "redis_url": "redis://localhost:6379",
        "audio_dir": "data/test_audio",
    }
    base.update(overrides)
    return Settings(**base)


@pytest.fixture
def settings_factory(tmp_path: Path) -> Callable[..., Settings]:
    """Return a factory to build Settings with overrides.

    Audio files go to the test's temporary directory unless overridden.
    """

    def factory(**overrides) -> Settings:
        overrides.setdefault("audio_dir", str(tmp_path / "audio"))
        return build_settings(**overrides)

    return factory


@pytest.fixture
def settings(settings_factory: Callable[..., Settings]) -> Settings:
    """Default Settings fixture."""
    return settings_factory()


# =============================================================================
# Backend Stubs
# =============================================================================


class StubTextBackend:
    """Text backend returning canned replies and recording prompts."""

    def __init__(self, replies: list[str] | None = None, error: Exception | None = None):
        self.replies = list(replies or [])
        self.error = error
        self.prompts: list[str] = []
        self.healthy = True
        self.closed = False

    @property
    def model(self) -> str:
        return "stub-model"

    async def generate(self, prompt: str, *, max_tokens: int = 256, temperature: float = 0.7) -> str:
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        if self.replies:
            return self.replies.pop(0)
        return f"Reply {len(self.prompts)}"

    async def health_check(self) -> bool:
        return self.healthy

    async def close(self) -> None:
        self.closed = True


class StubTTSBackend:
    """TTS backend returning a fixed WAV buffer."""

    def __init__(self, audio: bytes = FAKE_WAV, error: Exception | None = None):
        self.audio = audio
        self.error = error
        self.texts: list[str] = []
        self.closed = False

    @property
    def voice(self) -> VoiceParams:
        return VoiceParams()

    async def synthesize(self, text: str) -> tuple[bytes, SynthesisMetadata]:
        self.texts.append(text)
        if self.error is not None:
            raise self.error
        return self.audio, SynthesisMetadata(
            voice=self.voice.voice_name,
            input_chars=len(text),
            output_bytes=len(self.audio),
            sample_rate=self.voice.sample_rate,
        )

    async def health_check(self) -> bool:
        return True

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def text_backend() -> StubTextBackend:
    return StubTextBackend()


@pytest.fixture
def tts_backend() -> StubTTSBackend:
    return StubTTSBackend()


@pytest.fixture
def audio_store(tmp_path: Path) -> FileAudioStore:
    store = FileAudioStore(tmp_path / "audio", "/audio-responses")
    store.ensure_dir()
    return store


@pytest.fixture
def voice_service_factory(
    text_backend: StubTextBackend,
    tts_backend: StubTTSBackend,
    audio_store: FileAudioStore,
) -> Callable[..., VoiceService]:
    """Build a VoiceService over stub backends.

    Pass ``tts=None`` for text-only mode.
    """

    def factory(text=text_backend, tts=tts_backend, store=audio_store) -> VoiceService:
        return VoiceService(
            registry=VoiceSessionRegistry(),
            generator=ResponseGenerator(text),
            synthesizer=SpeechSynthesizer(tts),
            audio_store=store,
        )

    return factory


@pytest.fixture
def voice_service(voice_service_factory: Callable[..., VoiceService]) -> VoiceService:
    return voice_service_factory()


# =============================================================================
# Database Fixtures
# =============================================================================


@pytest_asyncio.fixture
async def async_engine(tmp_path: Path):
    """Create a file-backed async SQLite engine for testing."""
    # Import models to register them with SQLModel metadata
    from parley.db import models  # noqa: F401

    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
        echo=False,
        future=True,
    )

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(async_engine):
    return sessionmaker(
        async_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autocommit=False,
        autoflush=False,
    )


@pytest_asyncio.fixture
async def async_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Create an async database session for testing."""
    async with session_factory() as session:
        yield session


@pytest.fixture
def session_context(session_factory):
    """Drop-in replacement for parley.db.session.get_session_context."""

    @asynccontextmanager
    async def context() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    return context


# =============================================================================
# FastAPI Test Client Fixtures
# =============================================================================


@pytest.fixture
def test_client(settings: Settings, voice_service: VoiceService, monkeypatch) -> Generator:
    """FastAPI TestClient over stub backends and an in-memory database."""
    from fastapi.testclient import TestClient

    from parley.main import create_app

    # The engine is module-global and reads settings itself
    monkeypatch.setattr("parley.db.session.get_settings", lambda: settings)

    # No Redis in tests: health reports it down, summary enqueue is best effort
    async def unavailable_pool(*args, **kwargs):
        raise ConnectionError("redis unavailable in tests")

    monkeypatch.setattr("arq.create_pool", unavailable_pool)

    app = create_app(settings=settings, voice_service=voice_service)

    with TestClient(app) as client:
        yield client
