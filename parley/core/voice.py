"""Live voice session orchestration.

Transcription fragment -> response generation -> speech synthesis ->
audio storage -> response feed. At most one cycle runs per call; fragments
that arrive while a cycle is in flight are dropped, not queued.
"""

from __future__ import annotations

from typing import Any

from parley.config import Settings, get_settings
from parley.core.feed import ResponseFeed
from parley.core.registry import VoiceSessionRegistry
from parley.core.session import ResponseEntry, VoiceSession
from parley.logging_config import get_logger, preview_text
from parley.observability.metrics import record_text_only, record_turn
from parley.services.llm.exceptions import GenerationError
from parley.services.llm.generator import ResponseGenerator, create_text_backend
from parley.services.storage.audio_store import AudioStore, FileAudioStore
from parley.services.tts import resolve_tts_service
from parley.services.tts.exceptions import TTSServiceError
from parley.services.tts.synthesizer import SpeechSynthesizer

logger: Any = get_logger(__name__)


class VoiceService:
    """Runs the AI participant's side of live calls."""

    def __init__(
        self,
        registry: VoiceSessionRegistry,
        generator: ResponseGenerator,
        synthesizer: SpeechSynthesizer,
        audio_store: AudioStore,
    ) -> None:
        self._registry = registry
        self._generator = generator
        self._synthesizer = synthesizer
        self._audio_store = audio_store
        self._feed = ResponseFeed(registry)

    @property
    def registry(self) -> VoiceSessionRegistry:
        return self._registry

    @property
    def feed(self) -> ResponseFeed:
        return self._feed

    @property
    def synthesizer(self) -> SpeechSynthesizer:
        return self._synthesizer

    @property
    def generator(self) -> ResponseGenerator:
        return self._generator

    # =========================================================================
    # Session lifecycle
    # =========================================================================

    async def start_session(
        self,
        call_id: str,
        agent_participant_id: str,
        instructions: str,
    ) -> VoiceSession:
        return await self._registry.start(call_id, agent_participant_id, instructions)

    def has_session(self, call_id: str) -> bool:
        return self._registry.has(call_id)

    async def end_session(self, call_id: str) -> VoiceSession | None:
        return await self._registry.end(call_id)

    # =========================================================================
    # Ingest
    # =========================================================================

    async def process_transcription(self, call_id: str, text: str, speaker_id: str) -> None:
        """Handle one transcript fragment for a call.

        Never raises: missing sessions, busy sessions and the agent's own
        speech are silent no-ops, and pipeline failures are logged.
        """
        text = (text or "").strip()
        if not text:
            record_turn("empty")
            return

        session = await self._registry.get(call_id)
        if session is None:
            logger.debug(f"No voice session for call {call_id}, dropping fragment")
            record_turn("dropped_no_session")
            return

        if session.is_agent(speaker_id):
            record_turn("self_echo")
            return

        if not session.try_acquire():
            logger.debug(f"Call {call_id} busy, dropping fragment: {preview_text(text, 40)}")
            record_turn("dropped_busy")
            return

        try:
            entry = await self._run_turn(session, text)
            record_turn("responded" if entry else "orphaned")
        except GenerationError as e:
            logger.error(f"Response generation failed for call {call_id}: {e}")
            record_turn("failed")
        except Exception:
            logger.exception(f"Error processing transcription for call {call_id}")
            record_turn("failed")
        finally:
            session.release()

    async def _run_turn(self, session: VoiceSession, text: str) -> ResponseEntry | None:
        # The user turn stays in history even if the rest of the turn fails
        session.add_user_turn(text)
        logger.info(f"[{session.call_id}] User: {preview_text(text)}")

        reply = await self._generator.generate(session.instructions, session.history)
        session.add_assistant_turn(reply)
        logger.info(f"[{session.call_id}] Assistant: {preview_text(reply)}")

        audio_url = await self._synthesize_and_store(session.call_id, reply)
        return await self._feed.record_for(session, reply, audio_url)

    async def _synthesize_and_store(self, call_id: str, text: str) -> str | None:
        """Produce an audio locator for the reply, or None for text-only."""
        try:
            audio = await self._synthesizer.synthesize(text)
        except TTSServiceError as e:
            logger.warning(f"Speech synthesis failed for call {call_id}, text-only: {e}")
            record_text_only("synthesis_error")
            return None

        if audio is None:
            record_text_only("unconfigured")
            return None

        try:
            return await self._audio_store.save(call_id, audio)
        except OSError as e:
            logger.error(f"Error saving audio for call {call_id}: {e}")
            record_text_only("store_error")
            return None

    # =========================================================================
    # Feed reads
    # =========================================================================

    async def latest_response(self, call_id: str) -> ResponseEntry | None:
        return await self._feed.latest(call_id)

    async def responses(self, call_id: str) -> list[ResponseEntry]:
        return await self._feed.all(call_id)

    async def close(self) -> None:
        """Drop all sessions and close backend clients."""
        await self._registry.close_all()
        await self._generator.close()
        await self._synthesizer.close()


def create_voice_service(settings: Settings | None = None) -> VoiceService:
    """Wire the voice service from settings (backends resolved once here)."""
    settings = settings or get_settings()
    audio_store = FileAudioStore.from_settings(settings)
    audio_store.ensure_dir()

    return VoiceService(
        registry=VoiceSessionRegistry(),
        generator=ResponseGenerator(create_text_backend(settings)),
        synthesizer=SpeechSynthesizer(resolve_tts_service(settings)),
        audio_store=audio_store,
    )
