"""Google Cloud Text-to-Speech service implementation."""

from __future__ import annotations

import time
from typing import Any

from parley.config import Settings, get_settings
from parley.logging_config import get_logger, preview_text
from parley.services.tts.exceptions import (
    SynthesisError,
    TTSConnectionError,
    TTSNotConfiguredError,
)
from parley.services.tts.protocol import SynthesisMetadata, VoiceParams

logger: Any = get_logger(__name__)


class GoogleCloudTTSService:
    """Google Cloud TTS returning LINEAR16 (WAV) audio with a fixed voice."""

    def __init__(self, settings: Settings | None = None) -> None:
        self._settings = settings or get_settings()
        if not self._settings.tts_configured:
            raise TTSNotConfiguredError(
                "GOOGLE_CLOUD_KEYFILE or GOOGLE_CLOUD_PROJECT_ID must be set"
            )
        self._voice = VoiceParams(
            language_code=self._settings.tts_language_code,
            voice_name=self._settings.tts_voice_name,
            sample_rate=self._settings.tts_sample_rate,
        )
        self._client: Any = None

    @property
    def voice(self) -> VoiceParams:
        return self._voice

    def _get_client(self) -> Any:
        if self._client is None:
            from google.cloud import texttospeech

            keyfile = self._settings.google_cloud_keyfile
            project_id = self._settings.google_cloud_project_id
            client_options = {"quota_project_id": project_id} if project_id else None
            try:
                if keyfile:
                    self._client = texttospeech.TextToSpeechAsyncClient.from_service_account_file(
                        keyfile, client_options=client_options
                    )
                else:
                    # Application default credentials
                    self._client = texttospeech.TextToSpeechAsyncClient(
                        client_options=client_options
                    )
            except Exception as e:
                raise TTSConnectionError(f"Failed to create TTS client: {e}") from e
        return self._client

    def _build_request(self, text: str) -> dict[str, Any]:
        from google.cloud import texttospeech

        return {
            "input": texttospeech.SynthesisInput(text=text),
            "voice": texttospeech.VoiceSelectionParams(
                language_code=self._voice.language_code,
                name=self._voice.voice_name,
                ssml_gender=texttospeech.SsmlVoiceGender[self._voice.ssml_gender],
            ),
            "audio_config": texttospeech.AudioConfig(
                audio_encoding=texttospeech.AudioEncoding[self._voice.audio_encoding],
                sample_rate_hertz=self._voice.sample_rate,
            ),
        }

    async def synthesize(self, text: str) -> tuple[bytes, SynthesisMetadata]:
        """Synthesize text to a WAV buffer."""
        from google.api_core import exceptions as google_exceptions

        logger.debug(f"TTS request text: {preview_text(text)}")
        start_time = time.perf_counter()
        client = self._get_client()

        try:
            response = await client.synthesize_speech(**self._build_request(text))
        except google_exceptions.GoogleAPIError as e:
            logger.error(f"Google TTS request failed: {e}")
            raise TTSConnectionError(f"Google TTS request failed: {e}") from e

        audio = bytes(response.audio_content or b"")
        if not audio:
            raise SynthesisError("Failed to generate audio from text")

        metadata = SynthesisMetadata(
            voice=self._voice.voice_name,
            input_chars=len(text),
            output_bytes=len(audio),
            sample_rate=self._voice.sample_rate,
            total_synthesis_ms=(time.perf_counter() - start_time) * 1000,
        )
        logger.debug(f"TTS response buffer bytes: {len(audio)}")
        return audio, metadata

    async def close(self) -> None:
        if self._client is not None:
            transport = getattr(self._client, "transport", None)
            if transport is not None:
                await transport.close()
            self._client = None

    async def health_check(self) -> bool:
        """Synthesize a one-word probe."""
        try:
            audio, _ = await self.synthesize("Test")
            return bool(audio)
        except Exception as e:
            logger.warning(f"Google TTS health check failed: {e}")
            return False
