"""Application configuration using Pydantic Settings.

All configuration is loaded from environment variables.
See .env.example for required variables.
"""

from functools import lru_cache
from typing import Literal

from pydantic import AliasChoices, Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    # ==========================================================================
    # Text Generation
    # ==========================================================================
    llm_provider: Literal["groq", "gemini"] = Field(
        default="groq",
        description="Backend used to generate live voice responses",
    )
    groq_api_key: SecretStr | None = Field(default=None, description="Groq API key for LLM")
    groq_model: str = Field(
        default="llama-3.3-70b-versatile",
        description="Groq model for live responses",
    )
    gemini_api_key: SecretStr | None = Field(
        default=None,
        validation_alias=AliasChoices("gemini_api_key", "google_genai_api_key"),
        description="Gemini API key (GEMINI_API_KEY or GOOGLE_GENAI_API_KEY)",
    )
    gemini_model: str = Field(
        default="gemini-2.0-flash-exp",
        description="Gemini model for live responses",
    )
    summary_model: str = Field(
        default="llama-3.3-70b-versatile",
        description="Groq model used by the post-call summary job",
    )

    # ==========================================================================
    # Text-to-Speech (optional, text-only mode when absent)
    # ==========================================================================
    google_cloud_keyfile: str | None = Field(
        default=None,
        description="Path to a Google Cloud service account JSON file",
    )
    google_cloud_project_id: str | None = Field(
        default=None,
        description="Google Cloud project for Text-to-Speech",
    )
    tts_language_code: str = Field(default="en-US", description="TTS voice language")
    tts_voice_name: str = Field(default="en-US-Neural2-F", description="TTS voice name")
    tts_sample_rate: int = Field(
        default=16000,
        description="Sample rate of the LINEAR16 audio returned by TTS",
    )

    # ==========================================================================
    # Audio Artifacts
    # ==========================================================================
    audio_dir: str = Field(
        default="data/audio_responses",
        description="Directory where synthesized audio files are written",
    )
    audio_url_prefix: str = Field(
        default="/audio-responses",
        description="Public URL prefix under which audio files are served",
    )
    poll_interval_seconds: float = Field(
        default=1.5,
        description="Polling interval for the playback client",
    )

    # ==========================================================================
    # Database
    # ==========================================================================
    database_url: str = Field(
        default="sqlite+aiosqlite:///./data/parley.db",
        description="SQLAlchemy async database URL",
    )

    # ==========================================================================
    # Redis
    # ==========================================================================
    redis_url: str = Field(
        default="redis://localhost:6379",
        description="Redis URL for arq task queue",
    )

    # ==========================================================================
    # Application
    # ==========================================================================
    debug: bool = Field(default=False, description="Enable debug mode")
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO", description="Logging level"
    )
    environment: Literal["development", "staging", "production"] = Field(
        default="development", description="Deployment environment"
    )

    # ==========================================================================
    # Derived Properties
    # ==========================================================================
    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"

    @property
    def tts_configured(self) -> bool:
        """Text-to-speech is available when any Google Cloud credential is set."""
        return bool(self.google_cloud_keyfile or self.google_cloud_project_id)

    @property
    def llm_configured(self) -> bool:
        """Check that the selected text backend has an API key."""
        key = self.gemini_api_key if self.llm_provider == "gemini" else self.groq_api_key
        return bool(key and key.get_secret_value())

    @property
    def redis_settings(self):
        """Get Redis connection settings for arq."""
        from arq.connections import RedisSettings

        return RedisSettings.from_dsn(self.redis_url)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Use dependency injection in FastAPI:
        settings: Settings = Depends(get_settings)
    """
    return Settings()
