"""Custom exceptions for TTS services."""


class TTSServiceError(Exception):
    """Base exception for TTS service errors."""

    pass


class TTSNotConfiguredError(TTSServiceError):
    """Raised when a TTS backend is built without credentials."""

    pass


class SynthesisError(TTSServiceError):
    """Raised when the backend answered but produced no audio."""

    pass


class TTSConnectionError(TTSServiceError):
    """Raised when the TTS backend could not be reached or rejected the request."""

    pass
