"""Text generation services (Groq, Gemini)."""

from parley.services.llm.exceptions import (
    GenerationError,
    LLMAuthenticationError,
    LLMConnectionError,
    LLMRateLimitError,
    LLMServiceError,
)
from parley.services.llm.generator import (
    FALLBACK_RESPONSE,
    ResponseGenerator,
    create_text_backend,
)
from parley.services.llm.protocol import ConversationTurn, Role, TextGenerationService

__all__ = [
    # Protocol and types
    "TextGenerationService",
    "ConversationTurn",
    "Role",
    # Generation
    "ResponseGenerator",
    "FALLBACK_RESPONSE",
    "create_text_backend",
    # Exceptions
    "LLMServiceError",
    "LLMRateLimitError",
    "LLMConnectionError",
    "LLMAuthenticationError",
    "GenerationError",
]
