"""Text generation service protocol and data types."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Protocol


class Role(str, Enum):
    """Speaker role in a voice conversation."""

    USER = "user"
    ASSISTANT = "assistant"


@dataclass(frozen=True, slots=True)
class ConversationTurn:
    """A single utterance in a session's conversation history."""

    role: Role
    content: str

    @property
    def label(self) -> str:
        """Prompt label for this turn ("User" / "Assistant")."""
        return "User" if self.role is Role.USER else "Assistant"


class TextGenerationService(Protocol):
    """Protocol for text generation backends.

    A backend receives one fully composed prompt and returns plain text.
    It raises LLMServiceError subclasses on failure.
    """

    @property
    def model(self) -> str:
        """Model identifier used for requests."""
        ...

    async def generate(
        self,
        prompt: str,
        *,
        max_tokens: int = 256,
        temperature: float = 0.7,
    ) -> str:
        """Generate a completion for the prompt.

        Returns:
            Generated text, possibly empty.
        """
        ...

    async def health_check(self) -> bool:
        """Check if the service is operational."""
        ...

    async def close(self) -> None:
        """Close any open connections."""
        ...
