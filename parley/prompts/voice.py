"""Prompt composition for live in-call voice responses."""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from parley.services.llm.protocol import ConversationTurn

CONVERSATION_FRAMING = "You are having a conversation. Respond naturally and concisely."


def build_voice_prompt(instructions: str, history: Sequence[ConversationTurn]) -> str:
    """Compose the single prompt sent to the text backend.

    Layout::

        <instructions>

        You are having a conversation. Respond naturally and concisely.

        Conversation:
        User: ...

        Assistant: ...

        Assistant:
    """
    system_prompt = f"{instructions}\n\n{CONVERSATION_FRAMING}"
    conversation = "\n\n".join(f"{turn.label}: {turn.content}" for turn in history)
    return f"{system_prompt}\n\nConversation:\n{conversation}\n\nAssistant:"
