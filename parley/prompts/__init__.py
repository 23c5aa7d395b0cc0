"""Prompt templates and builders for LLM interactions."""

from parley.prompts.summary import SUMMARY_SYSTEM_PROMPT, build_summary_messages
from parley.prompts.voice import CONVERSATION_FRAMING, build_voice_prompt

__all__ = [
    "CONVERSATION_FRAMING",
    "SUMMARY_SYSTEM_PROMPT",
    "build_summary_messages",
    "build_voice_prompt",
]
