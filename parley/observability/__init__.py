"""Observability module for metrics."""

from parley.observability.metrics import (
    ACTIVE_SESSIONS,
    GENERATION_LATENCY,
    SUMMARY_JOBS_TOTAL,
    SYNTHESIS_LATENCY,
    VOICE_TURNS_TOTAL,
    record_text_only,
    record_turn,
)

__all__ = [
    "VOICE_TURNS_TOTAL",
    "SUMMARY_JOBS_TOTAL",
    "ACTIVE_SESSIONS",
    "GENERATION_LATENCY",
    "SYNTHESIS_LATENCY",
    "record_turn",
    "record_text_only",
]
