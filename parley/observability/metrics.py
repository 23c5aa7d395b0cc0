"""Prometheus metrics for Parley.

Provides metrics for monitoring live voice sessions and the summary worker.
"""

from __future__ import annotations

from prometheus_client import Counter, Gauge, Histogram, generate_latest
from prometheus_client.exposition import CONTENT_TYPE_LATEST

# =============================================================================
# Counters
# =============================================================================

VOICE_TURNS_TOTAL = Counter(
    "parley_voice_turns_total",
    "Transcription fragments handled by the voice pipeline, by outcome",
    ["outcome"],
)

SYNTHESIS_FALLBACK_TOTAL = Counter(
    "parley_synthesis_fallback_total",
    "Responses recorded without audio",
    ["reason"],
)

SUMMARY_JOBS_TOTAL = Counter(
    "parley_summary_jobs_total",
    "Post-call summary jobs by outcome",
    ["outcome"],
)

# =============================================================================
# Gauges
# =============================================================================

ACTIVE_SESSIONS = Gauge(
    "parley_active_voice_sessions",
    "Currently registered voice sessions",
)

# =============================================================================
# Histograms
# =============================================================================

GENERATION_LATENCY = Histogram(
    "parley_generation_seconds",
    "Text generation latency per turn",
    buckets=[0.25, 0.5, 0.75, 1.0, 1.5, 2.0, 3.0, 5.0, 10.0],
)

SYNTHESIS_LATENCY = Histogram(
    "parley_synthesis_seconds",
    "Text-to-speech latency per turn",
    buckets=[0.1, 0.25, 0.5, 0.75, 1.0, 1.5, 2.0, 3.0, 5.0],
)

# =============================================================================
# Helper Functions
# =============================================================================


def record_turn(outcome: str) -> None:
    """Count one ingested fragment.

    Args:
        outcome: responded, orphaned, dropped_no_session, dropped_busy,
            self_echo, empty, or failed
    """
    VOICE_TURNS_TOTAL.labels(outcome=outcome).inc()


def record_text_only(reason: str) -> None:
    """Count a response recorded without audio (unconfigured, error, store)."""
    SYNTHESIS_FALLBACK_TOTAL.labels(reason=reason).inc()


def get_metrics() -> bytes:
    """Generate Prometheus metrics output.

    Returns:
        Metrics in Prometheus text exposition format.
    """
    return generate_latest()


def get_content_type() -> str:
    """Get the content type for Prometheus metrics."""
    return CONTENT_TYPE_LATEST
