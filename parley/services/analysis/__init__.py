"""Post-call analysis services."""

from parley.services.analysis.meeting_summary import (
    MeetingSummarizer,
    NamedTranscriptItem,
    TranscriptError,
    TranscriptFetchError,
    TranscriptItem,
    TranscriptParseError,
    attach_speaker_names,
    fetch_transcript,
    load_speaker_names,
    parse_transcript_jsonl,
    speaker_ids,
)

__all__ = [
    "MeetingSummarizer",
    "NamedTranscriptItem",
    "TranscriptItem",
    "TranscriptError",
    "TranscriptFetchError",
    "TranscriptParseError",
    "attach_speaker_names",
    "fetch_transcript",
    "load_speaker_names",
    "parse_transcript_jsonl",
    "speaker_ids",
]
