"""Prompt for the post-call meeting summary job."""

from __future__ import annotations

import json
from collections.abc import Sequence
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from parley.services.analysis.meeting_summary import NamedTranscriptItem

SUMMARY_SYSTEM_PROMPT = """
You are an expert summarizer. You write readable, concise, simple content. You are given a transcript of a meeting and you need to summarize it.

Use the following markdown structure for every output:

### Overview
Provide a detailed, engaging summary of the session's content. Focus on major features, user workflows, and any key takeaways. Write in a narrative style, using full sentences. Highlight unique or powerful aspects of the product, platform, or discussion.

### Notes
Break down key content into thematic sections with timestamp ranges. Each section should summarize key points, actions, or demos in bullet format.

Example:
#### Section Name
- Main point or demo shown here
- Another key insight or interaction
- Follow-up tool or explanation provided

#### Next Section
- Feature X automatically does Y
- Mention of integration with Z
""".strip()


def build_summary_messages(items: Sequence[NamedTranscriptItem]) -> list[dict]:
    """Build chat messages asking for a markdown summary of the transcript."""
    transcript_json = json.dumps([item.to_dict() for item in items], ensure_ascii=False)
    return [
        {"role": "system", "content": SUMMARY_SYSTEM_PROMPT},
        {
            "role": "user",
            "content": "Summarize the following transcript: " + transcript_json,
        },
    ]
