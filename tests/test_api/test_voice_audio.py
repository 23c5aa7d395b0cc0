"""Tests for response feed retrieval endpoints."""

from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock


def seed_responses(voice_service, call_id: str, *entries: tuple[str, str | None]) -> None:
    async def seed() -> None:
        await voice_service.start_session(call_id, "agent-1", "")
        for text, audio_url in entries:
            await voice_service.feed.record(call_id, text, audio_url)

    asyncio.run(seed())


class TestLatestAudio:
    """Tests for GET /api/voice-audio/{call_id}."""

    def test_no_responses_yet(self, test_client) -> None:
        response = test_client.get("/api/voice-audio/call-1")

        assert response.status_code == 200
        assert response.json() == {"audioUrl": None, "text": None}

    def test_returns_latest_entry(self, test_client, voice_service) -> None:
        seed_responses(
            voice_service,
            "call-1",
            ("First", "/audio-responses/call-1-1.wav"),
            ("Second", "/audio-responses/call-1-2.wav"),
        )

        data = test_client.get("/api/voice-audio/call-1").json()

        assert data["text"] == "Second"
        assert data["audioUrl"] == "/audio-responses/call-1-2.wav"
        assert "timestamp" in data

    def test_text_only_entry(self, test_client, voice_service) -> None:
        seed_responses(voice_service, "call-1", ("Only text", None))

        data = test_client.get("/api/voice-audio/call-1").json()

        assert data["text"] == "Only text"
        assert data["audioUrl"] is None

    def test_missing_call_id(self, test_client) -> None:
        response = test_client.get("/api/voice-audio")

        assert response.status_code == 400
        assert response.json() == {"error": "Missing call id"}

    def test_blank_call_id(self, test_client) -> None:
        response = test_client.get("/api/voice-audio/%20")

        assert response.status_code == 400

    def test_internal_error(self, test_client, voice_service, monkeypatch) -> None:
        monkeypatch.setattr(
            voice_service, "latest_response", AsyncMock(side_effect=RuntimeError("boom"))
        )

        response = test_client.get("/api/voice-audio/call-1")

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to get audio response"}


class TestAudioHistory:
    def test_history_in_order(self, test_client, voice_service) -> None:
        seed_responses(voice_service, "call-1", ("One", None), ("Two", "/audio-responses/x.wav"))

        data = test_client.get("/api/voice-audio/call-1/history").json()

        assert [r["text"] for r in data["responses"]] == ["One", "Two"]

    def test_history_for_unknown_call(self, test_client) -> None:
        data = test_client.get("/api/voice-audio/unknown/history").json()
        assert data == {"responses": []}
