"""Tests for voice session lifecycle and transcription ingest endpoints."""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest

CALL_ID = "call-42"


@pytest.fixture
def started(test_client):
    response = test_client.post(
        f"/api/calls/{CALL_ID}/voice-session",
        json={"agent_participant_id": "agent-1", "instructions": "You are a helpful assistant."},
    )
    assert response.status_code == 201
    return response.json()


class TestVoiceSessionLifecycle:
    """Tests for start/get/end."""

    def test_start_session(self, test_client, started) -> None:
        assert started == {"call_id": CALL_ID, "active": True}

        response = test_client.get(f"/api/calls/{CALL_ID}/voice-session")
        assert response.json()["active"] is True

    def test_start_requires_agent_id(self, test_client) -> None:
        response = test_client.post(
            f"/api/calls/{CALL_ID}/voice-session",
            json={"agent_participant_id": "   "},
        )
        assert response.status_code == 422

    def test_unknown_session_is_inactive(self, test_client) -> None:
        response = test_client.get("/api/calls/unknown/voice-session")

        assert response.status_code == 200
        assert response.json()["active"] is False

    def test_end_session(self, test_client, started) -> None:
        response = test_client.delete(f"/api/calls/{CALL_ID}/voice-session")

        assert response.status_code == 200
        assert response.json() == {
            "call_id": CALL_ID,
            "ended": True,
            "responses": 0,
            "summary_queued": False,
        }
        assert test_client.get(f"/api/calls/{CALL_ID}/voice-session").json()["active"] is False

    def test_end_unknown_session_is_not_an_error(self, test_client) -> None:
        response = test_client.delete("/api/calls/unknown/voice-session")

        assert response.status_code == 200
        assert response.json()["ended"] is False

    def test_end_with_meeting_queues_summary(self, test_client, started, monkeypatch) -> None:
        enqueue = AsyncMock(return_value=True)
        monkeypatch.setattr("parley.api.routes.voice_sessions._enqueue_summary", enqueue)

        response = test_client.request(
            "DELETE",
            f"/api/calls/{CALL_ID}/voice-session",
            json={"meeting_id": "meeting-1", "transcript_url": "https://example.com/t.jsonl"},
        )

        assert response.json()["summary_queued"] is True
        args = enqueue.call_args.args
        assert args[1:] == ("meeting-1", "https://example.com/t.jsonl")


    def test_summary_queue_failure_still_ends_session(self, test_client, started) -> None:
        response = test_client.request(
            "DELETE",
            f"/api/calls/{CALL_ID}/voice-session",
            json={"meeting_id": "meeting-1"},
        )

        assert response.status_code == 200
        assert response.json()["ended"] is True
        assert response.json()["summary_queued"] is False


class TestTranscriptionIngest:
    """Tests for POST /calls/{call_id}/transcriptions."""

    def test_transcription_produces_response(self, test_client, started, text_backend) -> None:
        text_backend.replies = ["Happy to help."]

        response = test_client.post(
            f"/api/calls/{CALL_ID}/transcriptions",
            json={"text": "Can you help?", "speaker_id": "user-1"},
        )
        assert response.status_code == 202
        assert response.json() == {"accepted": True}

        # Background tasks finish before TestClient returns
        latest = test_client.get(f"/api/voice-audio/{CALL_ID}").json()
        assert latest["text"] == "Happy to help."
        assert latest["audioUrl"].startswith("/audio-responses/")

        audio = test_client.get(latest["audioUrl"])
        assert audio.status_code == 200
        assert audio.content.startswith(b"RIFF")

    def test_agent_speech_gets_no_response(self, test_client, started, text_backend) -> None:
        test_client.post(
            f"/api/calls/{CALL_ID}/transcriptions",
            json={"text": "I am the agent", "speaker_id": "agent-1"},
        )

        assert text_backend.prompts == []
        assert test_client.get(f"/api/voice-audio/{CALL_ID}").json()["text"] is None

    def test_unknown_call_is_accepted_and_ignored(self, test_client, text_backend) -> None:
        response = test_client.post(
            "/api/calls/unknown/transcriptions",
            json={"text": "Hello", "speaker_id": "user-1"},
        )

        assert response.status_code == 202
        assert text_backend.prompts == []

    @pytest.mark.parametrize(
        "body",
        [
            {"text": "", "speaker_id": "user-1"},
            {"text": "   ", "speaker_id": "user-1"},
            {"text": "Hello"},
        ],
    )
    def test_invalid_event_rejected(self, test_client, started, body) -> None:
        response = test_client.post(f"/api/calls/{CALL_ID}/transcriptions", json=body)
        assert response.status_code == 422
