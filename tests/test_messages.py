"""Tests for voice message endpoints."""

import asyncio
import io

import pytest
from fastapi import HTTPException, UploadFile

from meari.config.settings import get_settings
from meari.main import app
from meari.messages.validation import read_audio, validate_audio_upload
from meari.unread.tracker import UnreadTracker
from fakes import FakeRealtimeSource


def _upload(audio, duration="12.5", content_type="audio/webm;codecs=opus", **fields):
    return {
        "files": {"audio": ("clip.webm", audio, content_type)},
        "data": {"duration": duration, **fields},
    }


# --- Local validation ---

def test_validate_accepts_limit_duration():
    validate_audio_upload(1024, 600, "audio/webm")


@pytest.mark.parametrize(
    "size, duration, content_type, message",
    [
        (11 * 1024 * 1024, 10, "audio/webm", "File size must be less than 10MB"),
        (1024, 601, "audio/webm", "Recording cannot be longer than 10 minutes"),
        (1024, 10, "video/mp4", "Only audio files can be uploaded"),
        (0, 10, "audio/webm", "Audio file is empty"),
        (1024, float("nan"), "audio/webm", "Duration must be a finite number"),
        (1024, float("inf"), "audio/webm", "Duration must be a finite number"),
    ],
)
def test_validate_rejects(size, duration, content_type, message):
    with pytest.raises(HTTPException) as exc:
        validate_audio_upload(size, duration, content_type)
    assert exc.value.status_code == 400
    assert exc.value.detail == message


# --- Broadcast send ---

def test_broadcast(client, fake_db, user_id, auth_header, webm_audio):
    resp = client.post(
        "/api/v1/messages/broadcast", headers=auth_header,
        **_upload(webm_audio, voice_effect="cave", title="안녕하세요"),
    )
    assert resp.status_code == 201
    data = resp.json()["data"]
    assert data["sender_id"] == user_id
    assert data["recipient_id"] is None
    assert data["message_type"] == "broadcast"
    assert data["is_broadcast"] is True
    assert data["voice_effect"] == "cave"
    assert data["voice_effect_name"] == "동굴"
    assert data["title"] == "안녕하세요"
    assert data["duration_label"] == "0:12"

    [(path, stored)] = fake_db.storage.buckets["voice-messages"].items()
    assert path.startswith(f"{user_id}/")
    assert path.endswith(".webm")
    assert stored["content_type"] == "audio/webm"
    assert data["audio_url"].endswith(path)


def test_broadcast_default_title_and_effect(client, fake_db, auth_header, webm_audio):
    resp = client.post("/api/v1/messages/broadcast", headers=auth_header, **_upload(webm_audio))
    data = resp.json()["data"]
    assert data["title"].startswith("음성 메시지 ")
    assert data["voice_effect"] == "normal"


def test_broadcast_title_is_sanitized(client, auth_header, webm_audio):
    resp = client.post(
        "/api/v1/messages/broadcast", headers=auth_header,
        **_upload(webm_audio, title="<script>x</script>hello"),
    )
    assert resp.json()["data"]["title"] == "xhello"


def test_oversized_upload_rejected_before_network(client, fake_db, auth_header):
    resp = client.post(
        "/api/v1/messages/broadcast", headers=auth_header,
        **_upload(b"\x1a\x45\xdf\xa3" + b"\x00" * (11 * 1024 * 1024)),
    )
    assert resp.status_code == 400
    assert resp.json()["error"]["message"] == "File size must be less than 10MB"
    assert fake_db.storage.calls == []
    assert fake_db.executed == []


def test_read_audio_stops_past_size_limit():
    limit = get_settings().MAX_AUDIO_BYTES
    upload = UploadFile(io.BytesIO(b"\x01" * (limit + 4096)))

    data = asyncio.run(read_audio(upload))

    assert len(data) == limit + 1


def test_nan_duration_rejected(client, fake_db, auth_header, webm_audio):
    resp = client.post("/api/v1/messages/broadcast", headers=auth_header, **_upload(webm_audio, duration="nan"))

    assert resp.status_code == 400
    assert resp.json()["error"]["message"] == "Duration must be a finite number"
    assert fake_db.storage.calls == []
    assert "voice_messages" not in fake_db.tables


def test_duration_limit(client, fake_db, auth_header, webm_audio):
    ok = client.post("/api/v1/messages/broadcast", headers=auth_header, **_upload(webm_audio, duration="600"))
    too_long = client.post("/api/v1/messages/broadcast", headers=auth_header, **_upload(webm_audio, duration="601"))

    assert ok.status_code == 201
    assert ok.json()["data"]["duration_label"] == "10:00"
    assert too_long.status_code == 400
    assert len(fake_db.tables["voice_messages"]) == 1


def test_non_audio_rejected(client, fake_db, auth_header, webm_audio):
    resp = client.post(
        "/api/v1/messages/broadcast", headers=auth_header,
        **_upload(webm_audio, content_type="text/html"),
    )
    assert resp.status_code == 400
    assert fake_db.storage.calls == []


def test_unknown_voice_effect_rejected(client, auth_header, webm_audio):
    resp = client.post("/api/v1/messages/broadcast", headers=auth_header, **_upload(webm_audio, voice_effect="robot"))
    assert resp.status_code == 422
    assert resp.json()["error"]["type"] == "validation_error"


def test_upload_failure_creates_no_row(client, fake_db, auth_header, webm_audio):
    fake_db.storage.fail_uploads = True
    resp = client.post("/api/v1/messages/broadcast", headers=auth_header, **_upload(webm_audio))
    assert resp.status_code == 500
    assert resp.json()["error"]["message"] == "Failed to upload voice message"
    assert "voice_messages" not in fake_db.tables


def test_insert_failure_removes_upload(client, fake_db, auth_header, webm_audio):
    fake_db.failures[("voice_messages", "insert")] = "insert failed"
    resp = client.post("/api/v1/messages/broadcast", headers=auth_header, **_upload(webm_audio))
    assert resp.status_code == 500
    assert fake_db.storage.buckets["voice-messages"] == {}
    assert fake_db.storage.calls[-1][0] == "remove"


def test_broadcast_requires_auth(client, webm_audio):
    resp = client.post("/api/v1/messages/broadcast", **_upload(webm_audio))
    assert resp.status_code == 401


# --- Feeds ---

def _seed_message(db, sender_id, **overrides):
    row = {
        "sender_id": sender_id,
        "recipient_id": None,
        "audio_url": f"https://fake.supabase.co/storage/v1/object/public/voice-messages/{sender_id}/a.webm",
        "duration": 75,
        "title": "음성 메시지",
        "message_type": "broadcast",
        "is_broadcast": True,
        "voice_effect": "normal",
        **overrides,
    }
    return db.seed("voice_messages", row)[0]


def test_list_broadcasts_newest_first(client, fake_db, user_id, other_id, auth_header):
    first = _seed_message(fake_db, other_id)
    second = _seed_message(fake_db, user_id)
    _seed_message(fake_db, user_id, message_type="direct", is_broadcast=False, recipient_id=other_id)

    resp = client.get("/api/v1/messages/broadcasts", headers=auth_header)

    assert resp.status_code == 200
    body = resp.json()
    assert body["total"] == 2
    assert [m["id"] for m in body["data"]] == [second["id"], first["id"]]
    assert body["data"][0]["duration_label"] == "1:15"


def test_list_broadcasts_paginates(client, fake_db, other_id, auth_header):
    for _ in range(5):
        _seed_message(fake_db, other_id)
    resp = client.get("/api/v1/messages/broadcasts?page=2&per_page=2", headers=auth_header)
    body = resp.json()
    assert body["total"] == 5
    assert len(body["data"]) == 2
    assert body["page"] == 2


def test_inbox(client, fake_db, user_id, other_id, auth_header):
    fake_db.seed("profiles", {"user_id": other_id, "username": "노을의 고래"})
    heard = _seed_message(fake_db, other_id)
    fresh = _seed_message(fake_db, other_id, message_type="direct", is_broadcast=False, recipient_id=user_id)
    fake_db.seed(
        "voice_message_recipients",
        {"message_id": heard["id"], "recipient_id": user_id, "listened_at": "2026-01-01T00:00:10+00:00"},
        {"message_id": fresh["id"], "recipient_id": user_id},
    )
    fake_db.reset_log()

    resp = client.get("/api/v1/messages/inbox", headers=auth_header)

    assert resp.status_code == 200
    items = resp.json()["data"]
    assert [i["id"] for i in items] == [fresh["id"], heard["id"]]
    assert [i["listened"] for i in items] == [False, True]
    assert {i["sender_username"] for i in items} == {"노을의 고래"}
    assert len(fake_db.executed) == 3


# --- Listened ---

def test_mark_listened(client, fake_db, user_id, other_id, auth_header):
    message = _seed_message(fake_db, other_id)
    fake_db.seed("voice_message_recipients", {"message_id": message["id"], "recipient_id": user_id})

    first = client.post(f"/api/v1/messages/{message['id']}/listened", headers=auth_header)
    stamped = fake_db.tables["voice_message_recipients"][0]["listened_at"]
    second = client.post(f"/api/v1/messages/{message['id']}/listened", headers=auth_header)

    assert first.status_code == 200
    assert first.json()["data"]["newly_listened"] is True
    assert stamped is not None
    assert second.json()["data"]["newly_listened"] is False
    assert fake_db.tables["voice_message_recipients"][0]["listened_at"] == stamped


def test_mark_listened_unknown_message(client, auth_header):
    resp = client.post("/api/v1/messages/does-not-exist/listened", headers=auth_header)
    assert resp.status_code == 404
    assert resp.json()["error"]["type"] == "not_found"


def test_mark_listened_resets_open_streams(client, fake_db, user_id, other_id, auth_header):
    fake_db.seed("profiles", {"user_id": user_id, "receive_messages": True})
    message = _seed_message(fake_db, other_id)
    fake_db.seed("voice_message_recipients", {"message_id": message["id"], "recipient_id": user_id})

    tracker = UnreadTracker(fake_db, user_id, FakeRealtimeSource())
    asyncio.run(tracker.start())
    app.state.trackers.add(tracker)
    assert tracker.count == 1

    resp = client.post(f"/api/v1/messages/{message['id']}/listened", headers=auth_header)

    assert resp.json()["data"]["streams_updated"] == 1
    assert tracker.count == 0
