"""Data access layer for voice messages, recipient markers and audio objects."""

from datetime import datetime, timezone
from typing import Any

from supabase import Client

from meari.config.settings import get_settings
from meari.db.models import MESSAGE_BROADCAST, VOICE_MESSAGE_RECIPIENTS, VOICE_MESSAGES


def _bucket(db: Client):
    return db.storage.from_(get_settings().STORAGE_BUCKET)


def upload_audio(db: Client, path: str, data: bytes, content_type: str) -> str:
    """Store the clip and return its public URL."""
    bucket = _bucket(db)
    bucket.upload(path=path, file=data, file_options={"content-type": content_type, "upsert": "false"})
    return bucket.get_public_url(path)


def remove_audio(db: Client, paths: list[str]) -> None:
    _bucket(db).remove(paths)


def list_audio(db: Client, prefix: str) -> list[str]:
    """Full paths of the objects stored in one folder."""
    folder = prefix.rstrip("/")
    return [f"{folder}/{item['name']}" for item in _bucket(db).list(folder)]


def create(db: Client, data: dict[str, Any]) -> dict:
    result = db.table(VOICE_MESSAGES).insert(data).execute()
    return result.data[0]


def list_broadcasts(db: Client, page: int = 1, per_page: int = 20) -> tuple[list[dict], int]:
    offset = (page - 1) * per_page
    result = (
        db.table(VOICE_MESSAGES)
        .select("*", count="exact")
        .eq("message_type", MESSAGE_BROADCAST)
        .order("created_at", desc=True)
        .range(offset, offset + per_page - 1)
        .execute()
    )
    return result.data, result.count or 0


def get_by_ids(db: Client, message_ids: list[str]) -> dict[str, dict]:
    if not message_ids:
        return {}
    result = db.table(VOICE_MESSAGES).select("*").in_("id", message_ids).execute()
    return {row["id"]: row for row in result.data}


def list_markers(db: Client, recipient_id: str, page: int = 1, per_page: int = 20) -> tuple[list[dict], int]:
    offset = (page - 1) * per_page
    result = (
        db.table(VOICE_MESSAGE_RECIPIENTS)
        .select("message_id, listened_at, created_at", count="exact")
        .eq("recipient_id", recipient_id)
        .order("created_at", desc=True)
        .range(offset, offset + per_page - 1)
        .execute()
    )
    return result.data, result.count or 0


def mark_listened(db: Client, message_id: str, recipient_id: str) -> list[dict]:
    """Set listened_at once. Rows already listened to are left alone."""
    result = (
        db.table(VOICE_MESSAGE_RECIPIENTS)
        .update({"listened_at": datetime.now(timezone.utc).isoformat()})
        .eq("message_id", message_id)
        .eq("recipient_id", recipient_id)
        .is_("listened_at", "null")
        .execute()
    )
    return result.data


def marker_exists(db: Client, message_id: str, recipient_id: str) -> bool:
    result = (
        db.table(VOICE_MESSAGE_RECIPIENTS)
        .select("id")
        .eq("message_id", message_id)
        .eq("recipient_id", recipient_id)
        .limit(1)
        .execute()
    )
    return bool(result.data)
