"""Voice message business logic: send, list, mark listened."""

import logging
from datetime import datetime

from fastapi import HTTPException
from supabase import Client

from meari.db.models import MESSAGE_BROADCAST, MESSAGE_DIRECT
from meari.messages import repository
from meari.messages.schemas import VoiceEffect
from meari.messages.validation import validate_audio_upload
from meari.profiles.repository import get_profiles_for_users
from meari.unread.registry import TrackerRegistry
from meari.utils.audio import base_content_type, create_secure_file_name, extension_for, format_time
from meari.utils.validators import sanitize_input

logger = logging.getLogger(__name__)


def _default_title() -> str:
    return f"음성 메시지 {datetime.now().strftime('%H:%M:%S')}"


def with_duration_label(message: dict) -> dict:
    return {**message, "duration_label": format_time(message.get("duration") or 0)}


def send_voice_message(
    db: Client,
    sender_id: str,
    audio: bytes,
    duration: float,
    content_type: str | None,
    recipient_id: str | None = None,
    voice_effect: VoiceEffect = VoiceEffect.NORMAL,
    title: str | None = None,
) -> dict:
    """Validate, upload and record one clip. No recipient means a broadcast."""
    validate_audio_upload(len(audio), duration, content_type)

    path = create_secure_file_name(sender_id, extension_for(content_type))
    try:
        audio_url = repository.upload_audio(db, path, audio, base_content_type(content_type))
    except Exception:
        logger.exception("Audio upload failed for user %s", sender_id)
        raise HTTPException(status_code=500, detail="Failed to upload voice message")

    is_broadcast = recipient_id is None
    row = {
        "sender_id": sender_id,
        "recipient_id": recipient_id,
        "audio_url": audio_url,
        "duration": duration,
        "title": sanitize_input(title or "") or _default_title(),
        "message_type": MESSAGE_BROADCAST if is_broadcast else MESSAGE_DIRECT,
        "is_broadcast": is_broadcast,
        "voice_effect": voice_effect.value,
    }
    try:
        message = repository.create(db, row)
    except Exception:
        logger.exception("Saving voice message failed for user %s", sender_id)
        try:
            repository.remove_audio(db, [path])
        except Exception:
            logger.exception("Could not remove orphaned audio %s", path)
        raise HTTPException(status_code=500, detail="Failed to send voice message")

    logger.info("User %s sent %s message %s", sender_id, row["message_type"], message["id"])
    return with_duration_label(message)


def list_broadcasts(db: Client, page: int, per_page: int) -> tuple[list[dict], int]:
    messages, total = repository.list_broadcasts(db, page, per_page)
    return [with_duration_label(m) for m in messages], total


def list_inbox(db: Client, user_id: str, page: int, per_page: int) -> tuple[list[dict], int]:
    """The user's received messages, newest first, with sender profiles.

    Three queries no matter the page size: markers, messages, profiles.
    """
    markers, total = repository.list_markers(db, user_id, page, per_page)
    messages = repository.get_by_ids(db, [m["message_id"] for m in markers])
    profiles = get_profiles_for_users(db, [m["sender_id"] for m in messages.values()])

    items = []
    for marker in markers:
        message = messages.get(marker["message_id"])
        if message is None:
            continue
        profile = profiles.get(message["sender_id"], {})
        items.append({
            **with_duration_label(message),
            "listened": marker["listened_at"] is not None,
            "sender_username": profile.get("username"),
        })
    return items, total


def mark_listened(db: Client, registry: TrackerRegistry, user_id: str, message_id: str) -> dict:
    updated = repository.mark_listened(db, message_id, user_id)
    if not updated and not repository.marker_exists(db, message_id, user_id):
        raise HTTPException(status_code=404, detail="Message not found")

    reached = registry.mark_as_read(user_id)
    return {"message_id": message_id, "newly_listened": bool(updated), "streams_updated": reached}
