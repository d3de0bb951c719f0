"""Data access layer for one-to-one conversations."""

from supabase import Client

from meari.db.models import MESSAGE_DIRECT, VOICE_MESSAGE_RECIPIENTS, VOICE_MESSAGES


def list_direct_messages(db: Client, user_id: str) -> list[dict]:
    """Every direct message the user sent or received, newest first."""
    result = (
        db.table(VOICE_MESSAGES)
        .select("*")
        .eq("message_type", MESSAGE_DIRECT)
        .or_(f"sender_id.eq.{user_id},recipient_id.eq.{user_id}")
        .order("created_at", desc=True)
        .execute()
    )
    return result.data


def list_unread_message_ids(db: Client, user_id: str, message_ids: list[str]) -> set[str]:
    if not message_ids:
        return set()
    result = (
        db.table(VOICE_MESSAGE_RECIPIENTS)
        .select("message_id")
        .eq("recipient_id", user_id)
        .is_("listened_at", "null")
        .in_("message_id", message_ids)
        .execute()
    )
    return {row["message_id"] for row in result.data}


def list_room_messages(db: Client, user_id: str, other_id: str) -> list[dict]:
    """Direct messages between the two users plus the other user's broadcasts, oldest first."""
    between = (
        f"and(sender_id.eq.{user_id},recipient_id.eq.{other_id}),"
        f"and(sender_id.eq.{other_id},recipient_id.eq.{user_id})"
    )
    result = (
        db.table(VOICE_MESSAGES)
        .select("*")
        .or_(
            f"and(message_type.eq.direct,or({between})),"
            f"and(message_type.eq.broadcast,sender_id.eq.{other_id})"
        )
        .order("created_at")
        .execute()
    )
    return result.data
