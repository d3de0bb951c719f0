"""Queries behind the unread count."""

from supabase import Client

from meari.db.models import VOICE_MESSAGE_RECIPIENTS
from meari.profiles.repository import receive_messages_enabled


def count_unread(db: Client, user_id: str) -> int:
    result = (
        db.table(VOICE_MESSAGE_RECIPIENTS)
        .select("id", count="exact")
        .eq("recipient_id", user_id)
        .is_("listened_at", "null")
        .execute()
    )
    return result.count or 0


def fetch_unread_count(db: Client, user_id: str) -> int:
    """Unread markers for the user, or 0 when they opted out of messages."""
    if not receive_messages_enabled(db, user_id):
        return 0
    return count_unread(db, user_id)
