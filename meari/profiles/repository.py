"""Data access layer for profiles."""

import logging
from collections.abc import Iterable
from typing import Any

from postgrest.exceptions import APIError
from supabase import Client

from meari.db.models import PROFILES
from meari.nicknames.generator import generate_random_nickname

logger = logging.getLogger(__name__)


def get_profile(db: Client, user_id: str) -> dict | None:
    result = db.table(PROFILES).select("*").eq("user_id", user_id).limit(1).execute()
    return result.data[0] if result.data else None


def get_profiles_for_users(db: Client, user_ids: Iterable[str]) -> dict[str, dict]:
    """Fetch the profiles of many users in one query, keyed by user id."""
    unique_ids = list(dict.fromkeys(uid for uid in user_ids if uid))
    if not unique_ids:
        return {}
    result = (
        db.table(PROFILES)
        .select("user_id, username, avatar_url")
        .in_("user_id", unique_ids)
        .execute()
    )
    return {row["user_id"]: row for row in result.data}


def receive_messages_enabled(db: Client, user_id: str) -> bool:
    """Whether the user accepts message notifications.

    A missing profile or a null flag counts as disabled. Query errors propagate.
    """
    result = db.table(PROFILES).select("receive_messages").eq("user_id", user_id).limit(1).execute()
    return bool(result.data and result.data[0].get("receive_messages"))


def upsert_profile(db: Client, user_id: str, data: dict[str, Any]) -> dict:
    row = {"user_id": user_id, **data}
    result = db.table(PROFILES).upsert(row, on_conflict="user_id").execute()
    return result.data[0] if result.data else row


def get_my_nickname(db: Client, user_id: str) -> str:
    """The user's own fixed display name, or a throwaway random one."""
    try:
        profile = get_profile(db, user_id)
    except APIError as exc:
        logger.warning("Could not read profile of %s: %s", user_id, exc.message)
        return generate_random_nickname()
    if not profile or not profile.get("username"):
        return generate_random_nickname()
    return profile["username"]
