"""Business logic for user settings."""

import logging

from fastapi import HTTPException
from postgrest.exceptions import APIError
from supabase import Client

from meari.profiles import repository

logger = logging.getLogger(__name__)


def _effective_settings(profile: dict | None) -> dict:
    profile = profile or {}
    echo_enabled = profile.get("echo_enabled")
    return {
        "username": profile.get("username"),
        "echo_enabled": True if echo_enabled is None else bool(echo_enabled),
        # Same rule the unread tracker applies: unset means off
        "receive_messages": bool(profile.get("receive_messages")),
    }


def get_user_settings(db: Client, user_id: str) -> dict:
    return _effective_settings(repository.get_profile(db, user_id))


def update_user_settings(db: Client, user_id: str, data: dict) -> dict:
    # Filter out None values
    update_data = {k: v for k, v in data.items() if v is not None}
    if not update_data:
        return get_user_settings(db, user_id)
    try:
        profile = repository.upsert_profile(db, user_id, update_data)
    except APIError as exc:
        logger.error("Settings update failed for %s: %s", user_id, exc.message)
        raise HTTPException(status_code=500, detail="Could not save settings")
    return _effective_settings(profile)
