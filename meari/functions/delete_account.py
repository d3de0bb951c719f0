"""Cascade deletion of everything a user owns, then the identity itself."""

import logging
from collections.abc import Callable

from supabase import Client

from meari.db.models import PROFILES, USER_NICKNAMES, VOICE_MESSAGE_RECIPIENTS, VOICE_MESSAGES
from meari.messages.repository import list_audio, remove_audio

logger = logging.getLogger(__name__)


class AccountDeletionError(Exception):
    pass


def _remove_stored_audio(db: Client, user_id: str) -> None:
    paths = list_audio(db, user_id)
    if paths:
        remove_audio(db, paths)


def delete_account(db: Client, user_id: str) -> None:
    """Delete the user's rows and files in dependency order.

    Data steps are best-effort; only failing to delete the identity raises.
    """
    logger.info("Deleting account for user: %s", user_id)

    steps: list[tuple[str, Callable[[], object]]] = [
        ("recipients", lambda: db.table(VOICE_MESSAGE_RECIPIENTS).delete().eq("recipient_id", user_id).execute()),
        ("messages", lambda: db.table(VOICE_MESSAGES).delete().eq("sender_id", user_id).execute()),
        ("nicknames", lambda: db.table(USER_NICKNAMES).delete().or_(f"assigner_id.eq.{user_id},target_id.eq.{user_id}").execute()),
        ("profile", lambda: db.table(PROFILES).delete().eq("user_id", user_id).execute()),
        ("storage files", lambda: _remove_stored_audio(db, user_id)),
    ]
    for name, step in steps:
        try:
            step()
        except Exception:
            logger.exception("Error deleting %s for user %s", name, user_id)

    try:
        db.auth.admin.delete_user(user_id)
    except Exception as exc:
        logger.exception("Error deleting auth user %s", user_id)
        raise AccountDeletionError("Failed to delete user account") from exc

    logger.info("Successfully deleted account for user: %s", user_id)
