"""Single-use invite codes.

A code is consumed with one conditional UPDATE filtered on is_used = false.
Postgres re-checks the filter on the locked row, so when two requests race
for the same code exactly one of them gets the row back.
"""

from datetime import datetime, timezone

from supabase import Client

from meari.db.models import INVITE_CODES


def claim(db: Client, code: str) -> dict | None:
    """Atomically flip is_used for an unused code. Returns the row, or None if unavailable."""
    result = (
        db.table(INVITE_CODES)
        .update({"is_used": True, "used_at": datetime.now(timezone.utc).isoformat()})
        .eq("code", code)
        .eq("is_used", False)
        .execute()
    )
    return result.data[0] if result.data else None


def attach_user(db: Client, code: str, user_id: str) -> None:
    db.table(INVITE_CODES).update({"used_by": user_id}).eq("code", code).execute()


def release(db: Client, code: str) -> None:
    """Give back a claimed code whose account could not be created."""
    (
        db.table(INVITE_CODES)
        .update({"is_used": False, "used_at": None})
        .eq("code", code)
        .is_("used_by", "null")
        .execute()
    )
