"""Per-viewer nickname lookup with batched reads and writes.

Every viewer privately labels the people they talk to. A label is created the
first time the viewer sees a counterpart and never changes afterwards. Lists
can reference dozens of counterparts, so resolution is done for a whole set
at once: one read for the labels that exist, one insert for the ones that
don't. When the insert fails (typically because a concurrent request already
labelled one of the ids) every id of that batch gets ANONYMOUS_NICKNAME for
this response; the next call reads whatever was stored.
"""

import logging
from collections.abc import Iterable

from postgrest.exceptions import APIError
from supabase import Client

from meari.db.models import ANONYMOUS_NICKNAME, USER_NICKNAMES
from meari.nicknames.generator import generate_random_nickname

logger = logging.getLogger(__name__)


class NicknameResolver:
    def __init__(self, db: Client, assigner_id: str | None):
        self._db = db
        self.assigner_id = assigner_id

    def resolve_nicknames(self, target_ids: Iterable[str]) -> dict[str, str]:
        """Map every id in target_ids to the viewer's nickname for it.

        Issues one read and at most one write regardless of how many ids are
        passed. The result always has a key for each distinct id.
        """
        unique_ids = list(dict.fromkeys(target_ids))
        if not unique_ids:
            return {}
        if not self.assigner_id:
            return dict.fromkeys(unique_ids, ANONYMOUS_NICKNAME)

        try:
            existing = (
                self._db.table(USER_NICKNAMES)
                .select("target_id, nickname")
                .eq("assigner_id", self.assigner_id)
                .in_("target_id", unique_ids)
                .execute()
            )
        except APIError as exc:
            logger.warning("Nickname lookup failed for assigner %s: %s", self.assigner_id, exc.message)
            return dict.fromkeys(unique_ids, ANONYMOUS_NICKNAME)

        nicknames = {row["target_id"]: row["nickname"] for row in existing.data}
        missing = [target_id for target_id in unique_ids if target_id not in nicknames]

        if missing:
            nicknames.update(self._create(missing))

        return {target_id: nicknames.get(target_id, ANONYMOUS_NICKNAME) for target_id in unique_ids}

    def get_nickname_for_user(self, target_id: str) -> str:
        """Single-target variant used when one chat room is opened."""
        if not self.assigner_id:
            return ANONYMOUS_NICKNAME

        try:
            existing = (
                self._db.table(USER_NICKNAMES)
                .select("nickname")
                .eq("assigner_id", self.assigner_id)
                .eq("target_id", target_id)
                .limit(1)
                .execute()
            )
        except APIError as exc:
            logger.warning("Nickname lookup failed for %s -> %s: %s", self.assigner_id, target_id, exc.message)
            return ANONYMOUS_NICKNAME

        if existing.data:
            return existing.data[0]["nickname"]
        return self._create([target_id])[target_id]

    def _create(self, target_ids: list[str]) -> dict[str, str]:
        rows = [
            {"assigner_id": self.assigner_id, "target_id": target_id, "nickname": generate_random_nickname()}
            for target_id in target_ids
        ]
        try:
            inserted = self._db.table(USER_NICKNAMES).insert(rows).execute()
        except APIError as exc:
            logger.warning(
                "Could not create %d nickname(s) for assigner %s: %s",
                len(rows), self.assigner_id, exc.message,
            )
            return dict.fromkeys(target_ids, ANONYMOUS_NICKNAME)

        created = {row["target_id"]: row["nickname"] for row in inserted.data}
        return {target_id: created.get(target_id, ANONYMOUS_NICKNAME) for target_id in target_ids}
