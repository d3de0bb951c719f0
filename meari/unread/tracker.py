"""Live unread-message count for one signed-in user.

The tracker owns exactly one realtime subscription on
voice_message_recipients filtered to the user. Realtime callbacks only
enqueue; a single consumer (run()) applies events in arrival order.

Between events the count is maintained incrementally (+1 per insert, 0 on
read). It is re-derived from the database whenever the tracker starts, so a
reconnecting client resynchronises.
"""

import asyncio
import logging
import uuid
from collections.abc import Callable
from typing import Any

from supabase import Client

from meari.db.models import VOICE_MESSAGE_RECIPIENTS
from meari.profiles.repository import receive_messages_enabled
from meari.unread.realtime import RealtimeSource, inserted_row
from meari.unread.repository import fetch_unread_count
from meari.unread.state import (
    MarkedRead,
    MarkerInserted,
    Refreshed,
    Subscribed,
    TrackerStatus,
    UnreadEvent,
    UnreadState,
    Unsubscribed,
    reduce,
)

logger = logging.getLogger(__name__)

Listener = Callable[[UnreadState, UnreadState, UnreadEvent], None]

CHANNEL_PREFIX = "voice-message-notifications"

_STOP = object()


class UnreadTracker:
    def __init__(self, db: Client, user_id: str, source: RealtimeSource):
        self._db = db
        self.user_id = user_id
        self._source = source
        self._state = UnreadState()
        self._listeners: list[Listener] = []
        self._queue: asyncio.Queue = asyncio.Queue()
        self._handle: Any = None
        self._stopped = False

    @property
    def state(self) -> UnreadState:
        return self._state

    @property
    def count(self) -> int:
        return self._state.count

    def add_listener(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def _apply(self, event: UnreadEvent) -> None:
        previous = self._state
        self._state = reduce(previous, event)
        if self._state == previous:
            return
        for listener in self._listeners:
            try:
                listener(previous, self._state, event)
            except Exception:
                logger.exception("Unread listener failed for user %s", self.user_id)

    # --- Lifecycle ---

    async def start(self) -> None:
        if self._stopped or self._state.status != TrackerStatus.UNINITIALIZED:
            return
        self._handle = await self._source.subscribe_inserts(
            f"{CHANNEL_PREFIX}:{self.user_id}:{uuid.uuid4().hex[:8]}",
            table=VOICE_MESSAGE_RECIPIENTS,
            filter=f"recipient_id=eq.{self.user_id}",
            callback=self._on_payload,
        )
        self._apply(Subscribed())
        self.refresh()

    async def stop(self) -> None:
        if self._stopped:
            return
        self._stopped = True
        handle, self._handle = self._handle, None
        if handle is not None:
            try:
                await self._source.unsubscribe(handle)
            except Exception:
                logger.exception("Failed to remove realtime channel for user %s", self.user_id)
        self._apply(Unsubscribed())
        self._queue.put_nowait(_STOP)

    async def run(self) -> None:
        """Consume queued insert payloads until stop() is called."""
        while True:
            item = await self._queue.get()
            if item is _STOP:
                return
            self.handle_insert(item)

    def _on_payload(self, payload: dict[str, Any]) -> None:
        row = inserted_row(payload)
        if row is None:
            logger.debug("Ignoring realtime payload without a record: %s", payload)
            return
        self._queue.put_nowait(row)

    # --- Operations ---

    def refresh(self) -> None:
        """Re-derive the count from the database. Failures keep the old count."""
        try:
            count = fetch_unread_count(self._db, self.user_id)
        except Exception:
            logger.exception("Error fetching unread count for user %s", self.user_id)
            return
        self._apply(Refreshed(count))

    def mark_as_read(self) -> None:
        self._apply(MarkedRead())

    def handle_insert(self, row: dict[str, Any]) -> None:
        if row.get("recipient_id") != self.user_id:
            return
        # The preference may have changed since the stream opened
        try:
            enabled = receive_messages_enabled(self._db, self.user_id)
        except Exception:
            logger.exception("Error reading receive_messages for user %s", self.user_id)
            return
        if not enabled:
            logger.debug("User %s has messages disabled, ignoring marker %s", self.user_id, row.get("id"))
            return
        self._apply(MarkerInserted(message_id=row.get("message_id")))
