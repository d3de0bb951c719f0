"""Realtime insert subscriptions on top of Supabase channels."""

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Any

from meari.db.client import get_async_supabase

logger = logging.getLogger(__name__)

PayloadCallback = Callable[[dict[str, Any]], None]


def inserted_row(payload: dict[str, Any]) -> dict[str, Any] | None:
    """Pull the inserted record out of a postgres_changes payload."""
    data = payload.get("data")
    if isinstance(data, dict) and isinstance(data.get("record"), dict):
        return data["record"]
    for key in ("new", "record"):
        if isinstance(payload.get(key), dict):
            return payload[key]
    return None


class RealtimeSource(ABC):
    @abstractmethod
    async def subscribe_inserts(self, channel_name: str, *, table: str, filter: str, callback: PayloadCallback) -> Any:
        """Open a channel delivering INSERT payloads for table rows matching filter.

        Returns a handle to pass to unsubscribe().
        """
        ...

    @abstractmethod
    async def unsubscribe(self, handle: Any) -> None:
        ...


class SupabaseRealtimeSource(RealtimeSource):
    """Production source backed by the async Supabase client."""

    async def subscribe_inserts(self, channel_name: str, *, table: str, filter: str, callback: PayloadCallback) -> Any:
        client = await get_async_supabase()
        channel = client.channel(channel_name)
        channel.on_postgres_changes("INSERT", callback=callback, schema="public", table=table, filter=filter)

        def on_status(status, err=None):
            if err:
                logger.warning("Realtime channel %s status %s: %s", channel_name, status, err)
            else:
                logger.info("Realtime channel %s status %s", channel_name, status)

        await channel.subscribe(on_status)
        return channel

    async def unsubscribe(self, handle: Any) -> None:
        client = await get_async_supabase()
        await client.remove_channel(handle)
