"""Notification endpoints: unread count and the live SSE stream."""

import asyncio
import contextlib
import logging

from fastapi import APIRouter, Depends, Query, Request
from starlette.responses import StreamingResponse

from meari.auth.dependencies import CurrentUser, get_current_user
from meari.config.settings import get_settings
from meari.db.client import get_supabase
from meari.unread.notifier import OSNotifier, ToastNotifier, UnreadCountPublisher
from meari.unread.realtime import RealtimeSource, SupabaseRealtimeSource
from meari.unread.registry import TrackerRegistry, get_tracker_registry
from meari.unread.repository import fetch_unread_count
from meari.unread.streaming import format_keepalive, format_unread_count
from meari.unread.tracker import UnreadTracker

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/notifications", tags=["Notifications"])


def get_realtime_source() -> RealtimeSource:
    return SupabaseRealtimeSource()


@router.get("/unread", summary="Unread count", description="Re-derive the caller's unread message count from the database.")
async def unread(
    user: CurrentUser = Depends(get_current_user),
    registry: TrackerRegistry = Depends(get_tracker_registry),
):
    count = fetch_unread_count(get_supabase(), user.id)
    for tracker in registry.for_user(user.id):
        tracker.refresh()
    return {"status": "success", "data": {"count": count}}


@router.get(
    "/stream",
    summary="Notification stream",
    description=(
        "Server-Sent Events: `unread_count` on every badge change, `toast` on each new message, and "
        "`os_notification` when `notification_permission=granted`."
    ),
)
async def stream(
    request: Request,
    notification_permission: str = Query("default"),
    user: CurrentUser = Depends(get_current_user),
    registry: TrackerRegistry = Depends(get_tracker_registry),
    source: RealtimeSource = Depends(get_realtime_source),
):
    settings = get_settings()
    tracker = UnreadTracker(get_supabase(), user.id, source)
    outbox: asyncio.Queue[str] = asyncio.Queue()

    async def event_stream():
        await tracker.start()
        tracker.add_listener(UnreadCountPublisher(outbox.put_nowait))
        tracker.add_listener(ToastNotifier(outbox.put_nowait, settings))
        if notification_permission == "granted":
            tracker.add_listener(OSNotifier(outbox.put_nowait, settings))
        registry.add(tracker)
        consumer = asyncio.create_task(tracker.run())
        try:
            yield format_unread_count(tracker.count)
            while True:
                if await request.is_disconnected():
                    logger.info("Notification stream closed by client for user %s", user.id)
                    break
                try:
                    chunk = await asyncio.wait_for(outbox.get(), timeout=settings.SSE_KEEPALIVE_SECONDS)
                except asyncio.TimeoutError:
                    yield format_keepalive()
                    continue
                yield chunk
        finally:
            registry.discard(tracker)
            await tracker.stop()
            with contextlib.suppress(asyncio.CancelledError):
                await consumer

    return StreamingResponse(
        event_stream(),
        media_type="text/event-stream",
        headers={"Cache-Control": "no-cache", "Connection": "keep-alive", "X-Accel-Buffering": "no"},
    )
