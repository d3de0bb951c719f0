"""Side effects of unread-state transitions.

Each class is a tracker listener. They push preformatted SSE chunks through
an emit callable, usually the put_nowait of the stream's outbox queue.
"""

from collections.abc import Callable

from meari.config.settings import Settings
from meari.unread.state import MarkerInserted, UnreadEvent, UnreadState
from meari.unread.streaming import format_os_notification, format_toast, format_unread_count

Emit = Callable[[str], None]


class UnreadCountPublisher:
    """Badge updates: one event per count change."""

    def __init__(self, emit: Emit):
        self._emit = emit

    def __call__(self, previous: UnreadState, current: UnreadState, event: UnreadEvent) -> None:
        if current.count != previous.count:
            self._emit(format_unread_count(current.count))


class ToastNotifier:
    """In-app toast for every newly arrived message."""

    def __init__(self, emit: Emit, settings: Settings):
        self._emit = emit
        self._title = settings.NOTIFICATION_TITLE
        self._body = settings.NOTIFICATION_BODY

    def __call__(self, previous: UnreadState, current: UnreadState, event: UnreadEvent) -> None:
        if isinstance(event, MarkerInserted):
            self._emit(format_toast(self._title, self._body, event.message_id))


class OSNotifier:
    """OS-level notification; only attached when the browser granted permission."""

    def __init__(self, emit: Emit, settings: Settings):
        self._emit = emit
        self._title = settings.NOTIFICATION_TITLE
        self._body = settings.NOTIFICATION_BODY
        self._icon = settings.NOTIFICATION_ICON

    def __call__(self, previous: UnreadState, current: UnreadState, event: UnreadEvent) -> None:
        if isinstance(event, MarkerInserted):
            self._emit(format_os_notification(self._title, self._body, self._icon, event.message_id))
