"""Unread-count state and its reducer.

The reducer is pure: it never reads the database and never notifies anyone.
Side effects subscribe to the transitions it produces (see tracker.py).
"""

from dataclasses import dataclass, replace
from enum import Enum


class TrackerStatus(str, Enum):
    UNINITIALIZED = "uninitialized"
    SUBSCRIBED = "subscribed"
    UNSUBSCRIBED = "unsubscribed"


@dataclass(frozen=True)
class UnreadState:
    status: TrackerStatus = TrackerStatus.UNINITIALIZED
    count: int = 0


@dataclass(frozen=True)
class Subscribed:
    pass


@dataclass(frozen=True)
class Refreshed:
    count: int


@dataclass(frozen=True)
class MarkerInserted:
    message_id: str | None = None


@dataclass(frozen=True)
class MarkedRead:
    pass


@dataclass(frozen=True)
class Unsubscribed:
    pass


UnreadEvent = Subscribed | Refreshed | MarkerInserted | MarkedRead | Unsubscribed


def reduce(state: UnreadState, event: UnreadEvent) -> UnreadState:
    """Apply one event. Anything not listed here leaves the state untouched.

    Only a subscribed tracker can be unsubscribed; Unsubscribed from
    UNINITIALIZED is a no-op.
    """
    if state.status == TrackerStatus.UNINITIALIZED:
        if isinstance(event, Subscribed):
            return replace(state, status=TrackerStatus.SUBSCRIBED)
        return state

    if state.status != TrackerStatus.SUBSCRIBED:
        return state

    if isinstance(event, Unsubscribed):
        return replace(state, status=TrackerStatus.UNSUBSCRIBED)
    if isinstance(event, Refreshed):
        return replace(state, count=max(event.count, 0))
    if isinstance(event, MarkerInserted):
        return replace(state, count=state.count + 1)
    if isinstance(event, MarkedRead):
        return replace(state, count=0)
    return state
