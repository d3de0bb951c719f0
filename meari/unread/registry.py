"""Lookup of live trackers by user, so REST calls can reach open streams."""

from collections import defaultdict

from fastapi import Request

from meari.unread.tracker import UnreadTracker


class TrackerRegistry:
    def __init__(self):
        self._trackers: dict[str, set[UnreadTracker]] = defaultdict(set)

    def add(self, tracker: UnreadTracker) -> None:
        self._trackers[tracker.user_id].add(tracker)

    def discard(self, tracker: UnreadTracker) -> None:
        trackers = self._trackers.get(tracker.user_id)
        if trackers is None:
            return
        trackers.discard(tracker)
        if not trackers:
            del self._trackers[tracker.user_id]

    def for_user(self, user_id: str) -> list[UnreadTracker]:
        return list(self._trackers.get(user_id, ()))

    def mark_as_read(self, user_id: str) -> int:
        """Zero the count of every open stream of the user. Returns how many were reached."""
        trackers = self.for_user(user_id)
        for tracker in trackers:
            tracker.mark_as_read()
        return len(trackers)


def get_tracker_registry(request: Request) -> TrackerRegistry:
    return request.app.state.trackers
