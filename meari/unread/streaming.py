"""SSE event formatting for the notification stream."""

import json


def _sse(event: str, data: dict) -> str:
    return f"event: {event}\ndata: {json.dumps(data, ensure_ascii=False)}\n\n"


def format_unread_count(count: int) -> str:
    return _sse("unread_count", {"type": "unread_count", "count": count})


def format_toast(title: str, description: str, message_id: str | None = None) -> str:
    return _sse("toast", {"type": "toast", "title": title, "description": description, "message_id": message_id})


def format_os_notification(title: str, body: str, icon: str, message_id: str | None = None) -> str:
    return _sse(
        "os_notification",
        {"type": "os_notification", "title": title, "body": body, "icon": icon, "badge": icon, "message_id": message_id},
    )


def format_keepalive() -> str:
    return ": keep-alive\n\n"
