"""Conversation list and chat room assembly."""

from supabase import Client

from meari.conversations import repository
from meari.messages.service import with_duration_label
from meari.nicknames.resolver import NicknameResolver


def list_chat_previews(db: Client, user_id: str) -> list[dict]:
    """One preview per counterpart: latest message, nickname, unread count.

    Nicknames and unread markers are each fetched in one batch for the whole list.
    """
    messages = repository.list_direct_messages(db, user_id)

    previews: dict[str, dict] = {}
    incoming: dict[str, str] = {}  # message id -> sender id
    for message in messages:
        is_sender = message["sender_id"] == user_id
        other_id = message["recipient_id"] if is_sender else message["sender_id"]
        if not other_id:
            continue
        if not is_sender:
            incoming[message["id"]] = other_id
        # Rows come newest first, so the first one seen is the latest
        if other_id not in previews:
            previews[other_id] = {
                "user_id": other_id,
                "last_message": with_duration_label(message),
                "unread_count": 0,
            }

    for message_id in repository.list_unread_message_ids(db, user_id, list(incoming)):
        previews[incoming[message_id]]["unread_count"] += 1

    nicknames = NicknameResolver(db, user_id).resolve_nicknames(list(previews))
    for other_id, preview in previews.items():
        preview["nickname"] = nicknames[other_id]
    return list(previews.values())


def get_chat_room(db: Client, user_id: str, other_id: str) -> dict:
    messages = repository.list_room_messages(db, user_id, other_id)
    nickname = NicknameResolver(db, user_id).get_nickname_for_user(other_id)
    return {
        "user_id": other_id,
        "nickname": nickname,
        "messages": [
            {**with_duration_label(m), "is_sender": m["sender_id"] == user_id}
            for m in messages
        ],
    }
