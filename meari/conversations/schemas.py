"""Pydantic schemas for conversation responses."""

from pydantic import BaseModel

from meari.messages.schemas import VoiceMessageResponse


class ChatPreview(BaseModel):
    user_id: str
    nickname: str
    last_message: VoiceMessageResponse
    unread_count: int


class ChatPreviewListResponse(BaseModel):
    status: str = "success"
    data: list[ChatPreview]


class RoomMessage(VoiceMessageResponse):
    is_sender: bool


class ChatRoom(BaseModel):
    user_id: str
    nickname: str
    messages: list[RoomMessage]
