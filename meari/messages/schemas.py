"""Pydantic schemas for voice message responses."""

from enum import Enum

from pydantic import BaseModel


class VoiceEffect(str, Enum):
    """Label picked at send time. Stored with the message; the audio is never altered."""

    NORMAL = "normal"
    WHISPER = "whisper"
    COZY = "cozy"
    VINTAGE = "vintage"
    WARM = "warm"
    BREEZE = "breeze"
    CAVE = "cave"


EFFECT_NAMES = {
    VoiceEffect.NORMAL: "기본 목소리",
    VoiceEffect.WHISPER: "속삭임",
    VoiceEffect.COZY: "작은 방",
    VoiceEffect.VINTAGE: "옛 라디오",
    VoiceEffect.WARM: "따스하게",
    VoiceEffect.BREEZE: "바람 소리",
    VoiceEffect.CAVE: "동굴",
}


class VoiceMessageResponse(BaseModel):
    id: str
    sender_id: str
    recipient_id: str | None = None
    audio_url: str
    duration: float
    duration_label: str | None = None
    title: str | None = None
    message_type: str | None = None
    voice_effect: str | None = None
    created_at: str


class InboxItem(VoiceMessageResponse):
    listened: bool
    sender_username: str | None = None


class MessageListResponse(BaseModel):
    status: str = "success"
    data: list[VoiceMessageResponse]
    page: int
    per_page: int
    total: int


class InboxResponse(BaseModel):
    status: str = "success"
    data: list[InboxItem]
    page: int
    per_page: int
    total: int
