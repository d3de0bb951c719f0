"""One-to-one chat endpoints."""

import uuid

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile

from meari.auth.dependencies import CurrentUser, get_current_user
from meari.conversations.schemas import ChatPreviewListResponse, ChatRoom
from meari.conversations.service import get_chat_room, list_chat_previews
from meari.db.client import get_supabase
from meari.messages.schemas import VoiceEffect
from meari.messages.service import send_voice_message
from meari.messages.validation import read_audio

router = APIRouter(prefix="/api/v1/chats", tags=["Chats"])


@router.get("", summary="List chats", description="One entry per conversation partner with the latest message and nickname.")
async def list_all(user: CurrentUser = Depends(get_current_user)):
    return ChatPreviewListResponse(data=list_chat_previews(get_supabase(), user.id))


@router.get("/{user_id}", summary="Open a chat room", description="Full message history with one user, oldest first.")
async def get(user_id: uuid.UUID, user: CurrentUser = Depends(get_current_user)):
    room = get_chat_room(get_supabase(), user.id, str(user_id))
    return {"status": "success", "data": ChatRoom(**room)}


@router.post("/{user_id}/messages", status_code=201, summary="Send a direct voice message")
async def send(
    user_id: uuid.UUID,
    audio: UploadFile = File(...),
    duration: float = Form(...),
    voice_effect: VoiceEffect = Form(VoiceEffect.NORMAL),
    title: str | None = Form(None),
    user: CurrentUser = Depends(get_current_user),
):
    recipient_id = str(user_id)
    if recipient_id == user.id:
        raise HTTPException(status_code=400, detail="You cannot send a message to yourself")
    data = await read_audio(audio)
    message = send_voice_message(
        get_supabase(), user.id, data, duration, audio.content_type,
        recipient_id=recipient_id, voice_effect=voice_effect, title=title,
    )
    return {"status": "success", "data": message}
