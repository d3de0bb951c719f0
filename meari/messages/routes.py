"""Voice message endpoints: broadcast send, feeds, listened markers."""

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile

from meari.auth.dependencies import CurrentUser, get_current_user
from meari.db.client import get_supabase
from meari.messages.schemas import EFFECT_NAMES, InboxResponse, MessageListResponse, VoiceEffect
from meari.messages.service import list_broadcasts, list_inbox, mark_listened, send_voice_message
from meari.messages.validation import read_audio
from meari.unread.registry import TrackerRegistry, get_tracker_registry

router = APIRouter(prefix="/api/v1/messages", tags=["Messages"])


@router.post(
    "/broadcast",
    status_code=201,
    summary="Echo a voice message",
    description="Upload a recording and broadcast it to every user. The voice effect is stored as a label only.",
)
async def broadcast(
    audio: UploadFile = File(...),
    duration: float = Form(...),
    voice_effect: VoiceEffect = Form(VoiceEffect.NORMAL),
    title: str | None = Form(None),
    user: CurrentUser = Depends(get_current_user),
):
    data = await read_audio(audio)
    message = send_voice_message(
        get_supabase(), user.id, data, duration, audio.content_type,
        voice_effect=voice_effect, title=title,
    )
    return {"status": "success", "data": {**message, "voice_effect_name": EFFECT_NAMES[voice_effect]}}


@router.get("/broadcasts", summary="List broadcasts", description="Broadcast messages, newest first, paginated.")
async def broadcasts(
    page: int = Query(1, ge=1),
    per_page: int = Query(20, ge=1, le=100),
    user: CurrentUser = Depends(get_current_user),
):
    messages, total = list_broadcasts(get_supabase(), page, per_page)
    return MessageListResponse(data=messages, page=page, per_page=per_page, total=total)


@router.get("/inbox", summary="List received messages", description="Messages delivered to the caller with their listened state.")
async def inbox(
    page: int = Query(1, ge=1),
    per_page: int = Query(20, ge=1, le=100),
    user: CurrentUser = Depends(get_current_user),
):
    items, total = list_inbox(get_supabase(), user.id, page, per_page)
    return InboxResponse(data=items, page=page, per_page=per_page, total=total)


@router.post(
    "/{message_id}/listened",
    summary="Mark a message as listened",
    description="Record that the caller played the message and reset the unread badge of their open streams.",
)
async def listened(
    message_id: str,
    user: CurrentUser = Depends(get_current_user),
    registry: TrackerRegistry = Depends(get_tracker_registry),
):
    return {"status": "success", "data": mark_listened(get_supabase(), registry, user.id, message_id)}
