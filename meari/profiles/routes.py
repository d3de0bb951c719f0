"""Settings endpoints: echo and message-receive toggles."""

from fastapi import APIRouter, Depends

from meari.auth.dependencies import CurrentUser, get_current_user
from meari.db.client import get_supabase
from meari.profiles.schemas import SettingsResponse, UpdateSettingsRequest
from meari.profiles.service import get_user_settings, update_user_settings

router = APIRouter(prefix="/api/v1/settings", tags=["Settings"])


@router.get("", summary="Get settings", description="Return the caller's echo and message-receive preferences.")
async def get(user: CurrentUser = Depends(get_current_user)):
    data = get_user_settings(get_supabase(), user.id)
    return {"status": "success", "data": SettingsResponse(**data)}


@router.patch("", summary="Update settings", description="Upsert the caller's profile preferences. Omitted fields are left unchanged.")
async def patch(body: UpdateSettingsRequest, user: CurrentUser = Depends(get_current_user)):
    data = update_user_settings(get_supabase(), user.id, body.model_dump())
    return {"status": "success", "data": SettingsResponse(**data)}
