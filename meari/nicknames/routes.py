"""Nickname endpoints: batch resolution, single lookup, own display name."""

from fastapi import APIRouter, Depends

from meari.auth.dependencies import CurrentUser, get_current_user
from meari.db.client import get_supabase
from meari.nicknames.resolver import NicknameResolver
from meari.nicknames.schemas import NicknameMapResponse, ResolveNicknamesRequest
from meari.profiles.repository import get_my_nickname

router = APIRouter(prefix="/api/v1/nicknames", tags=["Nicknames"])


@router.post(
    "/resolve",
    response_model=NicknameMapResponse,
    summary="Resolve nicknames",
    description="Map user ids to the caller's private nicknames for them, creating missing ones in one batch.",
)
async def resolve(body: ResolveNicknamesRequest, user: CurrentUser = Depends(get_current_user)):
    resolver = NicknameResolver(get_supabase(), user.id)
    return NicknameMapResponse(data=resolver.resolve_nicknames(body.user_ids))


@router.get("/me", summary="Own nickname", description="The caller's own display name from their profile.")
async def me(user: CurrentUser = Depends(get_current_user)):
    return {"status": "success", "data": {"nickname": get_my_nickname(get_supabase(), user.id)}}


@router.get("/{user_id}", summary="Nickname for one user")
async def get_one(user_id: str, user: CurrentUser = Depends(get_current_user)):
    resolver = NicknameResolver(get_supabase(), user.id)
    return {"status": "success", "data": {"user_id": user_id, "nickname": resolver.get_nickname_for_user(user_id)}}
