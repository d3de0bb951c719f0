"""Pydantic schemas for nickname requests and responses."""

from pydantic import BaseModel, Field


class ResolveNicknamesRequest(BaseModel):
    user_ids: list[str] = Field(default_factory=list, max_length=500)


class NicknameMapResponse(BaseModel):
    status: str = "success"
    data: dict[str, str]
