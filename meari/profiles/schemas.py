"""Pydantic schemas for profile settings."""

from pydantic import BaseModel


class UpdateSettingsRequest(BaseModel):
    echo_enabled: bool | None = None
    receive_messages: bool | None = None


class SettingsResponse(BaseModel):
    username: str | None = None
    echo_enabled: bool
    receive_messages: bool
