"""Local checks run on a recording before anything is uploaded."""

import math

from fastapi import HTTPException, UploadFile

from meari.config.settings import get_settings
from meari.utils.audio import base_content_type


async def read_audio(audio: UploadFile) -> bytes:
    """Read the upload, stopping one byte past the size limit."""
    return await audio.read(get_settings().MAX_AUDIO_BYTES + 1)


def validate_audio_upload(size: int, duration: float, content_type: str | None) -> None:
    """Raise a 400 describing the first check the clip fails."""
    settings = get_settings()

    if size <= 0:
        raise HTTPException(status_code=400, detail="Audio file is empty")
    if size > settings.MAX_AUDIO_BYTES:
        limit_mb = round(settings.MAX_AUDIO_BYTES / 1024 / 1024)
        raise HTTPException(status_code=400, detail=f"File size must be less than {limit_mb}MB")
    if not math.isfinite(duration):
        raise HTTPException(status_code=400, detail="Duration must be a finite number")
    if duration < 0:
        raise HTTPException(status_code=400, detail="Duration must not be negative")
    if duration > settings.MAX_AUDIO_DURATION:
        limit_min = round(settings.MAX_AUDIO_DURATION / 60)
        raise HTTPException(status_code=400, detail=f"Recording cannot be longer than {limit_min} minutes")
    if not base_content_type(content_type).startswith("audio/"):
        raise HTTPException(status_code=400, detail="Only audio files can be uploaded")
