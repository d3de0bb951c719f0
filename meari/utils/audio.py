"""Audio helpers: file naming and duration formatting."""

import time
import uuid

# Content type (without codec parameters) -> stored file extension
AUDIO_EXTENSIONS = {
    "audio/webm": "webm",
    "audio/ogg": "ogg",
    "audio/wav": "wav",
    "audio/x-wav": "wav",
    "audio/mpeg": "mp3",
    "audio/mp3": "mp3",
    "audio/mp4": "m4a",
    "audio/m4a": "m4a",
    "audio/x-m4a": "m4a",
}


def base_content_type(content_type: str | None) -> str:
    """'audio/webm;codecs=opus' -> 'audio/webm'."""
    return (content_type or "").split(";", 1)[0].strip().lower()


def extension_for(content_type: str | None) -> str:
    return AUDIO_EXTENSIONS.get(base_content_type(content_type), "webm")


def create_secure_file_name(user_id: str, extension: str = "webm") -> str:
    """Storage path under the owner's folder, unguessable and unique."""
    timestamp = int(time.time() * 1000)
    return f"{user_id}/{uuid.uuid4()}_{timestamp}.{extension}"


def format_time(seconds: float) -> str:
    mins = int(seconds // 60)
    secs = int(seconds % 60)
    return f"{mins}:{secs:02d}"
