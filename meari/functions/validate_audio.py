"""Content sanity checks for uploaded audio."""

import logging
import math
import re
from dataclasses import dataclass

from meari.utils.audio import base_content_type

logger = logging.getLogger(__name__)

MAX_FILE_SIZE = 10 * 1024 * 1024

# Leading bytes of the formats the recorder can produce
AUDIO_MAGIC_NUMBERS = {
    "webm": b"\x1a\x45\xdf\xa3",
    "mp3": b"\xff\xfb",
    "wav": b"RIFF",
    "ogg": b"OggS",
    "m4a": b"\x00\x00\x00\x20ftyp",
}

SUSPICIOUS_PATTERNS = [
    re.compile(rb"<script", re.I),
    re.compile(rb"javascript:", re.I),
    re.compile(rb"data:text/html", re.I),
    re.compile(rb"\x00{16}"),
    re.compile(rb"\xde\xad\xbe\xef"),
]

HEADER_SCAN_BYTES = 1000
PAYLOAD_SCAN_BYTES = 2048


class AudioValidationError(ValueError):
    pass


@dataclass(frozen=True)
class AudioCheck:
    file_size: int
    duration: float
    content_type: str
    format: str


def detect_format(data: bytes) -> str | None:
    for name, magic in AUDIO_MAGIC_NUMBERS.items():
        if data.startswith(magic):
            return name
    return None


def check_audio(data: bytes, duration: float, content_type: str, max_duration: float) -> AudioCheck:
    """Raise AudioValidationError describing the first failed check."""
    if len(data) > MAX_FILE_SIZE:
        raise AudioValidationError(f"File size exceeds {MAX_FILE_SIZE // 1024 // 1024}MB limit")
    if not math.isfinite(duration):
        raise AudioValidationError("Duration must be a finite number")
    if duration > max_duration:
        raise AudioValidationError(f"Duration exceeds {max_duration:g} seconds limit")

    audio_format = detect_format(data)
    # A real webm recording names its doctype or codec near the start
    if base_content_type(content_type) == "audio/webm":
        header = data[:HEADER_SCAN_BYTES]
        if b"webm" not in header and b"audio" not in header:
            audio_format = None
    if audio_format is None:
        raise AudioValidationError("Invalid audio file format or corrupted file")

    payload = data[:PAYLOAD_SCAN_BYTES]
    if any(pattern.search(payload) for pattern in SUSPICIOUS_PATTERNS):
        logger.warning("Suspicious content detected in audio file")
        raise AudioValidationError("File contains suspicious content")

    return AudioCheck(file_size=len(data), duration=duration, content_type=content_type, format=audio_format)
