"""Server-side functions: account deletion and audio validation.

Response bodies follow the function contracts the web client already
expects rather than the API's error envelope.
"""

import logging

from fastapi import APIRouter, Request
from starlette.datastructures import UploadFile
from starlette.responses import JSONResponse

from meari.auth.dependencies import extract_bearer_token
from meari.config.settings import get_settings
from meari.db.client import get_supabase
from meari.functions.delete_account import AccountDeletionError, delete_account
from meari.functions.validate_audio import MAX_FILE_SIZE, AudioValidationError, check_audio

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/functions/v1", tags=["Functions"])


@router.post("/delete-account", summary="Delete the caller's account and all of their data")
async def delete_account_function(request: Request):
    token = extract_bearer_token(request)
    if not token:
        return JSONResponse(status_code=401, content={"error": "No authorization header"})

    db = get_supabase()
    try:
        user = db.auth.get_user(token).user
    except Exception:
        logger.warning("User verification failed for delete-account")
        user = None
    if user is None:
        return JSONResponse(status_code=401, content={"error": "Unauthorized"})

    try:
        delete_account(db, user.id)
    except AccountDeletionError as exc:
        return JSONResponse(status_code=500, content={"error": str(exc)})

    return {"success": True}


@router.post("/validate-audio", summary="Check an audio file before upload")
async def validate_audio_function(request: Request):
    form = await request.form()
    audio = form.get("audio")
    if not isinstance(audio, UploadFile):
        return JSONResponse(status_code=400, content={"valid": False, "error": "No audio file provided"})

    try:
        duration = float(form.get("duration") or 0)
    except ValueError:
        return JSONResponse(status_code=400, content={"valid": False, "error": "Duration must be a number"})

    data = await audio.read(MAX_FILE_SIZE + 1)
    content_type = audio.content_type or ""
    try:
        check = check_audio(data, duration, content_type, get_settings().VALIDATE_AUDIO_MAX_DURATION)
    except AudioValidationError as exc:
        return JSONResponse(status_code=400, content={"valid": False, "error": str(exc)})

    return {"valid": True, "fileSize": check.file_size, "duration": check.duration, "type": check.content_type}
