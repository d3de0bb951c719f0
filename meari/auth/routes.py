"""Auth endpoints: invite-only registration, login, token refresh.

Passwords, sessions and tokens belong to Supabase Auth; these endpoints
validate input locally and forward to it.
"""

import logging

from fastapi import APIRouter, HTTPException
from postgrest.exceptions import APIError
from pydantic import BaseModel

from meari.db.client import create_anon_client, get_supabase
from meari.invites import repository as invites
from meari.nicknames.generator import generate_random_nickname
from meari.profiles.repository import upsert_profile
from meari.utils.validators import validate_email, validate_password

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/auth", tags=["Auth"])


# --- Request / Response schemas ---

class RegisterRequest(BaseModel):
    email: str
    password: str
    invite_code: str

class LoginRequest(BaseModel):
    email: str
    password: str

class RefreshRequest(BaseModel):
    refresh_token: str

class TokenResponse(BaseModel):
    status: str = "success"
    data: dict


# --- Helpers ---

def _normalize_email(email: str) -> str:
    email = email.strip().lower()
    if not validate_email(email):
        raise HTTPException(status_code=400, detail="Please enter a valid email address")
    return email


def _token_pair(session) -> dict:
    if session is None:
        raise HTTPException(status_code=401, detail="No session was issued")
    return {
        "access_token": session.access_token,
        "refresh_token": session.refresh_token,
        "token_type": "bearer",
    }


# --- Endpoints ---

@router.post("/register", status_code=201, summary="Register with an invite code", description="Create an account. The invite code is consumed and provides the new user's nickname.")
async def register(body: RegisterRequest):
    email = _normalize_email(body.email)
    password_error = validate_password(body.password)
    if password_error:
        raise HTTPException(status_code=400, detail=password_error)
    code = body.invite_code.strip()
    if not code:
        raise HTTPException(status_code=400, detail="Invite code is required")

    db = get_supabase()

    invite = invites.claim(db, code)
    if not invite:
        raise HTTPException(status_code=400, detail="Invalid or already used invite code")

    nickname = invite.get("nickname") or generate_random_nickname()
    try:
        created = db.auth.admin.create_user({
            "email": email,
            "password": body.password,
            "email_confirm": True,
            "user_metadata": {"username": nickname},
        })
    except Exception:
        logger.exception("Account creation failed for invite %s", code)
        invites.release(db, code)
        raise HTTPException(status_code=400, detail="Could not create account")

    user_id = created.user.id
    # The account exists from here on; follow-up writes must not fail the request
    try:
        invites.attach_user(db, code, user_id)
    except APIError as exc:
        logger.warning("Could not attach invite %s to user %s: %s", code, user_id, exc.message)
    try:
        upsert_profile(db, user_id, {"username": nickname, "echo_enabled": True, "receive_messages": True})
    except APIError as exc:
        logger.warning("Could not create profile for user %s: %s", user_id, exc.message)
    logger.info("Registered user %s with invite %s", user_id, code)

    return {"status": "success", "data": {"user_id": user_id, "email": email, "nickname": nickname}}


@router.post("/login", response_model=TokenResponse, summary="Login", description="Authenticate with email and password, returns Supabase access and refresh tokens.")
async def login(body: LoginRequest):
    email = _normalize_email(body.email)
    if not body.password or len(body.password) < 6:
        raise HTTPException(status_code=400, detail="Password must be at least 6 characters long")

    try:
        result = create_anon_client().auth.sign_in_with_password({"email": email, "password": body.password})
    except Exception:
        raise HTTPException(status_code=401, detail="Invalid email or password")

    return TokenResponse(data=_token_pair(result.session))


@router.post("/refresh", response_model=TokenResponse, summary="Refresh access token", description="Exchange a refresh token for a new token pair.")
async def refresh(body: RefreshRequest):
    try:
        result = create_anon_client().auth.refresh_session(body.refresh_token)
    except Exception:
        raise HTTPException(status_code=401, detail="Invalid or expired refresh token")

    return TokenResponse(data=_token_pair(result.session))
