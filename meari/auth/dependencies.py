"""Auth dependencies for FastAPI route injection."""

from dataclasses import dataclass

from fastapi import HTTPException, Request

from meari.auth.jwt import verify_token


@dataclass
class CurrentUser:
    id: str
    email: str


def extract_bearer_token(request: Request) -> str | None:
    auth = request.headers.get("Authorization")
    if auth and auth.startswith("Bearer "):
        return auth[7:]
    return None


def _extract_query_token(request: Request) -> str | None:
    # EventSource can't send headers, so the notification stream passes the token here
    return request.query_params.get("access_token")


async def get_current_user(request: Request) -> CurrentUser:
    """FastAPI dependency: authenticate via a Supabase access token."""
    token = extract_bearer_token(request) or _extract_query_token(request)
    if not token:
        raise HTTPException(status_code=401, detail="Missing authentication credentials")

    try:
        payload = verify_token(token)
    except Exception:
        raise HTTPException(status_code=401, detail="Invalid or expired token")

    user_id = payload.get("sub")
    if not user_id:
        raise HTTPException(status_code=401, detail="Invalid token subject")

    request.state.user_id = user_id
    return CurrentUser(id=user_id, email=payload.get("email", ""))
