"""Verification of Supabase-issued access tokens."""

import jwt

from meari.config.settings import get_settings


def verify_token(token: str) -> dict:
    """Decode and validate a Supabase access token.

    Raises jwt.ExpiredSignatureError or jwt.InvalidTokenError.
    """
    settings = get_settings()
    return jwt.decode(
        token,
        settings.SUPABASE_JWT_SECRET,
        algorithms=["HS256"],
        audience=settings.JWT_AUDIENCE,
    )


def token_subject(token: str) -> str | None:
    """Return the user id of a valid token, or None."""
    try:
        return verify_token(token).get("sub")
    except jwt.InvalidTokenError:
        return None
