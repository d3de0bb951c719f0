"""In-memory sliding window rate limiter keyed by caller."""

import time
from collections import defaultdict

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from meari.auth.dependencies import extract_bearer_token
from meari.auth.jwt import token_subject
from meari.config.settings import get_settings

EXEMPT_PATHS = {"/health", "/docs", "/redoc", "/openapi.json"}


class RateLimiterMiddleware(BaseHTTPMiddleware):
    def __init__(self, app):
        super().__init__(app)
        # caller key -> list of request timestamps
        self._standard_windows: dict[str, list[float]] = defaultdict(list)
        self._upload_windows: dict[str, list[float]] = defaultdict(list)

    def _is_upload_path(self, path: str) -> bool:
        parts = path.rstrip("/").split("/")
        # /api/v1/messages/broadcast
        if parts[1:5] == ["api", "v1", "messages", "broadcast"]:
            return True
        # /api/v1/chats/<user_id>/messages
        if len(parts) == 6 and parts[1:4] == ["api", "v1", "chats"] and parts[5] == "messages":
            return True
        return False

    def _caller_key(self, request: Request) -> str | None:
        token = extract_bearer_token(request)
        if token:
            user_id = token_subject(token)
            if user_id:
                return f"user:{user_id}"
        if request.client:
            return f"ip:{request.client.host}"
        return None

    def _check_limit(self, window: list[float], limit: int, now: float) -> tuple[bool, int]:
        """Remove expired entries, check if under limit. Returns (allowed, retry_after_seconds)."""
        cutoff = now - 60.0
        while window and window[0] < cutoff:
            window.pop(0)

        if len(window) >= limit:
            retry_after = int(window[0] - cutoff) + 1
            return False, retry_after

        window.append(now)
        return True, 0

    def _limited(self, message: str, retry_after: int) -> Response:
        return Response(
            content=f'{{"status":"error","error":{{"type":"rate_limit","message":"{message}"}}}}',
            status_code=429,
            headers={"Retry-After": str(retry_after), "Content-Type": "application/json"},
        )

    async def dispatch(self, request: Request, call_next) -> Response:
        if request.url.path in EXEMPT_PATHS or request.method == "OPTIONS":
            return await call_next(request)

        key = self._caller_key(request)
        if not key:
            return await call_next(request)

        settings = get_settings()
        now = time.time()

        if request.method == "POST" and self._is_upload_path(request.url.path):
            allowed, retry_after = self._check_limit(self._upload_windows[key], settings.RATE_LIMIT_UPLOAD, now)
            if not allowed:
                return self._limited("Upload rate limit exceeded", retry_after)

        allowed, retry_after = self._check_limit(self._standard_windows[key], settings.RATE_LIMIT_STANDARD, now)
        if not allowed:
            return self._limited("Rate limit exceeded", retry_after)

        return await call_next(request)
