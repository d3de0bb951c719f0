"""Meari API: FastAPI application entry point."""

import logging

from fastapi import FastAPI

from meari.auth.routes import router as auth_router
from meari.config.cors import SecurityHeadersMiddleware, configure_cors
from meari.config.settings import get_settings
from meari.conversations.routes import router as chats_router
from meari.functions.routes import router as functions_router
from meari.messages.routes import router as messages_router
from meari.middleware.error_handler import register_error_handlers
from meari.middleware.rate_limiter import RateLimiterMiddleware
from meari.middleware.request_id import RequestIDMiddleware
from meari.nicknames.routes import router as nicknames_router
from meari.profiles.routes import router as settings_router
from meari.unread.registry import TrackerRegistry
from meari.unread.routes import router as notifications_router

logging.basicConfig(
    level=get_settings().LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(
    title="Meari API",
    description=(
        "Voice messaging backend: record a short clip, echo it to everyone or send it to one person.\n\n"
        "## Features\n"
        "- Broadcast (echo) and direct voice messages stored in Supabase\n"
        "- Private per-viewer nicknames resolved in batches\n"
        "- Live unread badge and new-message notifications over SSE\n"
        "- Invite-only registration\n"
        "- Account deletion and audio validation functions\n\n"
        "## Authentication\n"
        "All endpoints (except `/health`, `/docs`, `/api/v1/auth/*`, `/functions/v1/validate-audio`) "
        "require a Supabase access token: `Authorization: Bearer <jwt>`."
    ),
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_tags=[
        {"name": "Health", "description": "Health check endpoints"},
        {"name": "Auth", "description": "Invite-only registration, login, token refresh"},
        {"name": "Messages", "description": "Send broadcasts, list feeds, mark messages listened"},
        {"name": "Chats", "description": "One-to-one conversations"},
        {"name": "Nicknames", "description": "Private nicknames for conversation partners"},
        {"name": "Notifications", "description": "Unread count and live notification stream"},
        {"name": "Settings", "description": "Echo and message-receive preferences"},
        {"name": "Functions", "description": "Account deletion and audio validation"},
    ],
)

# Live unread trackers of open notification streams
app.state.trackers = TrackerRegistry()

# --- Middleware (order matters: outermost first) ---
app.add_middleware(RequestIDMiddleware)
app.add_middleware(SecurityHeadersMiddleware)
configure_cors(app)
app.add_middleware(RateLimiterMiddleware)

# --- Error handlers ---
register_error_handlers(app)

# --- Routes ---
app.include_router(auth_router)
app.include_router(messages_router)
app.include_router(chats_router)
app.include_router(nicknames_router)
app.include_router(notifications_router)
app.include_router(settings_router)
app.include_router(functions_router)


@app.get("/health", tags=["Health"], summary="Health check", description="Returns OK if the service is running.")
async def health_check():
    return {"status": "ok"}
