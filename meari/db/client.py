"""Supabase client accessors.

The sync client handles every table, storage and auth call. The async client
exists only because realtime channels need an event loop.
"""

from supabase import AsyncClient, Client, acreate_client, create_client

from meari.config.settings import get_settings

_client: Client | None = None
_async_client: AsyncClient | None = None


def get_supabase() -> Client:
    """Service-role client shared by the whole process."""
    global _client
    if _client is None:
        settings = get_settings()
        _client = create_client(settings.SUPABASE_URL, settings.SUPABASE_SERVICE_ROLE_KEY)
    return _client


def create_anon_client() -> Client:
    """Fresh anon-key client for sign-in calls, which bind a user session to the client."""
    settings = get_settings()
    return create_client(settings.SUPABASE_URL, settings.SUPABASE_ANON_KEY)


async def get_async_supabase() -> AsyncClient:
    global _async_client
    if _async_client is None:
        settings = get_settings()
        _async_client = await acreate_client(settings.SUPABASE_URL, settings.SUPABASE_SERVICE_ROLE_KEY)
    return _async_client
