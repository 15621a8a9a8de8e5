from functools import lru_cache
from typing import Optional
from supabase import Client, ClientOptions, create_client

from mealplanner.core.config import get_settings


def new_client(access_token: Optional[str] = None) -> Client:
    """Fresh client; with ``access_token`` its table requests run as that user, so row-level policies apply."""
    settings = get_settings()
    if not settings.SUPABASE_URL or not settings.SUPABASE_KEY:
        raise RuntimeError("SUPABASE_URL and SUPABASE_KEY must be set")
    if access_token:
        options = ClientOptions(headers={"Authorization": f"Bearer {access_token}"})
        return create_client(settings.SUPABASE_URL, settings.SUPABASE_KEY, options=options)
    return create_client(settings.SUPABASE_URL, settings.SUPABASE_KEY)


@lru_cache
def get_client() -> Client:
    """Shared anonymous client. Never sign in with it: its session would leak to other callers."""
    return new_client()


def client_for(access_token: Optional[str]) -> Client:
    return new_client(access_token) if access_token else get_client()
