"""Supabase client construction.

``create_supabase_client()`` builds a client from ``Settings``; services
receive it through their constructor.  ``get_supabase()`` is the
composition-root accessor used by the FastAPI dependencies, which keeps one
lazily-created client per process.
"""

from supabase import Client, create_client

from triagem.core.config import Settings, settings

_client: Client | None = None


def create_supabase_client(config: Settings | None = None) -> Client:
    """Create a new Supabase client from *config* (defaults to ``settings``)."""
    config = config or settings
    return create_client(config.SUPABASE_URL, config.SUPABASE_KEY)


def get_supabase() -> Client:
    """Return the application's Supabase client, creating it on first call."""
    global _client
    if _client is None:
        _client = create_supabase_client()
    return _client


def reset_supabase() -> None:
    """Drop the application client so the next call builds a fresh one."""
    global _client
    _client = None
