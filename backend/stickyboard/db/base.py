from __future__ import annotations

from functools import lru_cache

from supabase import Client, create_client
from supabase.lib.client_options import ClientOptions

from stickyboard.config import settings
from stickyboard.utils.logging import get_logger

logger = get_logger(__name__)


def _new_client(key: str, purpose: str) -> Client:
    if not key:
        raise RuntimeError(f"A Supabase key is required for the {purpose} client")
    # Server-side clients never keep or refresh a session of their own
    options = ClientOptions(auto_refresh_token=False, persist_session=False)
    return create_client(settings.supabase_url, key, options=options)


@lru_cache(maxsize=1)
def get_supabase_admin_client() -> Client:
    """Service-role client, shared by the process.

    Used for workspace seeding and demo resets, which act on a user's boards
    before (or after) that user holds a request-scoped session.
    """
    logger.debug("Initializing Supabase admin client")
    return _new_client(settings.supabase_service_role_key, "admin")


def create_request_supabase_client(bearer_token: str | None = None) -> Client:
    """Anon-key client for one request.

    With a JWT the PostgREST bearer is set, so the `boards` and `notes` RLS
    policies apply to every query made through it.
    """
    client = _new_client(settings.supabase_anon_key, "request")
    if bearer_token:
        client.postgrest.auth(bearer_token)
    return client
