"""
Supabase configuration for auth checks and profile storage
"""
from supabase import create_client, Client

from superfocus.core.config import get_supabase_anon_key, get_supabase_service_key, get_supabase_url


def _require_url() -> str:
    url = get_supabase_url()
    if not url:
        raise ValueError("NEXT_PUBLIC_SUPABASE_URL environment variable is required")
    return url


def get_supabase_client() -> Client:
    """Get Supabase client with service role key (bypasses RLS, server side only)"""
    service_key = get_supabase_service_key()
    if not service_key:
        raise ValueError("SUPABASE_SERVICE_ROLE_KEY environment variable is required")

    return create_client(_require_url(), service_key)


def get_supabase_anon_client() -> Client:
    """Get Supabase client with anon key (used to verify user access tokens)"""
    anon_key = get_supabase_anon_key()
    if not anon_key:
        raise ValueError("NEXT_PUBLIC_SUPABASE_ANON_KEY environment variable is required")

    return create_client(_require_url(), anon_key)
