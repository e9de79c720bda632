import logging
from dataclasses import dataclass
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from superfocus.supabase_config import get_supabase_anon_client
from .errors import AuthenticationError, UpstreamError

logger = logging.getLogger("superfocus.auth")

# Security scheme; missing headers are turned into our own 401 below
security = HTTPBearer(auto_error=False)


@dataclass
class AuthenticatedUser:
    id: str
    email: Optional[str] = None


def verify_token(token: str) -> AuthenticatedUser:
    """Verify a Supabase access token and return the user it belongs to."""
    try:
        supabase = get_supabase_anon_client()
    except ValueError as e:
        logger.error(f"[Auth] ❌ Supabase not configured: {e}")
        raise UpstreamError("Authentication service unavailable") from e

    try:
        response = supabase.auth.get_user(token)
    except Exception as e:
        logger.warning(f"[Auth] ⚠️ Token rejected: {type(e).__name__}")
        raise AuthenticationError() from e

    user = getattr(response, "user", None)
    if user is None or not getattr(user, "id", None):
        raise AuthenticationError()

    return AuthenticatedUser(id=str(user.id), email=getattr(user, "email", None))


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> AuthenticatedUser:
    """Get current authenticated user from the bearer token."""
    if credentials is None or not credentials.credentials:
        logger.warning("[Auth] ⚠️ Unauthorized access attempt (no bearer token)")
        raise AuthenticationError()

    return verify_token(credentials.credentials)
