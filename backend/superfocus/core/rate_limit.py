"""
Per-identity rate limiting backed by Upstash Redis.

The counters live in Redis (sliding window, atomic per key); this module only
decides the key and turns a rejection into RateLimitExceeded before any
provider is called.
"""
import logging
import math
import time
from typing import Dict, Optional, Tuple

import jwt
from fastapi import Request
from upstash_ratelimit.asyncio import Ratelimit, SlidingWindow
from upstash_redis.asyncio import Redis

from .config import get_redis_token, get_redis_url, get_supabase_jwt_secret
from .errors import RateLimitExceeded

logger = logging.getLogger("superfocus.rate_limit")

# name -> (max requests, window in seconds)
LIMITS: Dict[str, Tuple[int, int]] = {
    "api": (10, 10),
    "checkout": (5, 60),
    "ai": (20, 60),
}


def get_limiter(name: str) -> Optional[Ratelimit]:
    url, token = get_redis_url(), get_redis_token()
    if not url or not token:
        return None

    max_requests, window = LIMITS[name]
    return Ratelimit(
        redis=Redis(url=url, token=token),
        limiter=SlidingWindow(max_requests=max_requests, window=window),
        prefix=f"ratelimit:{name}",
    )


def user_id_from_authorization(header: Optional[str]) -> Optional[str]:
    """
    Read `sub` from a bearer JWT signed with the Supabase JWT secret.

    Unsigned or forged tokens, and every token when no secret is configured,
    yield None so the caller is bucketed by IP instead.
    """
    secret = get_supabase_jwt_secret()
    if not secret or not header or not header.lower().startswith("bearer "):
        return None
    token = header[7:].strip()
    try:
        claims = jwt.decode(token, secret, algorithms=["HS256"], options={"verify_aud": False})
    except jwt.PyJWTError:
        return None
    subject = claims.get("sub")
    return str(subject) if subject else None


def get_identifier(request: Request) -> str:
    user_id = user_id_from_authorization(request.headers.get("authorization"))
    if user_id:
        return f"user:{user_id}"

    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return f"ip:{forwarded.split(',')[0].strip()}"
    real_ip = request.headers.get("x-real-ip")
    if real_ip:
        return f"ip:{real_ip}"
    host = request.client.host if request.client else "127.0.0.1"
    return f"ip:{host}"


def _reset_seconds(reset: float) -> float:
    # Upstash reports milliseconds on some versions and seconds on others
    return reset / 1000 if reset > 1e11 else reset


class RateLimit:
    """FastAPI dependency: `Depends(RateLimit("ai"))`."""

    def __init__(self, name: str):
        if name not in LIMITS:
            raise ValueError(f"Unknown rate limiter: {name}")
        self.name = name

    async def __call__(self, request: Request) -> None:
        limiter = get_limiter(self.name)
        if limiter is None:
            logger.debug(f"[RateLimit] {self.name}: Redis not configured, skipping")
            return

        identifier = get_identifier(request)
        try:
            result = await limiter.limit(identifier)
        except Exception as e:
            # Redis outage: let the request through rather than take the API down
            logger.error(f"[RateLimit] ❌ {self.name} check failed for {identifier}: {e}")
            return

        if not result.allowed:
            reset = _reset_seconds(float(result.reset))
            retry_after = max(0, math.ceil(reset - time.time()))
            logger.warning(f"[RateLimit] ⚠️ {self.name} limit hit for {identifier}")
            raise RateLimitExceeded(limit=int(result.limit), reset=reset, retry_after=retry_after)


rate_limit_api = RateLimit("api")
rate_limit_ai = RateLimit("ai")
rate_limit_checkout = RateLimit("checkout")
