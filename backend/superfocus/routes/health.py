import logging
import time
from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, Depends
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse
from fastapi.security import HTTPAuthorizationCredentials

from superfocus import __version__
from superfocus.core.auth import security, verify_token
from superfocus.core.config import (
    get_environment,
    get_stripe_secret_key,
    get_supabase_anon_key,
    get_supabase_url,
    missing_settings,
)
from superfocus.core.errors import SuperFocusError
from superfocus.services.profile_service import ProfileService
from superfocus.supabase_config import get_supabase_anon_client

logger = logging.getLogger("superfocus.routes.health")

router = APIRouter()

STARTED_AT = time.time()
HEALTHY_STATES = {"healthy", "configured"}


def check_supabase() -> dict:
    started = time.perf_counter()
    try:
        error = ProfileService(get_supabase_anon_client()).ping()
    except Exception as e:
        return {"status": "unhealthy", "error": str(e)}

    check = {"status": "unhealthy" if error else "healthy", "responseTime": round((time.perf_counter() - started) * 1000)}
    if error:
        check["error"] = error
    return check


@router.get("/health")
async def health():
    """
    Service status and connectivity checks: 200 when everything is healthy
    or configured, 503 otherwise. Any required key that is absent degrades
    the check of the collaborator it belongs to.
    """
    missing = missing_settings()
    stripe_key = get_stripe_secret_key()

    def configured(group: str) -> dict:
        return {"status": "missing" if group in missing else "configured"}

    checks = {
        "supabase": await run_in_threadpool(check_supabase),
        "stripe": {
            **configured("stripe"),
            "mode": "live" if stripe_key and stripe_key.startswith("sk_live_") else "test",
        },
        "ai": configured("ai"),
        "speech": configured("speech"),
        "redis": configured("redis"),
        "youtube": configured("youtube"),
    }

    healthy = all(check["status"] in HEALTHY_STATES for check in checks.values())
    if not healthy:
        logger.warning(f"[Health] ⚠️ Degraded: {[name for name, c in checks.items() if c['status'] not in HEALTHY_STATES]}")

    return JSONResponse(
        status_code=200 if healthy else 503,
        content={
            "status": "healthy" if healthy else "degraded",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "uptime": round(time.time() - STARTED_AT, 3),
            "version": __version__,
            "environment": get_environment(),
            "checks": checks,
            "missing": missing,
        },
    )


@router.get("/health/supabase")
async def health_supabase(credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)):
    """
    Supabase diagnostics: environment presence, the caller's session when a
    bearer token is sent, and a trivial query.
    """
    started = time.perf_counter()
    url = get_supabase_url()

    session = {"exists": False}
    if credentials is not None:
        try:
            user = await run_in_threadpool(verify_token, credentials.credentials)
            session = {"exists": True, "userId": f"{user.id[:8]}..."}
        except SuperFocusError as e:
            session = {"exists": False, "error": e.message}

    try:
        error = await run_in_threadpool(ProfileService(get_supabase_anon_client()).ping)
        query = {"success": error is None, "error": error}
    except Exception as e:
        query = {"success": False, "error": str(e)}

    return {
        "status": "ok",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "latency": f"{round((time.perf_counter() - started) * 1000)}ms",
        "checks": {
            "environment": {
                "hasUrl": bool(url),
                "hasKey": bool(get_supabase_anon_key()),
                "url": f"{url[:30]}..." if url else None,
            },
            "session": session,
            "query": query,
        },
    }
