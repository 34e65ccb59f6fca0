"""
Health check endpoints: liveness, and readiness of Postgres and Supabase Auth.
"""

import asyncio
import time

import requests
from fastapi import APIRouter

from aggie_nexus.config import settings
from aggie_nexus.db.pool import db_health_check
from aggie_nexus.db.postgres import check_db

router = APIRouter(tags=["health"])


@router.get("/healthz")
async def healthz():
    """Basic health check - always returns 200 if app is running."""
    return {"status": "ok", "service": "aggie-nexus"}


def _ping_supabase_auth() -> tuple[bool, str | None]:
    response = requests.get(
        settings.auth_health_url(),
        headers={"apikey": settings.SUPABASE_ANON_KEY or settings.SUPABASE_SERVICE_ROLE_KEY},
        timeout=3,
    )
    if response.ok:
        return True, None
    return False, f"HTTP {response.status_code}"


@router.get("/readyz")
async def readyz():
    """
    Readiness check. Always 200; `overall_ok` reports whether every dependency is up.
    """
    checks = {}

    t0 = time.time()
    db_result = await check_db()
    checks["postgres"] = {
        "ok": db_result is True,
        "latency_ms": round((time.time() - t0) * 1000, 1),
    }
    if db_result is not True:
        checks["postgres"]["error"] = db_result

    pool = await db_health_check()
    checks["database_pool"] = {
        "ok": pool["healthy"],
        **{k: v for k, v in pool.items() if k not in ("healthy", "service")},
    }

    t0 = time.time()
    try:
        auth_ok, auth_error = await asyncio.to_thread(_ping_supabase_auth)
    except requests.RequestException as e:
        auth_ok, auth_error = False, f"{type(e).__name__}: {e}"
    checks["supabase_auth"] = {
        "ok": auth_ok,
        "latency_ms": round((time.time() - t0) * 1000, 1),
    }
    if auth_error:
        checks["supabase_auth"]["error"] = auth_error

    overall_ok = all(check["ok"] for check in checks.values())
    return {"overall_ok": overall_ok, "checks": checks, "timestamp": time.time()}
