"""
Health probes.

    GET /health        liveness, no dependencies touched
    GET /health/ready  readiness, 503 unless the database answers in time

Mounted outside the API prefix so orchestrators need no version knowledge.
"""

import asyncio
from typing import Any

from fastapi import APIRouter, HTTPException
from sqlalchemy import text

from jotter.backend.core.config import get_app_config
from jotter.backend.core.database import get_session_factory
from jotter.backend.core.logging import get_logger
from jotter.backend.core.utils import elapsed_ms, utc_now

router = APIRouter()
logger = get_logger(__name__)

HEALTHY = "healthy"
UNHEALTHY = "unhealthy"


async def check_database() -> dict[str, Any]:
    """Round trip `SELECT 1`, reporting latency or the failure."""
    start = utc_now()
    try:
        async with get_session_factory()() as session:
            await session.execute(text("SELECT 1"))
    except Exception as e:
        # A probe reports every failure instead of raising it
        logger.warning("Database probe failed", extra={"error": str(e)})
        return {"status": UNHEALTHY, "error": str(e)}
    return {"status": HEALTHY, "latency_ms": elapsed_ms(start)}


def _report(checks: dict[str, dict[str, Any]]) -> dict[str, Any]:
    healthy = all(check["status"] == HEALTHY for check in checks.values())
    return {
        "status": HEALTHY if healthy else UNHEALTHY,
        "checks": checks,
        "timestamp": utc_now().isoformat(),
    }


@router.get("/health")
async def health_check() -> dict[str, str]:
    return {"status": HEALTHY}


@router.get("/health/ready")
async def readiness_check() -> dict[str, Any]:
    timeout = get_app_config().application.timeouts.database
    try:
        async with asyncio.timeout(timeout):
            database = await check_database()
    except TimeoutError:
        database = {"status": UNHEALTHY, "error": f"timed out after {timeout}s"}

    report = _report({"database": database})
    if report["status"] != HEALTHY:
        logger.warning("Not ready", extra={"checks": report["checks"]})
        raise HTTPException(status_code=503, detail=report)
    return report
