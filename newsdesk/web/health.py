"""
Health Check Endpoints.

Endpoints:
- /health: Liveness check (process running)
- /health/ready: Readiness check (content backend reachable)
"""

import asyncio
from typing import Any

import httpx
from fastapi import APIRouter, HTTPException

from newsdesk.core.config import get_app_config
from newsdesk.core.logging import get_logger
from newsdesk.core.utils import utc_now
from newsdesk.web.dependencies import Client

router = APIRouter()
logger = get_logger(__name__)


async def check_backend(client: Client) -> dict[str, Any]:
    """
    Check that the content backend answers the tag listing.

    Returns:
        Dict with status, latency, and optional error message
    """
    start = utc_now()
    try:
        response = await client.list_tags()
    except httpx.HTTPError as e:
        logger.warning("Backend health check failed", extra={"error": str(e)})
        return {"status": "unhealthy", "error": str(e)}

    latency_ms = int((utc_now() - start).total_seconds() * 1000)
    if not response.is_success:
        return {
            "status": "unhealthy",
            "status_code": response.status_code,
            "latency_ms": latency_ms,
        }
    return {"status": "healthy", "latency_ms": latency_ms}


@router.get("/health")
async def health_check() -> dict[str, str]:
    """
    Liveness check.

    Returns 200 if the process is running. No dependency checks.
    """
    return {"status": "healthy"}


@router.get("/health/ready")
async def readiness_check(client: Client) -> dict[str, Any]:
    """
    Readiness check.

    Returns 503 if the content backend is unreachable or unhealthy.
    """
    timeout = get_app_config().application.timeouts.external_api

    try:
        async with asyncio.timeout(timeout):
            backend_result = await check_backend(client)
    except TimeoutError:
        backend_result = {"status": "unhealthy", "error": "check timed out"}

    checks = {"backend": backend_result}

    if backend_result["status"] == "unhealthy":
        logger.warning("Readiness check failed", extra={"checks": checks})
        raise HTTPException(
            status_code=503,
            detail={
                "status": "unhealthy",
                "checks": checks,
                "timestamp": utc_now().isoformat(),
            },
        )

    return {
        "status": "healthy",
        "checks": checks,
        "timestamp": utc_now().isoformat(),
    }
