from __future__ import annotations

import asyncio

from fastapi import APIRouter

from stickyboard import __version__
from stickyboard.config import settings
from stickyboard.db.base import create_request_supabase_client
from stickyboard.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter()

SERVICE_NAME = "stickyboard-api"


async def _probe_database() -> str:
    """Run a one-row query against `boards`; returns "connected" or the error text."""
    try:
        client = create_request_supabase_client()
        await asyncio.to_thread(lambda: client.table("boards").select("id").limit(1).execute())
    except Exception as err:
        logger.warning("Readiness probe failed", extra={"error": str(err)})
        return f"error: {err}"
    return "connected"


@router.get("/")
async def health_check() -> dict:
    return {"status": "healthy", "service": SERVICE_NAME, "version": __version__}


@router.get("/ready")
async def readiness_check() -> dict:
    """Report database reachability; always answers 200 so the body carries the detail."""
    database = await _probe_database()
    return {
        "status": "ready" if database == "connected" else "degraded",
        "database": database,
        "api_prefix": settings.api_prefix,
        "cors_origins": settings.cors_origins,
        "max_boards_per_user": settings.max_boards_per_user,
    }
