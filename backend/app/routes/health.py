"""
Clientes API — Health Check Route
===================================

What:  Health check endpoint for monitoring and container probes.
How:   Checks the two things every request depends on: the database answers
       `SELECT 1` and the upload directory is writable.

Status levels:
    - healthy:   Both checks pass (HTTP 200)
    - unhealthy: Any check fails (HTTP 503)
"""

import logging
import os
import time

from fastapi import APIRouter, Response
from sqlalchemy import text

from app import __version__
from app.database import engine
from app.schemas.cliente import HealthResponse
from app.services.file_service import file_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
)
async def health_check(response: Response) -> HealthResponse:
    db_status = "connected"
    uploads_status = "writable"
    overall = "healthy"

    # ── Check Database ────────────────────────────────────────────────────
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except Exception as e:
        db_status = "disconnected"
        overall = "unhealthy"
        logger.warning("Health check: database unreachable: %s", str(e))

    # ── Check Upload Directory ────────────────────────────────────────────
    root = file_service.upload_root
    if not (root.is_dir() and os.access(root, os.W_OK)):
        uploads_status = "unwritable"
        overall = "unhealthy"
        logger.warning("Health check: upload directory not writable: %s", root)

    if overall != "healthy":
        response.status_code = 503

    return HealthResponse(
        status=overall,
        version=__version__,
        database=db_status,
        uploads=uploads_status,
        uptime_seconds=round(time.time() - _start_time, 2),
    )
