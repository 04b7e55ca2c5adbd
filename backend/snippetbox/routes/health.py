"""
Snippetbox — Liveness & Health Routes
======================================

What:  GET /ping answers a plain "OK" without touching any dependency;
       GET /health also probes the database with SELECT 1.
Who:   Container health checks and load balancers.

Status levels for /health:
    - healthy:   database reachable (HTTP 200)
    - unhealthy: database unreachable or not configured (HTTP 503)
"""

import logging
import time

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse, PlainTextResponse
from sqlalchemy import text

from snippetbox import __version__
from snippetbox.dependencies import Application, get_application
from snippetbox.schemas.health import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get("/ping", response_class=PlainTextResponse, summary="Liveness probe")
async def ping() -> str:
    return "OK"


@router.get("/health", response_model=HealthResponse, summary="Service health check")
async def health_check(app: Application = Depends(get_application)):
    db_status = "connected"

    if app.engine is None:
        db_status = "not_configured"
    else:
        try:
            async with app.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
        except Exception as e:
            db_status = "disconnected"
            logger.warning("Health check: database unreachable: %s", str(e))

    body = HealthResponse(
        status="healthy" if db_status == "connected" else "unhealthy",
        version=__version__,
        database=db_status,
        uptime_seconds=round(time.time() - _start_time, 2),
    )
    if body.status != "healthy":
        return JSONResponse(status_code=503, content=body.model_dump())
    return body
