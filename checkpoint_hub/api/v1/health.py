from __future__ import annotations

import logging
import time
from importlib.metadata import PackageNotFoundError, version

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from checkpoint_hub.config import settings
from checkpoint_hub.db.session import engine
from checkpoint_hub.utils.clock import utc_now

logger = logging.getLogger(__name__)

router = APIRouter()

_STARTED = time.monotonic()


def _service_version() -> str:
    try:
        return version("checkpoint-hub")
    except PackageNotFoundError:
        return "dev"


@router.get("/health")
async def health_check():
    """Liveness plus build info; no session required."""
    return {
        "status": "ok",
        "version": _service_version(),
        "environment": settings.ENV,
        "uptime_seconds": int(time.monotonic() - _STARTED),
    }


@router.get("/healthz")
async def healthz_check():
    return {"status": "ok"}


@router.get("/health/db")
async def health_db_check():
    backend = engine.url.get_backend_name()
    started = time.perf_counter()
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except (SQLAlchemyError, OSError):
        logger.exception("health.db_unreachable backend=%s", backend)
        return JSONResponse(
            status_code=503,
            content={"status": "error", "db": {"backend": backend, "reachable": False}},
        )

    return {
        "status": "ok",
        "db": {
            "backend": backend,
            "reachable": True,
            "latency_ms": round((time.perf_counter() - started) * 1000.0, 1),
        },
        "checked_at": utc_now().isoformat(),
    }
