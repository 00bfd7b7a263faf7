"""Health check endpoint."""
from __future__ import annotations

import logging

from fastapi import APIRouter

from cybershield import db
from cybershield.utils.time import utcnow

router = APIRouter(prefix="/health", tags=["health"])
logger = logging.getLogger(__name__)


def _db_status() -> str:
    """Return 'ok' if the DB is reachable, 'error' otherwise."""

    try:
        db.ping()
        return "ok"
    except Exception:  # noqa: BLE001
        logger.exception("DB health check failed")
        return "error"


@router.get("", summary="Health check")
def healthcheck() -> dict[str, object]:
    db_status = _db_status()
    degraded = db_status != "ok"
    return {
        "status": "DEGRADED" if degraded else "OK",
        "message": "CyberShield backend degraded" if degraded else "CyberShield backend running",
        "timestamp": utcnow().isoformat(),
        "db_status": db_status,
    }
