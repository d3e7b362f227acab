"""Health check endpoint."""
import logging
import time

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.database import get_db
from app.utils.helpers import utcnow

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/health", tags=["health"])

_started_at = time.monotonic()


@router.get("")
def health(db: Session = Depends(get_db)):
    started = time.perf_counter()

    db_status = "connected"
    try:
        db.execute(text("SELECT 1"))
    except SQLAlchemyError:
        logger.warning("Health check could not reach the database", exc_info=True)
        db_status = "disconnected"
    db_ping_ms = round((time.perf_counter() - started) * 1000, 2)

    return {
        "success": True,
        "message": f"{settings.APP_NAME} API Server is running",
        "version": "1.0.0",
        "timestamp": utcnow().isoformat(),
        "uptime": round(time.monotonic() - _started_at, 2),
        "environment": settings.ENV,
        "database": {
            "status": db_status,
            "dialect": db.get_bind().dialect.name,
            "pingTimeMs": db_ping_ms,
        },
    }
