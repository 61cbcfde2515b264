"""Health check endpoints."""

import logging
from datetime import UTC, datetime
from typing import Annotated

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from pushhub.config import get_settings
from pushhub.database import get_db

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check(db: Annotated[Session, Depends(get_db)]):
    """Report API, database and push configuration status."""
    settings = get_settings()

    try:
        db.execute(text("SELECT 1"))
        db_status = "connected"
    except SQLAlchemyError as e:
        logger.error(f"Database connection failed: {e}")
        db_status = "disconnected"

    body = {
        "status": "healthy" if db_status == "connected" else "unhealthy",
        "timestamp": datetime.now(UTC).isoformat(),
        "environment": settings.environment,
        "database": {"status": db_status},
        "push": {"configured": settings.push_configured},
    }
    status_code = (
        status.HTTP_200_OK if db_status == "connected" else status.HTTP_503_SERVICE_UNAVAILABLE
    )
    return JSONResponse(status_code=status_code, content=body)
