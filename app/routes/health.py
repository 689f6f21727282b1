# app/routes/health.py
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
import datetime
import logging

from app.database import get_db

logger = logging.getLogger(__name__)
router = APIRouter(tags=["Health Check"])


@router.get("/health")
def health_check(db: Session = Depends(get_db)):
    """
    Liveness check with database connectivity
    """
    health_status = {
        "status": "healthy",
        "timestamp": datetime.datetime.now().isoformat(),
        "service": "Phone OTP Service",
    }

    try:
        db.execute(text("SELECT 1"))
        health_status["database"] = {"status": "connected"}
    except SQLAlchemyError as e:
        logger.error(f"Health check database ping failed: {e}")
        health_status["database"] = {"status": "disconnected", "error": str(e)}
        health_status["status"] = "degraded"
        return JSONResponse(status_code=503, content=health_status)

    return health_status
