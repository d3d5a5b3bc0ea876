# app/routers/health.py
"""
System health check endpoint.
Returns status of backend + DB + background tasks.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from sqlalchemy import text
from app.database import get_db
from app.config import settings
from app.services import response_simulator
from datetime import datetime

router = APIRouter()


@router.get("/health", summary="System health check")
def health_check(db: Session = Depends(get_db)):
    """
    Returns:
    - Backend status
    - Database connectivity
    - Pending simulated chauffeur responses
    """
    result = {
        "status": "ok",
        "timestamp": datetime.utcnow().isoformat(),
        "backend": "ok",
        "database": "unknown",
        "simulators": {
            "dispatch_enabled": settings.DISPATCH_SIMULATION_ENABLED,
            "onboarding_enabled": settings.ONBOARDING_SIMULATION_ENABLED,
            "pending_tasks": response_simulator.pending_count(),
        },
        "compliance_check_enabled": settings.COMPLIANCE_CHECK_ENABLED,
    }

    try:
        db.execute(text("SELECT 1"))
        result["database"] = "ok"
    except Exception as e:
        result["database"] = f"error: {str(e)}"
        result["status"] = "degraded"

    return result
