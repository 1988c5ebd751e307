"""
Health Check Router
Liveness and model status endpoints
"""
from fastapi import APIRouter, Request
from datetime import datetime, timezone

from app.core.config import settings

router = APIRouter()


@router.get("/health")
async def health_check():
    """
    Health check endpoint.
    Returns API status.
    """
    return {
        "status": "healthy",
        "service": settings.PROJECT_NAME,
        "timestamp": datetime.now(timezone.utc).isoformat()
    }


@router.get("/model/status")
async def model_status(request: Request):
    """
    Current forecasting model snapshot (version, algorithms, last refresh).
    """
    return request.app.state.model_status.current().to_dict()
