"""
Health check routes for the PLM gateway
"""

from datetime import datetime, timezone

from fastapi import APIRouter

router = APIRouter()


@router.get("/health")
async def health_check():
    """Liveness probe; does not contact the remote system"""
    return {
        "success": True,
        "status": "healthy",
        "message": "PLM gateway is running",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
