"""
Rotas de health check.
"""
from fastapi import APIRouter
from datetime import datetime, timezone

from campaign_stats.services.broadcast_stats import broadcast_stats_service

router = APIRouter()


@router.get("/health")
async def health_check():
    """Liveness básico: sempre 200 se o app está rodando."""
    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "service": "broadcast-stats",
    }


@router.get("/health/stats")
async def health_stats():
    """Estado do cache e do coalescedor de estatisticas."""
    return broadcast_stats_service.status()
