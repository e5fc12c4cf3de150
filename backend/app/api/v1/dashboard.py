"""
Dashboard statistics endpoint.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.exc import SQLAlchemyError

from app.api.deps import get_dashboard_service
from app.core.exceptions import ApiError
from app.core.logging import get_logger
from app.schemas.dashboard import DashboardStats
from app.services.dashboard_service import DashboardService

router = APIRouter(prefix="/dashboard", tags=["Dashboard"])
logger = get_logger("dashboard")


@router.get("/stats", response_model=DashboardStats)
async def get_dashboard_stats(
    service: DashboardService = Depends(get_dashboard_service),
):
    """Totals, revenue, 7-day histogram, 6-month trend and category mix."""
    try:
        return await service.get_stats()
    except SQLAlchemyError as e:
        logger.error("Failed to load orders for dashboard stats: %s", str(e))
        raise ApiError(500, "Failed to fetch dashboard stats")
