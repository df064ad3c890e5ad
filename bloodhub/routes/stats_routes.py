from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from bloodhub.dependencies import get_db
from bloodhub.schemas.stats_schema import DashboardStats
from bloodhub.schemas.user import TokenPrincipal
from bloodhub.services.stats_service import StatsService
from bloodhub.utils.errors import server_error
from bloodhub.utils.logging_config import get_logger
from bloodhub.utils.permission_checker import require_admin

logger = get_logger(__name__)

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("/stats", response_model=DashboardStats)
async def get_dashboard_stats(
    db: AsyncSession = Depends(get_db),
    current_user: TokenPrincipal = Depends(require_admin),
):
    try:
        return await StatsService(db).get_dashboard_stats()
    except Exception as e:
        logger.error(
            "Dashboard stats failed",
            extra={"event_type": "dashboard_stats_error", "error": str(e)},
            exc_info=True,
        )
        raise server_error("Error fetching dashboard stats", e)
