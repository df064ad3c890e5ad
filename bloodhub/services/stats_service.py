"""
Dashboard Service - aggregate counts across donors, requests and inventory
"""

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from bloodhub.models.donor_model import Donor
from bloodhub.models.inventory_model import BloodInventory
from bloodhub.models.request_model import BloodRequest
from bloodhub.schemas.base_schema import RequestStatus
from bloodhub.schemas.inventory import InventorySummary
from bloodhub.schemas.stats_schema import DashboardStats
from bloodhub.utils.logging_config import get_logger

logger = get_logger(__name__)


class StatsService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def _count(self, query) -> int:
        return (await self.db.execute(query)).scalar_one()

    async def get_dashboard_stats(self) -> DashboardStats:
        """
        Each figure is an independent count; together they are not a single
        consistent snapshot.
        """
        total_donors = await self._count(select(func.count(Donor.id)))
        total_requests = await self._count(select(func.count(BloodRequest.id)))
        pending_requests = await self._count(
            select(func.count(BloodRequest.id)).where(
                BloodRequest.status == RequestStatus.PENDING.value
            )
        )
        emergency_requests = await self._count(
            select(func.count(BloodRequest.id)).where(
                BloodRequest.is_emergency.is_(True),
                BloodRequest.status.in_(RequestStatus.open_statuses()),
            )
        )
        low_stock_count = await self._count(
            select(func.count(BloodInventory.id)).where(BloodInventory.is_low_stock)
        )

        inventory_rows = await self.db.execute(
            select(
                BloodInventory.blood_type,
                BloodInventory.units_available,
                BloodInventory.donor_count,
            ).order_by(BloodInventory.blood_type.asc())
        )
        inventory_stats = [
            InventorySummary(
                blood_type=row.blood_type,
                units_available=row.units_available,
                donor_count=row.donor_count,
            )
            for row in inventory_rows
        ]

        logger.debug(
            "Dashboard stats computed",
            extra={"event_type": "dashboard_stats", "total_requests": total_requests},
        )

        return DashboardStats(
            total_donors=total_donors,
            total_requests=total_requests,
            pending_requests=pending_requests,
            emergency_requests=emergency_requests,
            low_stock_count=low_stock_count,
            inventory_stats=inventory_stats,
        )
