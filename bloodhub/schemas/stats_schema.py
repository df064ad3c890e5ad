from typing import List

from bloodhub.schemas.base_schema import BaseSchema
from bloodhub.schemas.inventory import InventorySummary


class DashboardStats(BaseSchema):
    """Aggregate counts for the admin dashboard"""

    total_donors: int
    total_requests: int
    pending_requests: int
    emergency_requests: int
    low_stock_count: int
    inventory_stats: List[InventorySummary]
