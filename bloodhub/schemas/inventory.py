from datetime import datetime
from typing import List, Optional
from uuid import UUID

from bloodhub.schemas.base_schema import BaseSchema


class BloodInventoryUpdate(BaseSchema):
    """Partial update: omitted fields stay untouched"""

    units_available: Optional[int] = None
    donor_count: Optional[int] = None


class BloodInventoryResponse(BaseSchema):
    id: UUID
    blood_type: str
    units_available: int
    donor_count: int
    low_stock_threshold: int
    last_updated: datetime


class InventoryInitializeResponse(BaseSchema):
    message: str
    inventory: List[BloodInventoryResponse]


class InventorySummary(BaseSchema):
    blood_type: str
    units_available: int
    donor_count: int
