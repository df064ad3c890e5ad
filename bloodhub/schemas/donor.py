from datetime import datetime
from typing import Annotated, List, Optional
from uuid import UUID

from pydantic import Field, StringConstraints

from bloodhub.schemas.base_schema import BaseSchema, BloodType

NameStr = Annotated[str, StringConstraints(min_length=1, max_length=100)]
ContactStr = Annotated[str, StringConstraints(min_length=1, max_length=255)]


class DonationEntry(BaseSchema):
    date: datetime
    location: Optional[str] = None
    units: Optional[int] = None


class DonorCreate(BaseSchema):
    name: NameStr
    branch: NameStr
    roll_number: Annotated[str, StringConstraints(min_length=1, max_length=50)]
    blood_group: BloodType
    contact_info: ContactStr


class DonorResponse(BaseSchema):
    id: UUID
    name: str
    branch: str
    roll_number: str
    blood_group: str
    contact_info: str
    is_available: bool
    last_donation_date: Optional[datetime] = None
    donation_history: List[DonationEntry] = Field(default_factory=list)
    registered_at: datetime


class DonorRegistrationResponse(BaseSchema):
    message: str
    donor: DonorResponse


class DonorPagination(BaseSchema):
    current: int
    total: int
    count: int
    total_donors: int


class DonorListResponse(BaseSchema):
    donors: List[DonorResponse]
    pagination: DonorPagination
