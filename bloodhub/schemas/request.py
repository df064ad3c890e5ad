from datetime import datetime
from typing import Annotated, List, Optional
from uuid import UUID

from pydantic import Field, StringConstraints

from bloodhub.schemas.base_schema import BaseSchema, BloodType, Gender


class BloodRequestCreate(BaseSchema):
    # Lengths follow the blood_requests columns
    patient_name: Annotated[str, StringConstraints(max_length=100)]
    patient_age: int
    gender: Gender
    blood_type_needed: BloodType
    units_required: int
    hospital_name: Annotated[str, StringConstraints(max_length=200)]
    medical_reason: str
    college_roll_number: Annotated[str, StringConstraints(max_length=50)]
    college_email: Annotated[str, StringConstraints(max_length=100)]
    contact_number: Annotated[str, StringConstraints(max_length=30)]
    is_emergency: bool = False


class BloodRequestStatusUpdate(BaseSchema):
    # Not restricted to RequestStatus; any non-empty label is stored as-is
    status: Annotated[str, StringConstraints(min_length=1, max_length=50)]
    admin_notes: Optional[str] = None


class BloodRequestResponse(BaseSchema):
    id: UUID
    patient_name: str
    patient_age: int
    gender: str
    blood_type_needed: str
    units_required: int
    hospital_name: str
    medical_reason: str
    college_roll_number: str
    college_email: str
    contact_number: str
    is_emergency: bool
    hospital_reports_file_id: Optional[UUID] = None
    status: str
    admin_notes: Optional[str] = None
    requested_at: datetime
    updated_at: datetime


class BloodRequestSubmitResponse(BaseSchema):
    message: str
    request: BloodRequestResponse


class RequestPagination(BaseSchema):
    current: int
    total: int
    count: int
    total_requests: int


class BloodRequestListResponse(BaseSchema):
    requests: List[BloodRequestResponse] = Field(default_factory=list)
    pagination: RequestPagination
