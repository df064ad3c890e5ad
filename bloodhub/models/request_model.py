import uuid
from datetime import datetime
from typing import Optional
from sqlalchemy import String, Integer, DateTime, Boolean, Text, Index
from sqlalchemy.orm import Mapped, mapped_column
from bloodhub.db.base import Base, UUID, utcnow
from bloodhub.schemas.base_schema import RequestStatus


class BloodRequest(Base):
    """Model representing a request for blood on behalf of a patient."""

    __tablename__ = "blood_requests"

    # --- Columns ---
    id: Mapped[uuid.UUID] = mapped_column(
        UUID,
        primary_key=True,
        default=uuid.uuid4,
    )

    # Patient information
    patient_name: Mapped[str] = mapped_column(String(100), nullable=False)
    patient_age: Mapped[int] = mapped_column(Integer, nullable=False)
    gender: Mapped[str] = mapped_column(String(10), nullable=False)
    blood_type_needed: Mapped[str] = mapped_column(String(3), nullable=False, index=True)
    units_required: Mapped[int] = mapped_column(Integer, nullable=False)
    hospital_name: Mapped[str] = mapped_column(String(200), nullable=False)
    medical_reason: Mapped[str] = mapped_column(Text, nullable=False)

    # Requester information
    college_roll_number: Mapped[str] = mapped_column(String(50), nullable=False)
    college_email: Mapped[str] = mapped_column(String(100), nullable=False)
    contact_number: Mapped[str] = mapped_column(String(30), nullable=False)

    is_emergency: Mapped[bool] = mapped_column(Boolean, default=False, index=True)
    # Non-owning reference to a FileBlob
    hospital_reports_file_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        UUID, nullable=True
    )
    # Plain string: status updates are not restricted to RequestStatus values
    status: Mapped[str] = mapped_column(
        String(50), default=RequestStatus.PENDING.value, nullable=False, index=True
    )
    admin_notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    requested_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, index=True
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow
    )

    # --- Methods ---
    def __str__(self) -> str:
        return (
            f"{self.units_required} x {self.blood_type_needed} "
            f"for {self.patient_name} ({self.status})"
        )

    __table_args__ = (
        Index("idx_request_emergency_status", "is_emergency", "status"),
    )
