import uuid
from datetime import datetime
from typing import Optional
from sqlalchemy import String, DateTime, Boolean, JSON, Index
from sqlalchemy.orm import Mapped, mapped_column
from bloodhub.db.base import Base, UUID, utcnow


class Donor(Base):
    """A registered blood ally."""

    __tablename__ = "donors"

    # --- Columns ---
    id: Mapped[uuid.UUID] = mapped_column(
        UUID,
        primary_key=True,
        default=uuid.uuid4,
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    branch: Mapped[str] = mapped_column(String(100), nullable=False)
    roll_number: Mapped[str] = mapped_column(
        String(50), unique=True, index=True, nullable=False
    )
    blood_group: Mapped[str] = mapped_column(String(3), nullable=False, index=True)
    contact_info: Mapped[str] = mapped_column(String(255), nullable=False)
    is_available: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    last_donation_date: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    # Ordered list of {"date", "location", "units"} entries
    donation_history: Mapped[list] = mapped_column(JSON, default=list, nullable=False)

    registered_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, index=True
    )

    # --- Methods ---
    def __str__(self) -> str:
        return f"{self.name} ({self.roll_number}, {self.blood_group})"

    __table_args__ = (
        Index("idx_donor_group_available", "blood_group", "is_available"),
    )
