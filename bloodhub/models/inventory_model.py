import uuid
from datetime import datetime
from sqlalchemy import String, DateTime, Integer
from sqlalchemy.ext.hybrid import hybrid_property
from sqlalchemy.orm import Mapped, mapped_column
from bloodhub.config import settings
from bloodhub.db.base import Base, UUID, utcnow


class BloodInventory(Base):
    """Unit and donor counts for one blood type."""

    __tablename__ = "blood_inventory"

    # --- Columns ---
    id: Mapped[uuid.UUID] = mapped_column(
        UUID,
        primary_key=True,
        default=uuid.uuid4,
    )
    blood_type: Mapped[str] = mapped_column(
        String(3), unique=True, nullable=False, index=True
    )
    # May go negative when fulfillment outpaces stock
    units_available: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    donor_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    low_stock_threshold: Mapped[int] = mapped_column(
        Integer,
        default=lambda: settings.DEFAULT_LOW_STOCK_THRESHOLD,
        nullable=False,
    )
    last_updated: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow
    )

    # --- Methods ---
    def __str__(self) -> str:
        return f"{self.blood_type}: {self.units_available} units"

    @hybrid_property
    def is_low_stock(self):
        return self.units_available < self.low_stock_threshold
