import uuid
from datetime import datetime
from typing import Optional
from sqlalchemy import String, DateTime, Boolean
from sqlalchemy.orm import Mapped, mapped_column
from bloodhub.db.base import Base, UUID, utcnow
from bloodhub.schemas.base_schema import TargetAudience


class Notification(Base):
    __tablename__ = "notifications"

    # --- Columns ---
    id: Mapped[uuid.UUID] = mapped_column(
        UUID,
        primary_key=True,
        default=uuid.uuid4,
    )
    type: Mapped[str] = mapped_column(String(30), nullable=False)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    message: Mapped[str] = mapped_column(String(500), nullable=False)
    is_read: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    target_audience: Mapped[str] = mapped_column(
        String(10), default=TargetAudience.ALL.value, nullable=False, index=True
    )
    # Request or inventory record that triggered the notification
    related_id: Mapped[Optional[uuid.UUID]] = mapped_column(UUID, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, index=True
    )

    # --- Methods ---
    def __str__(self) -> str:
        return f"Notification({self.title}, {self.message}, Read: {self.is_read})"

    def mark_as_read(self):
        self.is_read = True
