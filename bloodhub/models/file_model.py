import uuid
from datetime import datetime
from sqlalchemy import String, DateTime, Integer, LargeBinary
from sqlalchemy.orm import Mapped, mapped_column, deferred
from bloodhub.db.base import Base, UUID, utcnow


class FileBlob(Base):
    """Binary attachment uploaded alongside a blood request."""

    __tablename__ = "file_blobs"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID,
        primary_key=True,
        default=uuid.uuid4,
    )
    filename: Mapped[str] = mapped_column(String(255), nullable=False)
    content_type: Mapped[str] = mapped_column(String(100), nullable=False)
    size: Mapped[int] = mapped_column(Integer, nullable=False)
    data: Mapped[bytes] = deferred(mapped_column(LargeBinary, nullable=False))
    uploaded_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow
    )

    def __str__(self) -> str:
        return f"{self.filename} ({self.content_type}, {self.size} bytes)"
