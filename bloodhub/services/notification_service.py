from typing import List, Optional, Tuple
from uuid import UUID

from fastapi import HTTPException, status
from sqlalchemy import func, or_
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from bloodhub.models.notification_model import Notification
from bloodhub.schemas.base_schema import NotificationType, TargetAudience
from bloodhub.utils.logging_config import get_logger
from bloodhub.utils.pagination import PaginationParams

logger = get_logger(__name__)


class NotificationService:
    """Append-only notification log with role-filtered reads"""

    def __init__(self, db: AsyncSession):
        self.db = db

    def create_notification(
        self,
        notification_type: NotificationType,
        title: str,
        message: str,
        related_id: Optional[UUID] = None,
    ) -> Notification:
        """Stage a notification in the current transaction; the caller commits."""
        notification = Notification(
            type=notification_type.value,
            title=title,
            message=message,
            related_id=related_id,
            target_audience=TargetAudience.for_notification_type(
                notification_type.value
            ).value,
        )
        self.db.add(notification)

        logger.info(
            "Notification created",
            extra={
                "event_type": "notification_created",
                "notification_type": notification.type,
                "target_audience": notification.target_audience,
                "related_id": str(related_id) if related_id else None,
            },
        )
        return notification

    async def list_notifications(
        self, role: str, pagination: PaginationParams
    ) -> Tuple[List[Notification], int]:
        """Notifications visible to ``role``, newest first"""
        audience_filter = or_(
            Notification.target_audience == TargetAudience.ALL.value,
            Notification.target_audience == TargetAudience.for_role(role).value,
        )

        total = (
            await self.db.execute(
                select(func.count(Notification.id)).where(audience_filter)
            )
        ).scalar_one()

        result = await self.db.execute(
            select(Notification)
            .where(audience_filter)
            .order_by(Notification.created_at.desc())
            .offset(pagination.offset)
            .limit(pagination.limit)
        )
        return list(result.scalars().all()), total

    async def mark_as_read(self, notification_id: UUID) -> Notification:
        notification = await self.db.get(Notification, notification_id)
        if notification is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Notification not found",
            )

        notification.mark_as_read()
        await self.db.commit()
        await self.db.refresh(notification)
        return notification
