"""
Notification Schemas for API responses
"""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import Field

from bloodhub.schemas.base_schema import BaseSchema


class NotificationResponse(BaseSchema):
    """Schema for notification response"""

    id: UUID = Field(..., description="Notification ID")
    type: str = Field(..., description="Notification type")
    title: str = Field(..., max_length=255, description="Notification title")
    message: str = Field(..., max_length=500, description="Notification message")
    is_read: bool = Field(..., description="Read status")
    target_audience: str = Field(..., description="Audience the notification targets")
    related_id: Optional[UUID] = Field(None, description="Triggering request or inventory record")
    created_at: datetime = Field(..., description="Creation timestamp")


class NotificationPagination(BaseSchema):
    current: int
    total: int
    count: int


class NotificationListResponse(BaseSchema):
    notifications: List[NotificationResponse]
    pagination: NotificationPagination
