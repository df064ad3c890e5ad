from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from bloodhub.dependencies import get_db
from bloodhub.schemas.notification_schema import (
    NotificationListResponse,
    NotificationPagination,
    NotificationResponse,
)
from bloodhub.schemas.user import TokenPrincipal
from bloodhub.services.notification_service import NotificationService
from bloodhub.utils.errors import server_error
from bloodhub.utils.generic_id import parse_resource_id
from bloodhub.utils.logging_config import get_logger
from bloodhub.utils.pagination import PaginationParams, get_pagination_params
from bloodhub.utils.security import get_current_user

logger = get_logger(__name__)

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("", response_model=NotificationListResponse)
async def list_notifications(
    pagination: PaginationParams = Depends(get_pagination_params),
    db: AsyncSession = Depends(get_db),
    current_user: TokenPrincipal = Depends(get_current_user),
):
    """
    Notifications addressed to everyone plus those addressed to the caller's
    audience: admins see admin alerts, everyone else sees donor notices.
    """
    try:
        notifications, total = await NotificationService(db).list_notifications(
            current_user.role, pagination
        )
    except Exception as e:
        logger.error(
            "Notification listing failed",
            extra={
                "event_type": "notification_list_error",
                "user_id": str(current_user.id),
                "error": str(e),
            },
            exc_info=True,
        )
        raise server_error("Error fetching notifications", e)

    return NotificationListResponse(
        notifications=[NotificationResponse.model_validate(n) for n in notifications],
        pagination=NotificationPagination(
            current=pagination.page,
            total=pagination.total_pages(total),
            count=len(notifications),
        ),
    )


@router.put("/{notification_id}/read", response_model=NotificationResponse)
async def mark_notification_read(
    notification_id: str,
    db: AsyncSession = Depends(get_db),
    current_user: TokenPrincipal = Depends(get_current_user),
):
    try:
        return await NotificationService(db).mark_as_read(
            parse_resource_id(notification_id, "Notification")
        )
    except HTTPException:
        raise
    except Exception as e:
        logger.error(
            "Marking notification as read failed",
            extra={
                "event_type": "notification_read_error",
                "notification_id": notification_id,
                "error": str(e),
            },
            exc_info=True,
        )
        raise server_error("Error updating notification", e)
