import uuid
from typing import List, Optional, Tuple

from fastapi import HTTPException, UploadFile, status
from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from bloodhub.db.base import utcnow
from bloodhub.models.request_model import BloodRequest
from bloodhub.schemas.base_schema import NotificationType, RequestStatus
from bloodhub.schemas.request import BloodRequestCreate, BloodRequestStatusUpdate
from bloodhub.services.file_storage import FileStorageService
from bloodhub.services.inventory import BloodInventoryService
from bloodhub.services.notification_service import NotificationService
from bloodhub.utils.generic_id import parse_resource_id
from bloodhub.utils.logging_config import get_logger, log_audit_event
from bloodhub.utils.pagination import PaginationParams

logger = get_logger(__name__)


class BloodRequestService:
    """Blood request submission, listing and status transitions"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def submit_request(
        self, request_data: BloodRequestCreate, hospital_reports: Optional[UploadFile] = None
    ) -> BloodRequest:
        """
        Store the optional attachment, persist the request as pending and
        broadcast an alert when it is an emergency.
        """
        file_id = None
        if hospital_reports is not None:
            blob = await FileStorageService(self.db).store_upload(hospital_reports)
            file_id = blob.id

        blood_request = BloodRequest(
            id=uuid.uuid4(),
            **request_data.model_dump(),
            hospital_reports_file_id=file_id,
            status=RequestStatus.PENDING.value,
        )
        self.db.add(blood_request)

        if blood_request.is_emergency:
            NotificationService(self.db).create_notification(
                NotificationType.EMERGENCY_REQUEST,
                "Emergency Blood Request",
                f"Urgent: {blood_request.units_required} units of "
                f"{blood_request.blood_type_needed} needed for {blood_request.patient_name}",
                related_id=blood_request.id,
            )

        await self.db.commit()
        await self.db.refresh(blood_request)

        logger.info(
            "Blood request submitted",
            extra={
                "event_type": "blood_request_submitted",
                "blood_request_id": str(blood_request.id),
                "blood_type": blood_request.blood_type_needed,
                "units_required": blood_request.units_required,
                "is_emergency": blood_request.is_emergency,
                "has_attachment": file_id is not None,
            },
        )
        return blood_request

    async def list_requests(
        self, pagination: PaginationParams, request_status: Optional[str] = None
    ) -> Tuple[List[BloodRequest], int]:
        conditions = []
        if request_status and request_status != "all":
            conditions.append(BloodRequest.status == request_status)

        total = (
            await self.db.execute(select(func.count(BloodRequest.id)).where(*conditions))
        ).scalar_one()

        result = await self.db.execute(
            select(BloodRequest)
            .where(*conditions)
            .order_by(BloodRequest.requested_at.desc())
            .offset(pagination.offset)
            .limit(pagination.limit)
        )
        return list(result.scalars().all()), total

    async def get_request(self, request_id: str) -> BloodRequest:
        blood_request = await self.db.get(
            BloodRequest, parse_resource_id(request_id, "Request")
        )
        if blood_request is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND, detail="Request not found"
            )
        return blood_request

    async def update_status(
        self, request_id: str, status_data: BloodRequestStatusUpdate, user_id: str = None
    ) -> BloodRequest:
        """
        Apply a status transition. Fulfillment takes the requested units out
        of inventory in the same transaction, then re-runs the low-stock check.
        """
        blood_request = await self.get_request(request_id)
        old_status = blood_request.status

        blood_request.status = status_data.status
        if "admin_notes" in status_data.model_fields_set:
            blood_request.admin_notes = status_data.admin_notes
        blood_request.updated_at = utcnow()

        fulfilled = status_data.status == RequestStatus.FULFILLED.value
        inventory_service = BloodInventoryService(self.db)
        if fulfilled:
            await inventory_service.adjust_units(
                blood_request.blood_type_needed, -blood_request.units_required
            )

        await self.db.commit()
        await self.db.refresh(blood_request)

        log_audit_event(
            action="status_update",
            resource_type="blood_request",
            resource_id=str(blood_request.id),
            old_values={"status": old_status},
            new_values={"status": blood_request.status},
            user_id=user_id,
        )

        if fulfilled:
            await inventory_service.check_low_stock()

        return blood_request
