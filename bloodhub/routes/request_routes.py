from typing import Optional

from fastapi import (
    APIRouter,
    Depends,
    File,
    Form,
    HTTPException,
    Query,
    UploadFile,
    status,
)
from sqlalchemy.ext.asyncio import AsyncSession

from bloodhub.dependencies import get_db
from bloodhub.schemas.base_schema import BloodType, Gender
from bloodhub.schemas.request import (
    BloodRequestCreate,
    BloodRequestListResponse,
    BloodRequestResponse,
    BloodRequestStatusUpdate,
    BloodRequestSubmitResponse,
    RequestPagination,
)
from bloodhub.schemas.user import TokenPrincipal
from bloodhub.services.request import BloodRequestService
from bloodhub.utils.errors import server_error
from bloodhub.utils.logging_config import get_logger
from bloodhub.utils.pagination import PaginationParams, get_pagination_params
from bloodhub.utils.permission_checker import require_admin

logger = get_logger(__name__)

router = APIRouter(prefix="/requests", tags=["blood requests"])


def request_form(
    patient_name: str = Form(..., alias="patientName", max_length=100),
    patient_age: int = Form(..., alias="patientAge"),
    gender: Gender = Form(...),
    blood_type_needed: BloodType = Form(..., alias="bloodTypeNeeded"),
    units_required: int = Form(..., alias="unitsRequired"),
    hospital_name: str = Form(..., alias="hospitalName", max_length=200),
    medical_reason: str = Form(..., alias="medicalReason"),
    college_roll_number: str = Form(..., alias="collegeRollNumber", max_length=50),
    college_email: str = Form(..., alias="collegeEmail", max_length=100),
    contact_number: str = Form(..., alias="contactNumber", max_length=30),
    is_emergency: bool = Form(False, alias="isEmergency"),
) -> BloodRequestCreate:
    """Multipart fields arrive as text; numbers and flags are coerced here"""
    return BloodRequestCreate(
        patient_name=patient_name,
        patient_age=patient_age,
        gender=gender,
        blood_type_needed=blood_type_needed,
        units_required=units_required,
        hospital_name=hospital_name,
        medical_reason=medical_reason,
        college_roll_number=college_roll_number,
        college_email=college_email,
        contact_number=contact_number,
        is_emergency=is_emergency,
    )


@router.post(
    "",
    response_model=BloodRequestSubmitResponse,
    status_code=status.HTTP_201_CREATED,
)
async def submit_request(
    request_data: BloodRequestCreate = Depends(request_form),
    hospital_reports: Optional[UploadFile] = File(None, alias="hospitalReports"),
    db: AsyncSession = Depends(get_db),
):
    """
    Submit a blood request with an optional image or PDF attachment.
    Emergency requests raise an alert visible to everyone.
    """
    logger.info(
        "Blood request submission",
        extra={
            "event_type": "blood_request_attempt",
            "blood_type": request_data.blood_type_needed,
            "is_emergency": request_data.is_emergency,
            "has_attachment": hospital_reports is not None,
        },
    )
    try:
        blood_request = await BloodRequestService(db).submit_request(
            request_data, hospital_reports
        )
    except HTTPException:
        raise
    except Exception as e:
        logger.error(
            "Blood request submission failed",
            extra={"event_type": "blood_request_error", "error": str(e)},
            exc_info=True,
        )
        raise server_error("Error submitting request", e)

    return BloodRequestSubmitResponse(
        message="Blood request submitted successfully",
        request=BloodRequestResponse.model_validate(blood_request),
    )


@router.get("", response_model=BloodRequestListResponse)
async def list_requests(
    request_status: Optional[str] = Query(
        None, alias="status", description="Exact status to filter on, or 'all'"
    ),
    pagination: PaginationParams = Depends(get_pagination_params),
    db: AsyncSession = Depends(get_db),
    current_user: TokenPrincipal = Depends(require_admin),
):
    try:
        requests, total = await BloodRequestService(db).list_requests(
            pagination, request_status
        )
    except Exception as e:
        logger.error(
            "Blood request listing failed",
            extra={"event_type": "blood_request_list_error", "error": str(e)},
            exc_info=True,
        )
        raise server_error("Error fetching requests", e)

    return BloodRequestListResponse(
        requests=[BloodRequestResponse.model_validate(item) for item in requests],
        pagination=RequestPagination(
            current=pagination.page,
            total=pagination.total_pages(total),
            count=len(requests),
            total_requests=total,
        ),
    )


@router.put("/{request_id}/status", response_model=BloodRequestResponse)
async def update_request_status(
    request_id: str,
    status_data: BloodRequestStatusUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: TokenPrincipal = Depends(require_admin),
):
    """
    Move a request to a new status. Marking it ``fulfilled`` takes the
    requested units out of inventory.
    """
    try:
        return await BloodRequestService(db).update_status(
            request_id, status_data, user_id=str(current_user.id)
        )
    except HTTPException:
        raise
    except Exception as e:
        logger.error(
            "Blood request status update failed",
            extra={
                "event_type": "blood_request_status_error",
                "blood_request_id": request_id,
                "error": str(e),
            },
            exc_info=True,
        )
        raise server_error("Error updating request status", e)
