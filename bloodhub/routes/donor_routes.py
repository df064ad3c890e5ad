from typing import List

from fastapi import APIRouter, Depends, HTTPException, Path, status
from sqlalchemy.ext.asyncio import AsyncSession

from bloodhub.dependencies import get_db
from bloodhub.schemas.base_schema import BloodType
from bloodhub.schemas.donor import (
    DonorCreate,
    DonorListResponse,
    DonorPagination,
    DonorRegistrationResponse,
    DonorResponse,
)
from bloodhub.services.donor_service import DonorService
from bloodhub.utils.errors import server_error
from bloodhub.utils.logging_config import get_logger
from bloodhub.utils.pagination import PaginationParams, get_pagination_params

logger = get_logger(__name__)

router = APIRouter(prefix="/donors", tags=["donors"])


@router.post(
    "/register",
    response_model=DonorRegistrationResponse,
    status_code=status.HTTP_201_CREATED,
)
async def register_donor(donor_data: DonorCreate, db: AsyncSession = Depends(get_db)):
    """Register a donor and count them against their blood group's inventory"""
    logger.info(
        "Donor registration attempt",
        extra={
            "event_type": "donor_registration_attempt",
            "blood_group": donor_data.blood_group,
        },
    )
    try:
        donor = await DonorService(db).register_donor(donor_data)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(
            "Donor registration failed",
            extra={"event_type": "donor_registration_error", "error": str(e)},
            exc_info=True,
        )
        raise server_error("Error registering donor", e)

    return DonorRegistrationResponse(
        message="Donor registered successfully",
        donor=DonorResponse.model_validate(donor),
    )


@router.get("", response_model=DonorListResponse)
async def list_donors(
    pagination: PaginationParams = Depends(get_pagination_params),
    db: AsyncSession = Depends(get_db),
):
    try:
        donors, total = await DonorService(db).list_donors(pagination)
    except Exception as e:
        logger.error(
            "Donor listing failed",
            extra={"event_type": "donor_list_error", "error": str(e)},
            exc_info=True,
        )
        raise server_error("Error fetching donors", e)

    return DonorListResponse(
        donors=[DonorResponse.model_validate(donor) for donor in donors],
        pagination=DonorPagination(
            current=pagination.page,
            total=pagination.total_pages(total),
            count=len(donors),
            total_donors=total,
        ),
    )


@router.get("/blood-type/{blood_type}", response_model=List[DonorResponse])
async def list_donors_by_blood_type(
    blood_type: BloodType = Path(..., description="One of the eight ABO/Rh blood types"),
    db: AsyncSession = Depends(get_db),
):
    """Available donors of one blood type"""
    try:
        return await DonorService(db).list_available_by_blood_type(blood_type.value)
    except Exception as e:
        logger.error(
            "Donor lookup by blood type failed",
            extra={
                "event_type": "donor_blood_type_error",
                "blood_type": blood_type.value,
                "error": str(e),
            },
            exc_info=True,
        )
        raise server_error("Error fetching donors", e)
