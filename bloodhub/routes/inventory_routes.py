from typing import List

from fastapi import APIRouter, Depends, HTTPException, Path
from sqlalchemy.ext.asyncio import AsyncSession

from bloodhub.dependencies import get_db
from bloodhub.schemas.base_schema import BloodType
from bloodhub.schemas.inventory import (
    BloodInventoryResponse,
    BloodInventoryUpdate,
    InventoryInitializeResponse,
)
from bloodhub.schemas.user import TokenPrincipal
from bloodhub.services.inventory import BloodInventoryService
from bloodhub.utils.errors import server_error
from bloodhub.utils.logging_config import get_logger
from bloodhub.utils.permission_checker import require_admin

logger = get_logger(__name__)

router = APIRouter(prefix="/inventory", tags=["blood inventory"])


@router.get("", response_model=List[BloodInventoryResponse])
async def list_inventory(db: AsyncSession = Depends(get_db)):
    try:
        return await BloodInventoryService(db).list_inventory()
    except Exception as e:
        logger.error(
            "Inventory listing failed",
            extra={"event_type": "inventory_list_error", "error": str(e)},
            exc_info=True,
        )
        raise server_error("Error fetching inventory", e)


@router.post("/initialize", response_model=InventoryInitializeResponse)
async def initialize_inventory(
    db: AsyncSession = Depends(get_db),
    current_user: TokenPrincipal = Depends(require_admin),
):
    """Create a zeroed record for every blood type that has none"""
    logger.info(
        "Inventory initialization requested",
        extra={"event_type": "inventory_initialize", "user_id": str(current_user.id)},
    )
    try:
        inventory = await BloodInventoryService(db).initialize_inventory()
    except Exception as e:
        logger.error(
            "Inventory initialization failed",
            extra={"event_type": "inventory_initialize_error", "error": str(e)},
            exc_info=True,
        )
        raise server_error("Error initializing inventory", e)

    return InventoryInitializeResponse(message="Inventory initialized", inventory=inventory)


@router.put("/{blood_type}", response_model=BloodInventoryResponse)
async def update_inventory(
    update_data: BloodInventoryUpdate,
    blood_type: BloodType = Path(..., description="One of the eight ABO/Rh blood types"),
    db: AsyncSession = Depends(get_db),
    current_user: TokenPrincipal = Depends(require_admin),
):
    """
    Upsert the record for one blood type. Only the supplied fields change;
    a low-stock check runs after the update is saved.
    """
    try:
        return await BloodInventoryService(db).upsert_inventory(
            blood_type, update_data, user_id=str(current_user.id)
        )
    except HTTPException:
        raise
    except Exception as e:
        logger.error(
            "Inventory update failed",
            extra={
                "event_type": "inventory_update_error",
                "blood_type": blood_type,
                "error": str(e),
            },
            exc_info=True,
        )
        raise server_error("Error updating inventory", e)
