from typing import List, Tuple

from fastapi import HTTPException
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from bloodhub.models.donor_model import Donor
from bloodhub.schemas.donor import DonorCreate
from bloodhub.services.inventory import BloodInventoryService
from bloodhub.utils.logging_config import get_logger, log_audit_event
from bloodhub.utils.pagination import PaginationParams

logger = get_logger(__name__)

DUPLICATE_ROLL_NUMBER = "Donor with this roll number already exists"


class DonorService:
    """Donor registration and lookup"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def register_donor(self, donor_data: DonorCreate) -> Donor:
        """
        Persist the donor and bump the donor count of its blood group in the
        same transaction.
        """
        existing = await self.db.execute(
            select(Donor.id).where(Donor.roll_number == donor_data.roll_number).limit(1)
        )
        if existing.scalar_one_or_none():
            raise HTTPException(status_code=400, detail=DUPLICATE_ROLL_NUMBER)

        donor = Donor(**donor_data.model_dump())
        self.db.add(donor)

        try:
            await self.db.flush()
            await BloodInventoryService(self.db).increment_donor_count(donor.blood_group)
            await self.db.commit()
        except IntegrityError:
            # Lost a race with a concurrent registration of the same roll number
            await self.db.rollback()
            raise HTTPException(status_code=400, detail=DUPLICATE_ROLL_NUMBER)

        await self.db.refresh(donor)

        log_audit_event(
            action="create",
            resource_type="donor",
            resource_id=str(donor.id),
            new_values={"roll_number": donor.roll_number, "blood_group": donor.blood_group},
        )
        return donor

    async def list_donors(self, pagination: PaginationParams) -> Tuple[List[Donor], int]:
        total = (await self.db.execute(select(func.count(Donor.id)))).scalar_one()

        result = await self.db.execute(
            select(Donor)
            .order_by(Donor.registered_at.desc())
            .offset(pagination.offset)
            .limit(pagination.limit)
        )
        return list(result.scalars().all()), total

    async def list_available_by_blood_type(self, blood_type: str) -> List[Donor]:
        result = await self.db.execute(
            select(Donor).where(
                Donor.blood_group == blood_type,
                Donor.is_available.is_(True),
            )
        )
        return list(result.scalars().all())
