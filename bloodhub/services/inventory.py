import uuid
from typing import List, Optional

from sqlalchemy import update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from bloodhub.config import settings
from bloodhub.db.base import utcnow
from bloodhub.models.inventory_model import BloodInventory
from bloodhub.models.notification_model import Notification
from bloodhub.schemas.base_schema import BloodType, NotificationType
from bloodhub.schemas.inventory import BloodInventoryUpdate
from bloodhub.services.notification_service import NotificationService
from bloodhub.utils.logging_config import get_logger, log_audit_event

logger = get_logger(__name__)

UPSERT_INSERTS = {
    "postgresql": pg_insert,
    "sqlite": sqlite_insert,
}


class BloodInventoryService:
    """Per-blood-type unit counts with a threshold-based low-stock check"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_inventory(self) -> List[BloodInventory]:
        result = await self.db.execute(
            select(BloodInventory)
            .order_by(BloodInventory.blood_type.asc())
            .execution_options(populate_existing=True)
        )
        return list(result.scalars().all())

    async def get_by_blood_type(self, blood_type: str) -> Optional[BloodInventory]:
        result = await self.db.execute(
            select(BloodInventory)
            .where(BloodInventory.blood_type == blood_type)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def upsert_inventory(
        self, blood_type: BloodType, update_data: BloodInventoryUpdate, user_id: str = None
    ) -> BloodInventory:
        """Create the record if needed and apply only the supplied fields."""
        blood_type = BloodType(blood_type).value
        inventory = await self.get_by_blood_type(blood_type)
        old_values = None

        if inventory is None:
            inventory = BloodInventory(blood_type=blood_type)
            self.db.add(inventory)
        else:
            old_values = {
                "units_available": inventory.units_available,
                "donor_count": inventory.donor_count,
            }

        changes = {
            field: value
            for field, value in update_data.model_dump(exclude_unset=True).items()
            if value is not None
        }
        for field, value in changes.items():
            setattr(inventory, field, value)
        inventory.last_updated = utcnow()

        await self.db.commit()
        await self.db.refresh(inventory)

        log_audit_event(
            action="update" if old_values else "create",
            resource_type="blood_inventory",
            resource_id=str(inventory.id),
            old_values=old_values,
            new_values=changes,
            user_id=user_id,
        )

        await self.check_low_stock()
        return inventory

    async def initialize_inventory(self) -> List[BloodInventory]:
        """Create a zeroed record for every blood type that has none."""
        existing = {item.blood_type for item in await self.list_inventory()}
        created = []

        for blood_type in BloodType.get_values():
            if blood_type not in existing:
                self.db.add(
                    BloodInventory(blood_type=blood_type, units_available=0, donor_count=0)
                )
                created.append(blood_type)

        if created:
            await self.db.commit()
            logger.info(
                "Inventory initialized",
                extra={"event_type": "inventory_initialized", "created_types": created},
            )

        return await self.list_inventory()

    async def increment_donor_count(self, blood_type: str) -> None:
        """
        Atomically add one donor to ``blood_type``, creating the record when
        absent. Runs inside the caller's transaction.
        """
        insert = UPSERT_INSERTS.get(self.db.get_bind().dialect.name)

        if insert is None:
            result = await self.db.execute(
                update(BloodInventory)
                .where(BloodInventory.blood_type == blood_type)
                .values(donor_count=BloodInventory.donor_count + 1, last_updated=utcnow())
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 0:
                self.db.add(BloodInventory(blood_type=blood_type, donor_count=1))
                await self.db.flush()
            return

        stmt = insert(BloodInventory).values(
            id=uuid.uuid4(),
            blood_type=blood_type,
            units_available=0,
            donor_count=1,
            low_stock_threshold=settings.DEFAULT_LOW_STOCK_THRESHOLD,
            last_updated=utcnow(),
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=[BloodInventory.blood_type],
            set_={
                "donor_count": BloodInventory.donor_count + 1,
                "last_updated": utcnow(),
            },
        )
        await self.db.execute(stmt)

    async def adjust_units(self, blood_type: str, delta: int) -> int:
        """
        Atomically add ``delta`` (possibly negative) to the units of
        ``blood_type``. No floor is applied. Runs inside the caller's
        transaction and returns the number of records touched.
        """
        result = await self.db.execute(
            update(BloodInventory)
            .where(BloodInventory.blood_type == blood_type)
            .values(
                units_available=BloodInventory.units_available + delta,
                last_updated=utcnow(),
            )
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            logger.warning(
                "No inventory record to adjust",
                extra={"event_type": "inventory_adjust_missing", "blood_type": blood_type},
            )
        return result.rowcount

    async def check_low_stock(self) -> List[Notification]:
        """
        Emit one low-stock notification for every record below its threshold.
        Alerts are not deduplicated against earlier ones. Runs after the
        triggering mutation has committed, so a failure here is logged and
        rolled back without undoing that mutation.
        """
        try:
            result = await self.db.execute(
                select(BloodInventory)
                .where(BloodInventory.is_low_stock)
                .order_by(BloodInventory.blood_type.asc())
                .execution_options(populate_existing=True)
            )
            low_stock_items = result.scalars().all()
            if not low_stock_items:
                return []

            notification_service = NotificationService(self.db)
            notifications = [
                notification_service.create_notification(
                    NotificationType.LOW_STOCK,
                    f"Low Stock Alert: {item.blood_type}",
                    f"{item.blood_type} blood type is running low. "
                    f"Current stock: {item.units_available} units.",
                    related_id=item.id,
                )
                for item in low_stock_items
            ]
            await self.db.commit()
        except SQLAlchemyError as e:
            logger.error(
                "Low stock check failed",
                extra={"event_type": "low_stock_check_error", "error": str(e)},
                exc_info=True,
            )
            await self.db.rollback()
            return []

        logger.warning(
            "Low stock detected",
            extra={
                "event_type": "low_stock_detected",
                "blood_types": [item.blood_type for item in low_stock_items],
            },
        )
        return notifications
