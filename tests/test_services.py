"""
Service-level tests run directly against an AsyncSession.
"""

import pytest
from fastapi import HTTPException
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from bloodhub.models.notification_model import Notification
from bloodhub.schemas.base_schema import NotificationType, UserRole
from bloodhub.schemas.donor import DonorCreate
from bloodhub.schemas.inventory import BloodInventoryUpdate
from bloodhub.schemas.request import BloodRequestCreate, BloodRequestStatusUpdate
from bloodhub.schemas.user import UserCreate
from bloodhub.services.donor_service import DonorService
from bloodhub.services.inventory import BloodInventoryService
from bloodhub.services.notification_service import NotificationService
from bloodhub.services.request import BloodRequestService
from bloodhub.services.stats_service import StatsService
from bloodhub.services.user_service import UserService
from bloodhub.utils.pagination import PaginationParams


def request_payload(**overrides) -> BloodRequestCreate:
    data = {
        "patient_name": "Kwame Asante",
        "patient_age": 34,
        "gender": "Male",
        "blood_type_needed": "A+",
        "units_required": 2,
        "hospital_name": "Korle Bu Teaching Hospital",
        "medical_reason": "Scheduled surgery",
        "college_roll_number": "CS2020",
        "college_email": "student@college.edu",
        "contact_number": "+233244000001",
    }
    data.update(overrides)
    return BloodRequestCreate(**data)


async def count_notifications(db: AsyncSession, notification_type: str) -> int:
    result = await db.execute(
        select(func.count(Notification.id)).where(Notification.type == notification_type)
    )
    return result.scalar_one()


class TestInventoryService:
    async def test_increment_creates_then_increments(self, db_session: AsyncSession):
        service = BloodInventoryService(db_session)

        await service.increment_donor_count("O+")
        await service.increment_donor_count("O+")
        await db_session.commit()

        record = await service.get_by_blood_type("O+")
        assert record.donor_count == 2
        assert record.units_available == 0
        assert record.low_stock_threshold == 10

    async def test_adjust_units_is_relative(self, db_session: AsyncSession):
        service = BloodInventoryService(db_session)
        await service.upsert_inventory("B+", BloodInventoryUpdate(units_available=30))

        touched = await service.adjust_units("B+", -7)
        await db_session.commit()

        assert touched == 1
        assert (await service.get_by_blood_type("B+")).units_available == 23

    async def test_adjust_units_missing_record(self, db_session: AsyncSession):
        touched = await BloodInventoryService(db_session).adjust_units("AB-", -1)

        assert touched == 0

    async def test_initialize_twice(self, db_session: AsyncSession):
        service = BloodInventoryService(db_session)

        await service.initialize_inventory()
        inventory = await service.initialize_inventory()

        assert len(inventory) == 8

    async def test_low_stock_check_is_not_deduplicated(self, db_session: AsyncSession):
        service = BloodInventoryService(db_session)
        await service.upsert_inventory("A-", BloodInventoryUpdate(units_available=2))
        await service.upsert_inventory("O-", BloodInventoryUpdate(units_available=50))

        alerts = await service.check_low_stock()
        await service.check_low_stock()

        assert [n.title for n in alerts] == ["Low Stock Alert: A-"]
        # A- is flagged again by every check: two upserts plus two explicit runs
        assert await count_notifications(db_session, "low_stock") == 4

    async def test_threshold_is_strict(self, db_session: AsyncSession):
        service = BloodInventoryService(db_session)

        await service.upsert_inventory("A+", BloodInventoryUpdate(units_available=10))

        assert await service.check_low_stock() == []


class TestDonorService:
    async def test_register_updates_inventory_in_same_transaction(
        self, db_session: AsyncSession
    ):
        donor = await DonorService(db_session).register_donor(
            DonorCreate(
                name="Ama Mensah",
                branch="Biology",
                roll_number="BIO77",
                blood_group="O+",
                contact_info="ama@college.edu",
            )
        )

        record = await BloodInventoryService(db_session).get_by_blood_type("O+")
        assert donor.id is not None
        assert record.donor_count == 1

    async def test_duplicate_roll_number(self, db_session: AsyncSession):
        service = DonorService(db_session)
        payload = DonorCreate(
            name="Ama Mensah",
            branch="Biology",
            roll_number="BIO77",
            blood_group="O+",
            contact_info="ama@college.edu",
        )
        await service.register_donor(payload)

        with pytest.raises(HTTPException) as exc_info:
            await service.register_donor(payload)

        assert exc_info.value.status_code == 400


class TestBloodRequestService:
    async def test_emergency_creates_one_notification(self, db_session: AsyncSession):
        await BloodRequestService(db_session).submit_request(
            request_payload(is_emergency=True)
        )

        assert await count_notifications(db_session, "emergency_request") == 1

    async def test_non_fulfilment_statuses_leave_inventory(
        self, db_session: AsyncSession
    ):
        inventory = BloodInventoryService(db_session)
        await inventory.upsert_inventory("A+", BloodInventoryUpdate(units_available=20))
        service = BloodRequestService(db_session)
        blood_request = await service.submit_request(request_payload(units_required=5))

        for new_status in ("approved", "rejected", "pending"):
            await service.update_status(
                str(blood_request.id), BloodRequestStatusUpdate(status=new_status)
            )

        assert (await inventory.get_by_blood_type("A+")).units_available == 20

    async def test_fulfilment_decrements_exactly(self, db_session: AsyncSession):
        inventory = BloodInventoryService(db_session)
        await inventory.upsert_inventory("A+", BloodInventoryUpdate(units_available=20))
        service = BloodRequestService(db_session)
        blood_request = await service.submit_request(request_payload(units_required=5))

        updated = await service.update_status(
            str(blood_request.id), BloodRequestStatusUpdate(status="fulfilled")
        )

        assert updated.status == "fulfilled"
        assert (await inventory.get_by_blood_type("A+")).units_available == 15

    async def test_admin_notes_kept_when_omitted(self, db_session: AsyncSession):
        service = BloodRequestService(db_session)
        blood_request = await service.submit_request(request_payload())
        await service.update_status(
            str(blood_request.id),
            BloodRequestStatusUpdate(status="approved", admin_notes="Call donor"),
        )

        updated = await service.update_status(
            str(blood_request.id), BloodRequestStatusUpdate(status="fulfilled")
        )

        assert updated.admin_notes == "Call donor"

    async def test_list_filters_by_status(self, db_session: AsyncSession):
        service = BloodRequestService(db_session)
        first = await service.submit_request(request_payload())
        await service.submit_request(request_payload())
        await service.update_status(
            str(first.id), BloodRequestStatusUpdate(status="rejected")
        )

        rejected, total = await service.list_requests(
            PaginationParams(page=1, limit=10), "rejected"
        )

        assert total == 1
        assert rejected[0].id == first.id


class TestNotificationService:
    async def test_audience_follows_type(self, db_session: AsyncSession):
        service = NotificationService(db_session)
        low_stock = service.create_notification(NotificationType.LOW_STOCK, "t", "m")
        emergency = service.create_notification(
            NotificationType.EMERGENCY_REQUEST, "t", "m"
        )
        await db_session.commit()

        assert low_stock.target_audience == "admins"
        assert emergency.target_audience == "all"

        user_view, user_total = await service.list_notifications(
            UserRole.USER.value, PaginationParams()
        )
        admin_view, admin_total = await service.list_notifications(
            UserRole.ADMIN.value, PaginationParams()
        )
        assert user_total == 1
        assert admin_total == 2


class TestUserService:
    async def test_unknown_email_and_bad_password_match(self, db_session: AsyncSession):
        service = UserService(db_session)
        await service.create_user(
            UserCreate(email="kofi@college.edu", password="SecurePass123!")
        )

        with pytest.raises(HTTPException) as bad_password:
            await service.authenticate_user("kofi@college.edu", "WrongPass123!")
        with pytest.raises(HTTPException) as unknown:
            await service.authenticate_user("nobody@college.edu", "SecurePass123!")

        assert bad_password.value.status_code == unknown.value.status_code == 401
        assert bad_password.value.detail == unknown.value.detail

    async def test_registration_race_reports_existing_user(
        self, db_session: AsyncSession, monkeypatch
    ):
        service = UserService(db_session)
        payload = UserCreate(email="race@college.edu", password="SecurePass123!")
        await service.create_user(payload)

        async def not_taken(email: str) -> bool:
            return False

        # The second registration passes the lookup, as if both ran concurrently
        monkeypatch.setattr(service, "email_taken", not_taken)
        with pytest.raises(HTTPException) as exc_info:
            await service.create_user(payload)

        assert exc_info.value.status_code == 400
        assert exc_info.value.detail == "User already exists"
        assert (await service.get_by_email("race@college.edu")) is not None

    async def test_ensure_admin_user_is_idempotent(self, db_session: AsyncSession):
        service = UserService(db_session)

        first = await service.ensure_admin_user("root@college.edu", "SecurePass123!")
        second = await service.ensure_admin_user("root@college.edu", "SecurePass123!")

        assert first.id == second.id
        assert first.is_admin


class TestStatsService:
    async def test_stats_on_empty_database(self, db_session: AsyncSession):
        stats = await StatsService(db_session).get_dashboard_stats()

        assert stats.total_donors == 0
        assert stats.inventory_stats == []
