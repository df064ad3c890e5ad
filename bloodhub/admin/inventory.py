from sqladmin import ModelView

from bloodhub.database import async_session
from bloodhub.models import BloodInventory
from bloodhub.services.inventory import BloodInventoryService


class BloodInventoryAdmin(ModelView, model=BloodInventory):
    column_list = [
        BloodInventory.blood_type,
        BloodInventory.units_available,
        BloodInventory.donor_count,
        BloodInventory.low_stock_threshold,
        "is_low_stock",
        BloodInventory.last_updated,
    ]

    column_labels = {
        "is_low_stock": "Low Stock",
    }

    column_formatters = {
        "is_low_stock": lambda m, c: "Yes" if m.is_low_stock else "No",
    }

    # Records come from /inventory/initialize and donor registration;
    # donor_count only moves with registrations
    form_columns = [
        BloodInventory.units_available,
        BloodInventory.low_stock_threshold,
    ]

    column_default_sort = [(BloodInventory.blood_type, False)]

    can_create = False
    can_edit = True
    can_delete = False
    can_view_details = True

    name = "Blood Inventory"
    name_plural = "Blood Inventory"
    icon = "fa-solid fa-droplet"

    async def after_model_change(self, data, model, is_created, request):
        async with async_session() as db:
            await BloodInventoryService(db).check_low_stock()
