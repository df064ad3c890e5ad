from sqladmin import ModelView

from bloodhub.models import Donor


class DonorAdmin(ModelView, model=Donor):
    icon = "fa-solid fa-hand-holding-droplet"
    name = "Donor"
    name_plural = "Donors"

    column_list = [
        Donor.id,
        Donor.name,
        Donor.roll_number,
        Donor.branch,
        Donor.blood_group,
        Donor.is_available,
        Donor.last_donation_date,
        Donor.registered_at,
    ]

    form_columns = [
        Donor.name,
        Donor.branch,
        Donor.roll_number,
        Donor.contact_info,
        Donor.is_available,
        Donor.last_donation_date,
    ]

    # Registrations go through the API and blood_group is not editable,
    # so inventory donor counts stay in step
    can_create = False
    can_delete = False

    column_searchable_list = [Donor.name, Donor.roll_number]
    column_sortable_list = [Donor.registered_at, Donor.blood_group]
