from sqladmin import ModelView

from bloodhub.models import BloodRequest


class BloodRequestAdmin(ModelView, model=BloodRequest):
    icon = "fa-solid fa-truck-medical"
    name = "Blood Request"
    name_plural = "Blood Requests"

    column_list = [
        BloodRequest.id,
        BloodRequest.patient_name,
        BloodRequest.blood_type_needed,
        BloodRequest.units_required,
        BloodRequest.hospital_name,
        BloodRequest.is_emergency,
        BloodRequest.status,
        BloodRequest.requested_at,
    ]

    # Status changes go through the API so fulfillment adjusts inventory
    form_columns = [BloodRequest.admin_notes]

    can_create = False
    can_delete = False

    column_searchable_list = [BloodRequest.patient_name, BloodRequest.college_roll_number]
    column_sortable_list = [BloodRequest.requested_at, BloodRequest.status]
    column_default_sort = [(BloodRequest.requested_at, True)]
