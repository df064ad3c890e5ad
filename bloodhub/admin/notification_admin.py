from sqladmin import ModelView

from bloodhub.models import Notification


class NotificationAdmin(ModelView, model=Notification):
    icon = "fa-solid fa-bell"

    column_list = [
        Notification.type,
        Notification.title,
        Notification.target_audience,
        Notification.is_read,
        Notification.created_at,
    ]

    can_create = False
    can_edit = False
    can_delete = False

    column_default_sort = [(Notification.created_at, True)]
