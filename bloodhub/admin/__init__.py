from fastapi import FastAPI
from sqladmin import Admin

from bloodhub.admin.auth import AdminAuth
from bloodhub.admin.donor_admin import DonorAdmin
from bloodhub.admin.inventory import BloodInventoryAdmin
from bloodhub.admin.notification_admin import NotificationAdmin
from bloodhub.admin.request_admin import BloodRequestAdmin
from bloodhub.admin.user_admin import UserAdmin
from bloodhub.config import settings
from bloodhub.database import engine


def setup_admin(app: FastAPI) -> Admin:
    admin = Admin(
        app,
        engine,
        base_url=settings.ADMIN_PATH,
        title=f"{settings.PROJECT_NAME} Admin",
        authentication_backend=AdminAuth(secret_key=settings.SECRET_KEY),
    )
    admin.add_view(UserAdmin)
    admin.add_view(DonorAdmin)
    admin.add_view(BloodInventoryAdmin)
    admin.add_view(BloodRequestAdmin)
    admin.add_view(NotificationAdmin)
    return admin
