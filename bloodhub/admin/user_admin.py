from sqladmin import ModelView

from bloodhub.models import User
from bloodhub.utils.security import get_password_hash


class UserAdmin(ModelView, model=User):

    icon = "fa-solid fa-user"

    form_columns = [
        User.email,
        User.password,
        User.role,
    ]

    column_list = [
        User.id,
        User.email,
        User.role,
        User.created_at,
    ]

    column_details_exclude_list = [User.password]
    can_delete = False
    column_searchable_list = [User.email]
    column_sortable_list = [User.email, User.role, User.created_at]

    async def on_model_change(self, data, model, is_created, request):
        # Passwords typed into the console are stored hashed like API signups
        password = data.get("password")
        if password and password != model.password:
            data["password"] = get_password_hash(password)
