from fastapi import HTTPException
from sqladmin.authentication import AuthenticationBackend
from starlette.requests import Request

from bloodhub.database import async_session
from bloodhub.services.user_service import UserService
from bloodhub.utils.logging_config import get_logger
from bloodhub.utils.request_info import client_info
from bloodhub.utils.security import TokenManager

logger = get_logger(__name__)


class AdminAuth(AuthenticationBackend):
    """Console sessions hold an API access token issued to an admin account"""

    async def login(self, request: Request) -> bool:
        form = await request.form()
        client = client_info(request)

        async with async_session() as db:
            try:
                user = await UserService(db).authenticate_user(
                    str(form.get("username", "")),
                    str(form.get("password", "")),
                    ip_address=client.ip_address,
                    user_agent=client.user_agent,
                )
            except HTTPException:
                return False

        if not user.is_admin:
            logger.warning(
                "Admin console login refused for non-admin account",
                extra={"event_type": "admin_console_denied", "user_id": str(user.id)},
            )
            return False

        request.session.update(
            {"token": TokenManager.create_access_token(user.id, user.email, user.role)}
        )
        return True

    async def logout(self, request: Request) -> bool:
        request.session.clear()
        return True

    async def authenticate(self, request: Request) -> bool:
        token = request.session.get("token")
        if not token:
            return False
        try:
            principal = TokenManager.principal_from_token(token)
        except ValueError:
            return False
        return principal.role == "admin"
