from fastapi import Depends, HTTPException, Request, status

from bloodhub.schemas.user import TokenPrincipal
from bloodhub.utils.logging_config import get_logger, log_security_event
from bloodhub.utils.request_info import client_info
from bloodhub.utils.security import get_current_user

logger = get_logger(__name__)


def require_role(*roles: str):
    """
    Dependency factory that admits only principals holding one of ``roles``.

    Usage:
        current_user: TokenPrincipal = Depends(require_role("admin"))
    """

    async def checker(
        request: Request,
        current_user: TokenPrincipal = Depends(get_current_user),
    ) -> TokenPrincipal:
        if current_user.role not in roles:
            client = client_info(request)
            log_security_event(
                event_type="unauthorized_role_access_attempt",
                user_id=str(current_user.id),
                ip_address=client.ip_address,
                user_agent=client.user_agent,
                details={
                    "required_roles": list(roles),
                    "user_role": current_user.role,
                    "path": request.url.path,
                },
            )

            logger.warning(
                "Access denied - insufficient role",
                extra={
                    "event_type": "access_denied_roles",
                    "user_id": str(current_user.id),
                    "required_roles": list(roles),
                },
            )

            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=(
                    "Admin access required"
                    if roles == ("admin",)
                    else f"Access denied. Requires one of these roles: {', '.join(roles)}"
                ),
            )

        return current_user

    return checker


# Shared guard for admin-only routes
require_admin = require_role("admin")
