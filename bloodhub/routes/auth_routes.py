from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from bloodhub.dependencies import get_db
from bloodhub.schemas.user import (
    LoginRequest,
    LoginResponse,
    MessageResponse,
    UserCreate,
    UserResponse,
)
from bloodhub.services.user_service import UserService
from bloodhub.utils.errors import server_error
from bloodhub.utils.logging_config import get_logger
from bloodhub.utils.request_info import client_info
from bloodhub.utils.security import TokenManager

logger = get_logger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post(
    "/register", response_model=MessageResponse, status_code=status.HTTP_201_CREATED
)
async def register(
    user_data: UserCreate, request: Request, db: AsyncSession = Depends(get_db)
):
    """Create a user account. Role defaults to ``user``."""
    logger.info(
        "User registration attempt",
        extra={
            "event_type": "registration_attempt",
            "role": user_data.role,
            "client_ip": client_info(request).ip_address,
        },
    )
    try:
        await UserService(db).create_user(user_data)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(
            "User registration failed",
            extra={"event_type": "registration_error", "error": str(e)},
            exc_info=True,
        )
        raise server_error("Error registering user", e)

    return MessageResponse(message="User registered successfully")


@router.post("/login", response_model=LoginResponse)
async def login(
    credentials: LoginRequest, request: Request, db: AsyncSession = Depends(get_db)
):
    """Exchange email and password for a bearer token valid for 24 hours"""
    client = client_info(request)
    try:
        user = await UserService(db).authenticate_user(
            credentials.email,
            credentials.password,
            ip_address=client.ip_address,
            user_agent=client.user_agent,
        )
    except HTTPException:
        raise
    except Exception as e:
        logger.error(
            "Login failed",
            extra={"event_type": "login_error", "error": str(e)},
            exc_info=True,
        )
        raise server_error("Error logging in", e)

    token = TokenManager.create_access_token(user.id, user.email, user.role)
    return LoginResponse(token=token, user=UserResponse.model_validate(user))
