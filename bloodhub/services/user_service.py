from typing import Optional

from fastapi import HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from bloodhub.models.user_model import User
from bloodhub.schemas.base_schema import UserRole
from bloodhub.schemas.user import UserCreate
from bloodhub.utils.logging_config import get_logger, log_security_event
from bloodhub.utils.security import get_password_hash, needs_rehash, verify_password

logger = get_logger(__name__)

INVALID_CREDENTIALS = "Invalid credentials"
USER_EXISTS = "User already exists"


class UserService:
    """Account registration and credential checks"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_by_email(self, email: str) -> Optional[User]:
        result = await self.db.execute(
            select(User).where(User.email == email.strip().lower())
        )
        return result.scalar_one_or_none()

    async def email_taken(self, email: str) -> bool:
        result = await self.db.execute(select(User.id).where(User.email == email).limit(1))
        return result.scalar_one_or_none() is not None

    async def create_user(self, user_data: UserCreate) -> User:
        email = user_data.email.strip().lower()

        if await self.email_taken(email):
            raise HTTPException(status_code=400, detail=USER_EXISTS)

        user = User(
            email=email,
            password=get_password_hash(user_data.password),
            role=user_data.role,
        )
        self.db.add(user)
        try:
            await self.db.commit()
        except IntegrityError:
            # Lost a race with a concurrent registration of the same email
            await self.db.rollback()
            raise HTTPException(status_code=400, detail=USER_EXISTS)
        await self.db.refresh(user)

        logger.info(
            "User registered",
            extra={"event_type": "user_registered", "user_id": str(user.id), "role": user.role},
        )
        return user

    async def authenticate_user(
        self, email: str, password: str, ip_address: str = None, user_agent: str = None
    ) -> User:
        """
        Return the user matching the credentials. Unknown emails and wrong
        passwords raise the same error so accounts cannot be enumerated.
        """
        user = await self.get_by_email(email)

        if user is None or not verify_password(password, user.password):
            log_security_event(
                event_type="failed_login_attempt",
                user_id=str(user.id) if user else None,
                ip_address=ip_address,
                user_agent=user_agent,
                details={"reason": "user_not_found" if user is None else "bad_password"},
            )
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail=INVALID_CREDENTIALS,
                headers={"WWW-Authenticate": "Bearer"},
            )

        if needs_rehash(user.password):
            user.password = get_password_hash(password)
            await self.db.commit()
            logger.info(
                "Password rehashed with updated parameters",
                extra={"event_type": "password_rehashed", "user_id": str(user.id)},
            )

        log_security_event(
            event_type="successful_login",
            user_id=str(user.id),
            ip_address=ip_address,
            user_agent=user_agent,
        )
        return user

    async def ensure_admin_user(self, email: str, password: str) -> User:
        """Create the configured system admin on first start."""
        user = await self.get_by_email(email)
        if user is not None:
            return user

        user = User(
            email=email.strip().lower(),
            password=get_password_hash(password),
            role=UserRole.ADMIN.value,
        )
        self.db.add(user)
        await self.db.commit()
        await self.db.refresh(user)
        logger.info("System admin created", extra={"event_type": "sys_admin_seeded"})
        return user
