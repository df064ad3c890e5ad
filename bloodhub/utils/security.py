from datetime import datetime, timedelta, timezone
from typing import Optional
from uuid import UUID

from argon2 import PasswordHasher
from argon2.exceptions import VerifyMismatchError, HashingError, VerificationError, InvalidHashError
from fastapi import Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError, jwt

from bloodhub.config import settings
from bloodhub.schemas.user import TokenPrincipal
from bloodhub.utils.logging_config import get_logger, log_security_event
from bloodhub.utils.request_info import client_info

logger = get_logger(__name__)

# Argon2 password hashing configuration
ph = PasswordHasher(
    time_cost=3,
    memory_cost=65536,
    parallelism=1,
    hash_len=32,
    salt_len=16,
)

# auto_error is off so a missing token maps to 401 and a bad one to 403
oauth2_scheme = OAuth2PasswordBearer(
    tokenUrl=f"{settings.API_PREFIX}/auth/login", auto_error=False
)


class TokenManager:
    """Issues and verifies signed bearer tokens"""

    @staticmethod
    def create_access_token(
        user_id: UUID,
        email: str,
        role: str,
        expires_delta: Optional[timedelta] = None,
    ) -> str:
        """Create a JWT access token embedding the user's id, email and role"""
        expire = datetime.now(timezone.utc) + (
            expires_delta or timedelta(hours=settings.ACCESS_TOKEN_EXPIRE_HOURS)
        )
        to_encode = {
            "sub": str(user_id),
            "email": email,
            "role": role,
            "exp": expire,
            "type": "access",
        }
        return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)

    @staticmethod
    def decode_token(token: str) -> dict:
        """Decode and verify a JWT token"""
        try:
            return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
        except JWTError as e:
            raise ValueError("Invalid or expired token") from e

    @staticmethod
    def principal_from_token(token: str) -> TokenPrincipal:
        payload = TokenManager.decode_token(token)
        if payload.get("type") != "access" or not payload.get("sub"):
            raise ValueError("Invalid token type")
        return TokenPrincipal(
            id=UUID(payload["sub"]),
            email=payload.get("email"),
            role=payload.get("role"),
        )


def get_password_hash(password: str) -> str:
    """Hash a plaintext password using Argon2"""
    try:
        return ph.hash(password)
    except HashingError as e:
        logger.error(
            "Password hashing failed",
            extra={"event_type": "password_hashing_failed", "error": str(e)},
        )
        raise HTTPException(status_code=500, detail="Password hashing failed") from e


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a plaintext password against an Argon2 hashed password"""
    try:
        ph.verify(hashed_password, plain_password)
        return True
    except VerifyMismatchError:
        return False
    except (VerificationError, InvalidHashError) as e:
        logger.error(
            "Password verification error",
            extra={"event_type": "password_verification_error", "error": str(e)},
        )
        return False


def needs_rehash(hashed_password: str) -> bool:
    """Check if password hash needs to be updated with current parameters"""
    try:
        return ph.check_needs_rehash(hashed_password)
    except InvalidHashError:
        return True


async def get_current_user(
    request: Request,
    token: Optional[str] = Depends(oauth2_scheme),
) -> TokenPrincipal:
    """Resolve the bearer token into the calling principal"""
    client = client_info(request)

    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Access token required",
            headers={"WWW-Authenticate": "Bearer"},
        )

    try:
        return TokenManager.principal_from_token(token)
    except ValueError as e:
        log_security_event(
            event_type="invalid_token",
            ip_address=client.ip_address,
            user_agent=client.user_agent,
            details={"path": request.url.path, "error": str(e)},
        )
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Invalid token",
        )
