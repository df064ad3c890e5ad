from typing import Annotated
from uuid import UUID

from pydantic import EmailStr, Field, StringConstraints, field_validator

from bloodhub.schemas.base_schema import BaseSchema, UserRole


class UserCreate(BaseSchema):
    email: EmailStr
    password: Annotated[str, StringConstraints(min_length=8, max_length=128)]
    role: UserRole = Field(
        default=UserRole.USER, validate_default=True, description="Account role"
    )

    @field_validator("email")
    @classmethod
    def email_fits_column(cls, v: str) -> str:
        if len(v) > 100:
            raise ValueError("email must be at most 100 characters")
        return v


class LoginRequest(BaseSchema):
    # Plain strings: malformed and unknown emails both fail as bad credentials
    email: Annotated[str, StringConstraints(min_length=1, max_length=100)]
    password: Annotated[str, StringConstraints(min_length=1, max_length=128)]


class UserResponse(BaseSchema):
    id: UUID
    email: str
    role: str


class LoginResponse(BaseSchema):
    token: str
    user: UserResponse


class TokenPrincipal(BaseSchema):
    """Identity carried by a verified bearer token"""

    id: UUID
    email: str
    role: str


class MessageResponse(BaseSchema):
    message: str
