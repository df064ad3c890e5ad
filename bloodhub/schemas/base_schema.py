from enum import Enum
from typing import List

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class BaseSchema(BaseModel):
    """Base schema: snake_case attributes, camelCase on the wire"""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
        str_strip_whitespace=True,
        use_enum_values=True,
    )


class BloodType(str, Enum):
    """Enum for valid blood types"""

    A_POSITIVE = "A+"
    A_NEGATIVE = "A-"
    B_POSITIVE = "B+"
    B_NEGATIVE = "B-"
    AB_POSITIVE = "AB+"
    AB_NEGATIVE = "AB-"
    O_POSITIVE = "O+"
    O_NEGATIVE = "O-"

    @classmethod
    def get_values(cls) -> List[str]:
        """Get all valid blood type values"""
        return [item.value for item in cls]


class UserRole(str, Enum):
    ADMIN = "admin"
    USER = "user"


class Gender(str, Enum):
    MALE = "Male"
    FEMALE = "Female"
    OTHER = "Other"


class RequestStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    FULFILLED = "fulfilled"
    REJECTED = "rejected"

    @classmethod
    def open_statuses(cls) -> List[str]:
        """Statuses of requests that still need blood"""
        return [cls.PENDING.value, cls.APPROVED.value]


class NotificationType(str, Enum):
    EMERGENCY_REQUEST = "emergency_request"
    LOW_STOCK = "low_stock"
    DONATION_NEEDED = "donation_needed"


class TargetAudience(str, Enum):
    ALL = "all"
    ADMINS = "admins"
    DONORS = "donors"

    @classmethod
    def for_role(cls, role: str) -> "TargetAudience":
        """Audience a principal with the given role reads from"""
        return cls.ADMINS if role == UserRole.ADMIN.value else cls.DONORS

    @classmethod
    def for_notification_type(cls, notification_type: str) -> "TargetAudience":
        """Low-stock alerts go to admins, everything else is broadcast"""
        if notification_type == NotificationType.LOW_STOCK.value:
            return cls.ADMINS
        return cls.ALL
