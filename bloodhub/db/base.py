from datetime import datetime, timezone
from sqlalchemy.orm import declarative_base
from sqlalchemy import TypeDecorator, String
from sqlalchemy.dialects.postgresql import UUID as PGUUID
import uuid as uuid_module


class UUID(TypeDecorator):
    """
    Platform-independent UUID type.

    Uses PostgreSQL's native UUID type when available,
    otherwise stores a 32-char hex string (no dashes) on SQLite.
    """

    impl = String(32)
    cache_ok = True

    def load_dialect_impl(self, dialect):
        if dialect.name == "postgresql":
            return dialect.type_descriptor(PGUUID(as_uuid=True))
        return dialect.type_descriptor(String(32))

    def process_bind_param(self, value, dialect):
        if value is None:
            return value
        if dialect.name == "postgresql":
            return (
                value
                if isinstance(value, uuid_module.UUID)
                else uuid_module.UUID(value)
            )
        if isinstance(value, uuid_module.UUID):
            return value.hex
        if isinstance(value, str):
            return value.replace("-", "")
        return value

    def process_result_value(self, value, dialect):
        if value is None or isinstance(value, uuid_module.UUID):
            return value
        if len(value) == 32:
            return uuid_module.UUID(hex=value)
        return uuid_module.UUID(value)


def utcnow() -> datetime:
    """Timezone-aware current time used for column defaults"""
    return datetime.now(timezone.utc)


Base = declarative_base()
