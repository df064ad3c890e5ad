import logging
import os
from sqlalchemy.engine.url import make_url
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import NullPool, StaticPool
from bloodhub.db.base import Base
from bloodhub.config import settings

logger = logging.getLogger(__name__)

DATABASE_URL = settings.DATABASE_URL

url = make_url(DATABASE_URL)
connect_args = {}

# Check if running on a serverless platform
IS_SERVERLESS = (
    os.getenv("VERCEL") == "1" or os.getenv("AWS_LAMBDA_FUNCTION_NAME") is not None
)

logger.info(f"Database backend: {url.get_backend_name()}")

if url.get_backend_name() == "sqlite":
    connect_args = {"check_same_thread": False}

if IS_SERVERLESS:
    # No connection reuse between invocations
    engine = create_async_engine(
        DATABASE_URL,
        poolclass=NullPool,
        connect_args=connect_args,
        echo=False,
    )
    logger.info("Using NullPool for serverless environment")

elif url.get_backend_name() == "sqlite" and url.database in (None, "", ":memory:"):
    # In-memory databases only live as long as their single connection
    engine = create_async_engine(
        DATABASE_URL,
        poolclass=StaticPool,
        connect_args=connect_args,
        echo=False,
    )

elif url.get_backend_name() == "sqlite":
    engine = create_async_engine(
        DATABASE_URL,
        connect_args=connect_args,
        echo=False,
    )

else:
    engine = create_async_engine(
        DATABASE_URL,
        connect_args=connect_args,
        pool_size=settings.DATABASE_POOL_SIZE,
        max_overflow=settings.DATABASE_MAX_OVERFLOW,
        pool_recycle=1800,
        pool_pre_ping=True,
        echo=False,
    )
    logger.info("Using traditional connection pooling")

async_session = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)

# Import models so metadata.create_all sees every table
from bloodhub.models import (  # noqa: E402,F401
    User,
    Donor,
    BloodInventory,
    BloodRequest,
    Notification,
    FileBlob,
)


async def init_db():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
        logger.info("Database initialized successfully.")


async def close_db():
    """Close database connections gracefully"""
    try:
        await engine.dispose()
        logger.info("Database connections closed.")
    except Exception as e:
        logger.error(f"Error closing database connections: {e}")
