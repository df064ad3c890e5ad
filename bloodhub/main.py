from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.openapi.utils import get_openapi
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from bloodhub.admin import setup_admin
from bloodhub.config import settings
from bloodhub.database import IS_SERVERLESS, async_session, close_db, init_db
from bloodhub.dependencies import get_db
from bloodhub.middlewares.logging_middleware import setup_logging_middleware
from bloodhub.routes import router as api_router
from bloodhub.services.user_service import UserService
from bloodhub.utils.errors import register_exception_handlers
from bloodhub.utils.logging_config import get_logger

logger = get_logger(__name__)

# Routes that need a bearer token, for the Swagger security annotation
PROTECTED_PATHS = [
    f"{settings.API_PREFIX}/inventory/",
    f"{settings.API_PREFIX}/requests/",
    f"{settings.API_PREFIX}/files",
    f"{settings.API_PREFIX}/notifications",
    f"{settings.API_PREFIX}/dashboard",
]


async def seed_sys_admin():
    """Create the configured admin account when SYS_ADMIN is set"""
    if not (settings.SYS_ADMIN and settings.SYS_ADMIN_PASS):
        return

    async with async_session() as db:
        try:
            await UserService(db).ensure_admin_user(
                settings.SYS_ADMIN, settings.SYS_ADMIN_PASS
            )
        except SQLAlchemyError as e:
            logger.error(f"Error seeding system admin: {e}")
            await db.rollback()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for FastAPI application startup and shutdown events.
    """
    logger.info("Application starting up...")
    logger.info(f"Serverless mode: {IS_SERVERLESS}")

    await init_db()
    await seed_sys_admin()

    yield

    logger.info("Application shutting down...")
    await close_db()


def create_application() -> FastAPI:
    """Create the FastAPI application"""
    app = FastAPI(
        title=settings.PROJECT_NAME,
        description=settings.PROJECT_DESCRIPTION,
        version=settings.VERSION,
        docs_url=settings.DOCS_URL,
        redoc_url=None,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.BACKEND_CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "OPTIONS"],
        allow_headers=[
            "Content-Type",
            "Authorization",
            "Accept",
            "X-Requested-With",
            "Origin",
        ],
        expose_headers=["Content-Length", "Content-Type", "Content-Disposition"],
        max_age=600,
    )

    setup_logging_middleware(app)
    register_exception_handlers(app)

    app.include_router(api_router, prefix=settings.API_PREFIX)

    if settings.ENABLE_ADMIN_UI and not IS_SERVERLESS:
        setup_admin(app)
    else:
        logger.info("SQLAdmin console disabled")

    def custom_openapi():
        if app.openapi_schema:
            return app.openapi_schema

        openapi_schema = get_openapi(
            title=app.title,
            version=app.version,
            description=app.description,
            routes=app.routes,
        )

        openapi_schema.setdefault("components", {})["securitySchemes"] = {
            "BearerAuth": {
                "type": "http",
                "scheme": "bearer",
                "bearerFormat": "JWT",
            }
        }

        for path_key, path_item in openapi_schema["paths"].items():
            if any(path_key.startswith(p) for p in PROTECTED_PATHS):
                for method in path_item.values():
                    method.setdefault("security", []).append({"BearerAuth": []})

        app.openapi_schema = openapi_schema
        return app.openapi_schema

    app.openapi = custom_openapi

    @app.get("/")
    def read_root():
        return {
            "status": "ok",
            "message": f"{settings.PROJECT_NAME} is running",
            "environment": settings.ENVIRONMENT,
        }

    @app.get("/health")
    async def health_check(db: AsyncSession = Depends(get_db)):
        """Health check with database connectivity test"""
        try:
            await db.execute(select(1))
            return {"status": "healthy", "database": "connected"}
        except SQLAlchemyError as e:
            logger.error(f"Health check failed: {e}")
            return {"status": "unhealthy", "database": "disconnected", "error": str(e)}

    return app


app = create_application()
