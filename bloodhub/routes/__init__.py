from fastapi import APIRouter
from .auth_routes import router as auth_router
from .inventory_routes import router as inventory_router
from .donor_routes import router as donor_router
from .request_routes import router as request_router
from .file_routes import router as file_router
from .notification_routes import router as notification_router
from .stats_routes import router as stats_router


router = APIRouter()

router.include_router(auth_router)
router.include_router(inventory_router)
router.include_router(donor_router)
router.include_router(request_router)
router.include_router(file_router)
router.include_router(notification_router)
router.include_router(stats_router)
