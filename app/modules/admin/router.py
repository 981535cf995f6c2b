"""
Admin module sub-routers organized by domain.
"""
from fastapi import APIRouter

from app.modules.admin.routers.dashboard import router as dashboard_router
from app.modules.admin.routers.clients import router as clients_router
from app.modules.admin.routers.loans import router as loans_router
from app.modules.admin.routers.payments import router as payments_router

# Main admin router
router = APIRouter(prefix="/admin", tags=["admin"])

# Include all sub-routers
router.include_router(dashboard_router)
router.include_router(clients_router)
router.include_router(loans_router)
router.include_router(payments_router)
