"""
Users module sub-routers.
"""
from fastapi import APIRouter

from app.modules.users.routers.auth import router as auth_router
from app.modules.users.routers.clients import router as clients_router

router = APIRouter()

router.include_router(auth_router)
router.include_router(clients_router)
