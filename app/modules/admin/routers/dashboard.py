"""
Admin dashboard endpoints.
"""
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.dependencies import require_admin
from app.core.security import Principal
from app.modules.admin.schemas import DashboardResponse
from app.modules.admin.services import AdminService

router = APIRouter(prefix="/dashboard", tags=["admin-dashboard"])


@router.get("", response_model=DashboardResponse)
async def get_dashboard_stats(
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(require_admin)
):
    """Get client, loan and score aggregates"""
    service = AdminService(db)
    return {"stats": await service.get_dashboard_stats()}
