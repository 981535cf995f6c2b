"""
Admin client listing endpoints.
"""
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.dependencies import require_admin
from app.core.security import Principal
from app.modules.admin.schemas import ClientListResponse
from app.modules.admin.services import AdminService

router = APIRouter(prefix="/clients", tags=["admin-clients"])


@router.get("", response_model=ClientListResponse)
async def list_clients(
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(require_admin)
):
    """List all clients with score and active loan amount"""
    service = AdminService(db)
    return {"clients": await service.list_clients()}
