"""
Admin loan review endpoints.
"""
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional

from app.core.database import get_db
from app.core.dependencies import require_admin
from app.core.security import Principal
from app.modules.admin.schemas import PendingLoanListResponse
from app.modules.loans.schemas import LoanActionResponse, LoanRejectRequest
from app.modules.loans.services import LoanService

router = APIRouter(prefix="/loans", tags=["admin-loans"])


@router.get("/pending", response_model=PendingLoanListResponse)
async def list_pending_loans(
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(require_admin)
):
    """List loans pending approval, oldest first"""
    service = LoanService(db)
    return {"requests": await service.get_pending_loans()}


@router.put("/{loan_id}/approve", response_model=LoanActionResponse)
async def approve_loan(
    loan_id: int,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(require_admin)
):
    """Approve a pending loan application"""
    service = LoanService(db)
    loan = await service.approve_loan(loan_id)
    return {"message": "Loan approved successfully", "loan": loan}


@router.put("/{loan_id}/reject", response_model=LoanActionResponse)
async def reject_loan(
    loan_id: int,
    reject_data: Optional[LoanRejectRequest] = None,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(require_admin)
):
    """Reject a pending loan application"""
    service = LoanService(db)
    reason = reject_data.reason if reject_data else None
    loan = await service.reject_loan(loan_id, reason)
    return {"message": "Loan rejected", "loan": loan}
