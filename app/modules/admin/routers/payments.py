"""
Admin installment payment endpoints.
"""
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.dependencies import require_admin
from app.core.security import Principal
from app.modules.loans.schemas import PaymentRecordResponse
from app.modules.loans.services import PaymentService

router = APIRouter(prefix="/payments", tags=["admin-payments"])


@router.post("/{loan_id}", response_model=PaymentRecordResponse, status_code=status.HTTP_201_CREATED)
async def record_payment(
    loan_id: int,
    late: bool = Query(False, description="Installment was paid after its due date"),
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(require_admin)
):
    """
    Record the next installment of an active loan.

    - Amount is the loan's monthly payment
    - The last installment completes the loan
    """
    service = PaymentService(db)
    payment = await service.record_payment(loan_id, late=late)
    return {
        "message": "Payment recorded successfully",
        "payment": payment,
        "loan_status": payment.loan.status
    }
