from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from app.core.database import get_db
from app.core.dependencies import get_current_principal
from app.core.security import Principal
from app.modules.loans.schemas import LoanApplicationRequest, LoanApplicationResponse, LoanListResponse
from app.modules.loans.services import LoanService

router = APIRouter(prefix="/loans", tags=["loans"])


@router.post("/apply", response_model=LoanApplicationResponse, status_code=status.HTTP_201_CREATED)
async def apply_loan(
    loan: LoanApplicationRequest,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_current_principal)
):
    """
    Apply for a loan of 50 to 300 over 1 to 3 monthly installments.

    Fails while the caller has a pending or active loan.
    """
    service = LoanService(db)
    db_loan = await service.apply_loan(principal.user_id, loan.amount, loan.term, loan.purpose)
    return {"message": "Loan requested successfully", "loan": db_loan}


@router.get("/my", response_model=LoanListResponse)
async def read_my_loans(
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_current_principal)
):
    service = LoanService(db)
    return {"loans": await service.get_user_loans(principal.user_id)}
