from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional, List

from app.modules.loans.models import LoanStatus


class LoanApplicationRequest(BaseModel):
    """Loan application submitted by a client"""
    amount: float = Field(..., ge=50, le=300)
    term: int = Field(..., ge=1, le=3)
    purpose: Optional[str] = Field(None, max_length=255)


class LoanRejectRequest(BaseModel):
    reason: Optional[str] = Field(None, max_length=500)


class PaymentResponse(BaseModel):
    id: int
    loan_id: int
    amount: float
    month_number: int
    paid_at: datetime

    class Config:
        from_attributes = True


class LoanResponse(BaseModel):
    id: int
    user_id: int
    amount: float
    term: int
    monthly_rate: float
    total_interest: float
    total_payment: float
    monthly_payment: float
    purpose: Optional[str]
    status: LoanStatus
    rejection_reason: Optional[str]
    created_at: datetime
    approved_at: Optional[datetime]
    rejected_at: Optional[datetime]
    completed_at: Optional[datetime]

    class Config:
        from_attributes = True


class LoanWithPaymentsResponse(LoanResponse):
    payments: List[PaymentResponse] = []


class LoanApplicationResponse(BaseModel):
    message: str
    loan: LoanResponse


class LoanListResponse(BaseModel):
    loans: List[LoanWithPaymentsResponse]


class LoanActionResponse(BaseModel):
    """Result of an approve/reject transition"""
    message: str
    loan: LoanResponse


class PaymentRecordResponse(BaseModel):
    message: str
    payment: PaymentResponse
    loan_status: LoanStatus
