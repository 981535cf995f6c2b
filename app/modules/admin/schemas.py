from pydantic import BaseModel, Field
from typing import List
from enum import Enum

from app.modules.loans.schemas import LoanResponse


# ============================================================
# Dashboard Schemas
# ============================================================

class DashboardStats(BaseModel):
    total_clients: int
    total_active_loans: int
    total_lent: float
    pending_requests: int
    average_score: int


class DashboardResponse(BaseModel):
    stats: DashboardStats


# ============================================================
# Client Schemas
# ============================================================

class ClientLoanStatus(str, Enum):
    ACTIVE = "active"
    NO_LOAN = "no_loan"


class ClientSummary(BaseModel):
    id: int
    name: str
    dni: str
    phone: str
    score: int
    active_amount: float = Field(0, ge=0)
    status: ClientLoanStatus


class ClientListResponse(BaseModel):
    clients: List[ClientSummary]


# ============================================================
# Loan Review Schemas
# ============================================================

class BorrowerSummary(BaseModel):
    nombres: str
    apellidos: str
    dni: str
    credit_score: int

    class Config:
        from_attributes = True


class PendingLoanResponse(LoanResponse):
    user: BorrowerSummary


class PendingLoanListResponse(BaseModel):
    requests: List[PendingLoanResponse]
