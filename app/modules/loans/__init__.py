# Loans module
from app.modules.loans.models import Loan, Payment, LoanStatus
from app.modules.loans.services import LoanService, PaymentService, calculate_schedule
from app.modules.loans.router import router

__all__ = [
    "Loan", "Payment", "LoanStatus",
    "LoanService", "PaymentService", "calculate_schedule", "router"
]
