import logging
from dataclasses import dataclass
from typing import Optional, List

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.core.database import utcnow
from app.core.exceptions import ValidationError, ConflictError, NotFoundError, InvalidStateError
from app.modules.credit.models import ScoreEvent
from app.modules.credit.services import CreditScoreService
from app.modules.loans.models import Loan, LoanStatus, Payment, OPEN_LOAN_STATUSES
from app.modules.users.models import User

logger = logging.getLogger(__name__)

MONTHLY_RATE = 0.01
MIN_LOAN_AMOUNT = 50
MAX_LOAN_AMOUNT = 300
MIN_TERM = 1
MAX_TERM = 3
DEFAULT_REJECTION_REASON = "Does not meet requirements"


@dataclass(frozen=True)
class LoanSchedule:
    """Simple-interest figures for a loan, split evenly across installments"""
    monthly_rate: float
    total_interest: float
    total_payment: float
    monthly_payment: float


def calculate_schedule(amount: float, term: int, monthly_rate: float = MONTHLY_RATE) -> LoanSchedule:
    """Compute interest and installment amounts; no currency rounding is applied"""
    total_interest = amount * monthly_rate * term
    total_payment = amount + total_interest
    return LoanSchedule(
        monthly_rate=monthly_rate,
        total_interest=total_interest,
        total_payment=total_payment,
        monthly_payment=total_payment / term
    )


def validate_application(amount: float, term: int) -> None:
    errors = {}
    if not MIN_LOAN_AMOUNT <= amount <= MAX_LOAN_AMOUNT:
        errors["amount"] = f"Amount must be between {MIN_LOAN_AMOUNT} and {MAX_LOAN_AMOUNT}"
    if not MIN_TERM <= term <= MAX_TERM:
        errors["term"] = f"Term must be between {MIN_TERM} and {MAX_TERM} installments"
    if errors:
        raise ValidationError("Invalid loan application", details=errors)


class LoanService:
    """Loan lifecycle: PENDING -> ACTIVE -> COMPLETED, PENDING -> REJECTED"""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.credit = CreditScoreService(db)

    async def get_loan_for_update(self, loan_id: int) -> Loan:
        result = await self.db.execute(
            select(Loan)
            .where(Loan.id == loan_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        loan = result.scalar_one_or_none()
        if loan is None:
            raise NotFoundError("Loan", loan_id)
        return loan

    async def apply_loan(
        self,
        user_id: int,
        amount: float,
        term: int,
        purpose: Optional[str] = None
    ) -> Loan:
        """Create a PENDING loan unless the user already has an open one"""
        validate_application(amount, term)

        # Lock the borrower so two applications cannot both pass the open-loan check
        result = await self.db.execute(
            select(User.id).where(User.id == user_id).with_for_update()
        )
        if result.scalar_one_or_none() is None:
            raise NotFoundError("User", user_id)

        result = await self.db.execute(
            select(Loan.id).where(
                Loan.user_id == user_id,
                Loan.status.in_(OPEN_LOAN_STATUSES)
            ).limit(1)
        )
        if result.scalar_one_or_none() is not None:
            logger.warning("User %s applied while holding an open loan", user_id)
            raise ConflictError(
                "You already have a loan in progress. Finish paying it before applying again."
            )

        schedule = calculate_schedule(amount, term)
        loan = Loan(
            user_id=user_id,
            amount=amount,
            term=term,
            monthly_rate=schedule.monthly_rate,
            total_interest=schedule.total_interest,
            total_payment=schedule.total_payment,
            monthly_payment=schedule.monthly_payment,
            purpose=purpose,
            status=LoanStatus.PENDING,
            payments=[]
        )
        self.db.add(loan)
        await self.db.flush()

        logger.info("Loan %s requested by user %s: amount=%s term=%s", loan.id, user_id, amount, term)
        return loan

    async def approve_loan(self, loan_id: int) -> Loan:
        """Activate a pending loan and credit the borrower's score"""
        loan = await self.get_loan_for_update(loan_id)
        if loan.status != LoanStatus.PENDING:
            logger.warning("Refused to approve loan %s in status %s", loan_id, loan.status.value)
            raise InvalidStateError(
                "Only pending loans can be approved",
                details={"loan_id": loan_id, "status": loan.status.value}
            )

        loan.status = LoanStatus.ACTIVE
        loan.approved_at = utcnow()
        await self.db.flush()

        await self.credit.apply_event(
            loan.user_id,
            ScoreEvent.LOAN_APPROVED,
            f"Loan approved (S/{loan.amount})"
        )
        logger.info("Loan %s approved", loan_id)
        return loan

    async def reject_loan(self, loan_id: int, reason: Optional[str] = None) -> Loan:
        loan = await self.get_loan_for_update(loan_id)
        if loan.status != LoanStatus.PENDING:
            logger.warning("Refused to reject loan %s in status %s", loan_id, loan.status.value)
            raise InvalidStateError(
                "Only pending loans can be rejected",
                details={"loan_id": loan_id, "status": loan.status.value}
            )

        loan.status = LoanStatus.REJECTED
        loan.rejection_reason = reason or DEFAULT_REJECTION_REASON
        loan.rejected_at = utcnow()
        await self.db.flush()

        logger.info("Loan %s rejected: %s", loan_id, loan.rejection_reason)
        return loan

    async def get_user_loans(self, user_id: int) -> List[Loan]:
        """All loans of a user with their payments, newest first"""
        result = await self.db.execute(
            select(Loan)
            .where(Loan.user_id == user_id)
            .order_by(Loan.created_at.desc(), Loan.id.desc())
        )
        return list(result.scalars().all())

    async def get_active_loan(self, user_id: int) -> Optional[Loan]:
        result = await self.db.execute(
            select(Loan)
            .where(Loan.user_id == user_id, Loan.status == LoanStatus.ACTIVE)
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def get_pending_loans(self) -> List[Loan]:
        """Pending applications with their borrower, oldest first"""
        result = await self.db.execute(
            select(Loan)
            .options(selectinload(Loan.user))
            .where(Loan.status == LoanStatus.PENDING)
            .order_by(Loan.created_at.asc(), Loan.id.asc())
        )
        return list(result.scalars().all())


class PaymentService:
    """Records installments against active loans"""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.loans = LoanService(db)
        self.credit = CreditScoreService(db)

    async def record_payment(self, loan_id: int, late: bool = False) -> Payment:
        """
        Record the next installment of an active loan.

        A late installment is recorded like any other but costs score
        instead of earning it. Paying the last installment completes the
        loan and grants the completion bonus.
        """
        loan = await self.loans.get_loan_for_update(loan_id)
        if loan.status != LoanStatus.ACTIVE:
            logger.warning("Payment refused for loan %s in status %s", loan_id, loan.status.value)
            raise InvalidStateError(
                "Loan is not active",
                details={"loan_id": loan_id, "status": loan.status.value}
            )

        paid = len(loan.payments)
        if paid >= loan.term:
            raise InvalidStateError(
                "All installments of this loan are already paid",
                details={"loan_id": loan_id, "term": loan.term}
            )

        payment = Payment(
            loan_id=loan.id,
            amount=loan.monthly_payment,
            month_number=paid + 1
        )
        loan.payments.append(payment)
        await self.db.flush()

        event = ScoreEvent.LATE_PAYMENT if late else ScoreEvent.PAYMENT_MADE
        await self.credit.apply_event(
            loan.user_id,
            event,
            f"Installment {payment.month_number}/{loan.term} paid"
        )
        logger.info(
            "Installment %s/%s recorded for loan %s (late=%s)",
            payment.month_number, loan.term, loan_id, late
        )

        if payment.month_number == loan.term:
            loan.status = LoanStatus.COMPLETED
            loan.completed_at = utcnow()
            await self.db.flush()

            await self.credit.apply_event(
                loan.user_id,
                ScoreEvent.LOAN_COMPLETED,
                f"Loan #{loan.id} completed"
            )
            logger.info("Loan %s completed", loan_id)

        return payment
