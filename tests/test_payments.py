"""
Unit tests for Payment Service
"""
import pytest
from sqlalchemy import select, func

from app.core.exceptions import InvalidStateError, NotFoundError
from app.modules.credit.models import CreditHistory, ScoreEvent
from app.modules.loans.models import LoanStatus, Payment
from app.modules.loans.services import LoanService, PaymentService


async def count_events(db_session, user_id, event):
    result = await db_session.execute(
        select(func.count(CreditHistory.id)).where(
            CreditHistory.user_id == user_id,
            CreditHistory.event_type == event
        )
    )
    return result.scalar()


class TestRecordPayment:
    """Tests for installment recording"""

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_first_installment(self, db_session, test_user, active_loan):
        service = PaymentService(db_session)

        payment = await service.record_payment(active_loan.id)

        assert payment.month_number == 1
        assert payment.amount == active_loan.monthly_payment == 102.0
        assert active_loan.status == LoanStatus.ACTIVE
        assert test_user.credit_score == 60
        assert await count_events(db_session, test_user.id, ScoreEvent.PAYMENT_MADE) == 1

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_last_installment_completes_loan(self, db_session, test_user, active_loan):
        service = PaymentService(db_session)

        await service.record_payment(active_loan.id)
        payment = await service.record_payment(active_loan.id)

        assert payment.month_number == 2
        assert active_loan.status == LoanStatus.COMPLETED
        assert active_loan.completed_at is not None
        # 50 after approval, +10 +10 for installments, +15 for completion
        assert test_user.credit_score == 85
        assert await count_events(db_session, test_user.id, ScoreEvent.PAYMENT_MADE) == 2
        assert await count_events(db_session, test_user.id, ScoreEvent.LOAN_COMPLETED) == 1

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_installments_are_contiguous(self, db_session, test_user):
        loans = LoanService(db_session)
        loan = await loans.apply_loan(test_user.id, 300, 3)
        await loans.approve_loan(loan.id)
        service = PaymentService(db_session)

        for _ in range(3):
            await service.record_payment(loan.id)

        result = await db_session.execute(
            select(Payment.month_number).where(Payment.loan_id == loan.id).order_by(Payment.month_number)
        )
        assert list(result.scalars().all()) == [1, 2, 3]

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_payment_beyond_term_fails(self, db_session, test_user, active_loan):
        service = PaymentService(db_session)
        await service.record_payment(active_loan.id)
        await service.record_payment(active_loan.id)

        with pytest.raises(InvalidStateError):
            await service.record_payment(active_loan.id)

        assert len(active_loan.payments) == 2
        assert await count_events(db_session, test_user.id, ScoreEvent.LOAN_COMPLETED) == 1

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_payment_on_pending_loan_fails(self, db_session, pending_loan):
        with pytest.raises(InvalidStateError):
            await PaymentService(db_session).record_payment(pending_loan.id)

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_payment_on_rejected_loan_fails(self, db_session, pending_loan):
        await LoanService(db_session).reject_loan(pending_loan.id)

        with pytest.raises(InvalidStateError):
            await PaymentService(db_session).record_payment(pending_loan.id)

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_payment_on_unknown_loan(self, db_session):
        with pytest.raises(NotFoundError):
            await PaymentService(db_session).record_payment(9999)

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_late_payment_costs_score(self, db_session, test_user, active_loan):
        service = PaymentService(db_session)

        payment = await service.record_payment(active_loan.id, late=True)

        assert payment.month_number == 1
        assert test_user.credit_score == 35
        assert await count_events(db_session, test_user.id, ScoreEvent.LATE_PAYMENT) == 1
        assert await count_events(db_session, test_user.id, ScoreEvent.PAYMENT_MADE) == 0

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_single_installment_loan(self, db_session, test_user):
        loans = LoanService(db_session)
        loan = await loans.apply_loan(test_user.id, 50, 1)
        await loans.approve_loan(loan.id)

        payment = await PaymentService(db_session).record_payment(loan.id)

        assert payment.amount == 50.5
        assert loan.status == LoanStatus.COMPLETED
        assert await count_events(db_session, test_user.id, ScoreEvent.LOAN_COMPLETED) == 1
