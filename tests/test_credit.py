"""
Unit tests for the credit score ledger
"""
import pytest
from sqlalchemy import select, func

from app.core.exceptions import NotFoundError
from app.modules.credit.models import CreditHistory, ScoreEvent, SCORE_RULES
from app.modules.credit.services import CreditScoreService, clamp_score


class TestScoreRules:
    """Tests for the event to delta table"""

    @pytest.mark.unit
    def test_event_deltas(self):
        """Each event carries its fixed delta"""
        assert ScoreEvent.ACCOUNT_CREATED.delta == 30
        assert ScoreEvent.LOAN_APPROVED.delta == 20
        assert ScoreEvent.PAYMENT_MADE.delta == 10
        assert ScoreEvent.LOAN_COMPLETED.delta == 15
        assert ScoreEvent.LATE_PAYMENT.delta == -15

    @pytest.mark.unit
    def test_every_event_has_a_rule(self):
        assert set(SCORE_RULES) == set(ScoreEvent)

    @pytest.mark.unit
    def test_clamp_score(self):
        assert clamp_score(-5) == 0
        assert clamp_score(0) == 0
        assert clamp_score(57) == 57
        assert clamp_score(100) == 100
        assert clamp_score(120) == 100


class TestApplyEvent:
    """Tests for applying score events"""

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_apply_event_updates_score_and_history(self, db_session, test_user):
        service = CreditScoreService(db_session)

        change = await service.apply_event(test_user.id, ScoreEvent.PAYMENT_MADE, "Installment 1/2 paid")

        assert change.previous_score == 30
        assert change.new_score == 40
        assert change.delta == 10
        assert test_user.credit_score == 40

        history = await service.get_history(test_user.id)
        assert len(history) == 1
        assert history[0].event_type == ScoreEvent.PAYMENT_MADE
        assert history[0].description == "Installment 1/2 paid"
        assert history[0].score_change == 10
        assert history[0].new_score == 40

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_score_capped_at_100_keeps_requested_delta(self, db_session, test_user):
        """Near the ceiling the history still records the full requested delta"""
        test_user.credit_score = 95
        await db_session.flush()
        service = CreditScoreService(db_session)

        change = await service.apply_event(test_user.id, ScoreEvent.LOAN_APPROVED, "Loan approved")

        assert change.previous_score == 95
        assert change.new_score == 100
        assert change.delta == 20

        history = await service.get_history(test_user.id)
        assert history[0].score_change == 20
        assert history[0].new_score == 100

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_score_floored_at_0(self, db_session, test_user):
        test_user.credit_score = 10
        await db_session.flush()
        service = CreditScoreService(db_session)

        change = await service.apply_event(test_user.id, ScoreEvent.LATE_PAYMENT, "Late installment")

        assert change.new_score == 0
        assert change.delta == -15
        assert test_user.credit_score == 0

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_score_stays_in_bounds_over_event_sequences(self, db_session, test_user):
        """Score never leaves [0, 100] whatever the order of events"""
        service = CreditScoreService(db_session)
        sequence = (
            [ScoreEvent.LATE_PAYMENT] * 5
            + [ScoreEvent.LOAN_APPROVED, ScoreEvent.PAYMENT_MADE] * 6
            + [ScoreEvent.LOAN_COMPLETED] * 3
            + [ScoreEvent.LATE_PAYMENT, ScoreEvent.ACCOUNT_CREATED] * 4
        )

        expected = test_user.credit_score
        for event in sequence:
            change = await service.apply_event(test_user.id, event, event.value)
            expected = min(100, max(0, expected + event.delta))
            assert 0 <= change.new_score <= 100
            assert change.new_score == expected

        count = await db_session.execute(
            select(func.count(CreditHistory.id)).where(CreditHistory.user_id == test_user.id)
        )
        assert count.scalar() == len(sequence)

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_apply_event_unknown_user(self, db_session):
        service = CreditScoreService(db_session)

        with pytest.raises(NotFoundError):
            await service.apply_event(9999, ScoreEvent.PAYMENT_MADE, "Nobody")

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_history_most_recent_first_and_limited(self, db_session, test_user):
        service = CreditScoreService(db_session)
        for i in range(25):
            await service.apply_event(test_user.id, ScoreEvent.PAYMENT_MADE, f"Event {i}")

        history = await service.get_history(test_user.id)

        assert len(history) == 20
        assert history[0].description == "Event 24"
        assert history[-1].description == "Event 5"
