"""
Credit score ledger.

The only writer of ``User.credit_score``. Each event appends a
CreditHistory row and stores the clamped running score on the user.
"""
import logging
from dataclasses import dataclass
from typing import List

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import NotFoundError
from app.modules.credit.models import CreditHistory, ScoreEvent, MIN_SCORE, MAX_SCORE
from app.modules.users.models import User

logger = logging.getLogger(__name__)

HISTORY_PAGE_SIZE = 20


@dataclass(frozen=True)
class ScoreChange:
    """Outcome of applying one score event"""
    previous_score: int
    new_score: int
    delta: int


def clamp_score(score: int) -> int:
    return max(MIN_SCORE, min(MAX_SCORE, score))


class CreditScoreService:
    """Applies score events and reads the audit trail"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def apply_event(
        self,
        user_id: int,
        event: ScoreEvent,
        description: str
    ) -> ScoreChange:
        """
        Apply a score event to a user.

        The user row is locked for the read, history insert and score
        write, so concurrent events for the same user serialize instead
        of overwriting each other.
        """
        event = ScoreEvent(event)
        # populate_existing below would discard unflushed changes
        await self.db.flush()
        result = await self.db.execute(
            select(User)
            .where(User.id == user_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        user = result.scalar_one_or_none()
        if user is None:
            raise NotFoundError("User", user_id)

        previous_score = user.credit_score
        new_score = clamp_score(previous_score + event.delta)

        self.db.add(CreditHistory(
            user_id=user_id,
            event_type=event,
            description=description,
            score_change=event.delta,
            new_score=new_score
        ))
        user.credit_score = new_score
        await self.db.flush()

        logger.info(
            "Score event %s for user %s: %s -> %s",
            event.value, user_id, previous_score, new_score
        )
        return ScoreChange(previous_score=previous_score, new_score=new_score, delta=event.delta)

    async def get_history(self, user_id: int, limit: int = HISTORY_PAGE_SIZE) -> List[CreditHistory]:
        """Most recent score events first"""
        result = await self.db.execute(
            select(CreditHistory)
            .where(CreditHistory.user_id == user_id)
            .order_by(CreditHistory.created_at.desc(), CreditHistory.id.desc())
            .limit(limit)
        )
        return list(result.scalars().all())
