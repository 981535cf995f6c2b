from sqlalchemy import Column, Integer, String, ForeignKey, DateTime, Enum as SQLEnum
from sqlalchemy.orm import relationship
from app.core.database import Base, utcnow
import enum


class ScoreEvent(str, enum.Enum):
    """Closed set of occurrences that move a user's credit score"""
    ACCOUNT_CREATED = "ACCOUNT_CREATED"
    LOAN_APPROVED = "LOAN_APPROVED"
    PAYMENT_MADE = "PAYMENT_MADE"
    LOAN_COMPLETED = "LOAN_COMPLETED"
    LATE_PAYMENT = "LATE_PAYMENT"

    @property
    def delta(self) -> int:
        """Signed score change requested by this event"""
        return SCORE_RULES[self]


SCORE_RULES = {
    ScoreEvent.ACCOUNT_CREATED: 30,
    ScoreEvent.LOAN_APPROVED: 20,
    ScoreEvent.PAYMENT_MADE: 10,
    ScoreEvent.LOAN_COMPLETED: 15,
    ScoreEvent.LATE_PAYMENT: -15,
}

MIN_SCORE = 0
MAX_SCORE = 100


class CreditHistory(Base):
    """Append-only audit record of one score event"""
    __tablename__ = "credit_history"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), index=True, nullable=False)
    event_type = Column(SQLEnum(ScoreEvent), nullable=False)
    description = Column(String(255), nullable=False)
    # Requested delta; may overstate the applied change near the bounds
    score_change = Column(Integer, nullable=False)
    new_score = Column(Integer, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    user = relationship("User", back_populates="credit_history")

    def __repr__(self):
        return f"<CreditHistory(user_id={self.user_id}, event={self.event_type}, new_score={self.new_score})>"
