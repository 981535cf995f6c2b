from sqlalchemy import Column, Integer, String, Float, ForeignKey, DateTime, Text, Enum as SQLEnum, UniqueConstraint
from sqlalchemy.orm import relationship
from app.core.database import Base, utcnow
import enum


class LoanStatus(str, enum.Enum):
    """Loan lifecycle status"""
    PENDING = "PENDING"
    ACTIVE = "ACTIVE"
    REJECTED = "REJECTED"
    COMPLETED = "COMPLETED"


# Statuses that count as the user's open loan
OPEN_LOAN_STATUSES = (LoanStatus.PENDING, LoanStatus.ACTIVE)


class Loan(Base):
    """Microloan repaid in equal monthly installments"""
    __tablename__ = "loans"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), index=True, nullable=False)

    # Terms
    amount = Column(Float, nullable=False)
    term = Column(Integer, nullable=False)
    monthly_rate = Column(Float, nullable=False)
    total_interest = Column(Float, nullable=False)
    total_payment = Column(Float, nullable=False)
    monthly_payment = Column(Float, nullable=False)
    purpose = Column(String(255), nullable=True)

    # Lifecycle
    status = Column(SQLEnum(LoanStatus), default=LoanStatus.PENDING, index=True, nullable=False)
    rejection_reason = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    approved_at = Column(DateTime(timezone=True), nullable=True)
    rejected_at = Column(DateTime(timezone=True), nullable=True)
    completed_at = Column(DateTime(timezone=True), nullable=True)

    # Relationships
    user = relationship("User", back_populates="loans")
    payments = relationship(
        "Payment",
        back_populates="loan",
        lazy="selectin",
        order_by="Payment.month_number"
    )

    @property
    def paid_installments(self) -> int:
        return len(self.payments)

    def __repr__(self):
        return f"<Loan(id={self.id}, user_id={self.user_id}, amount={self.amount}, status={self.status})>"


class Payment(Base):
    """One paid installment of a loan"""
    __tablename__ = "payments"
    __table_args__ = (
        UniqueConstraint("loan_id", "month_number", name="uq_payments_loan_month"),
    )

    id = Column(Integer, primary_key=True, index=True)
    loan_id = Column(Integer, ForeignKey("loans.id"), index=True, nullable=False)
    amount = Column(Float, nullable=False)
    month_number = Column(Integer, nullable=False)
    paid_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    loan = relationship("Loan", back_populates="payments")

    def __repr__(self):
        return f"<Payment(loan_id={self.loan_id}, month_number={self.month_number}, amount={self.amount})>"
