from sqlalchemy import Column, Integer, String, Float, DateTime, Enum as SQLEnum, CheckConstraint
from sqlalchemy.orm import relationship
from app.core.database import Base, utcnow
import enum


class Role(str, enum.Enum):
    """User role enumeration"""
    CLIENT = "CLIENT"
    ADMIN = "ADMIN"


class User(Base):
    """Borrower or administrator identified by national id (DNI)"""
    __tablename__ = "users"
    __table_args__ = (
        CheckConstraint("credit_score >= 0 AND credit_score <= 100", name="ck_users_credit_score_range"),
    )

    # Primary Key
    id = Column(Integer, primary_key=True, index=True)

    # Authentication
    dni = Column(String(8), unique=True, index=True, nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=True)
    password_hash = Column(String(255), nullable=False)
    role = Column(SQLEnum(Role), default=Role.CLIENT, nullable=False)

    # Personal Information
    nombres = Column(String(100), nullable=False)
    apellidos = Column(String(100), nullable=False)
    telefono = Column(String(20), index=True, nullable=False)
    direccion = Column(String(255), nullable=True)
    ocupacion = Column(String(100), nullable=True)
    ingreso_mensual = Column(Float, nullable=True)

    # Written only by the credit ledger
    credit_score = Column(Integer, default=0, nullable=False)

    # Timestamps
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    # Relationships
    loans = relationship("Loan", back_populates="user")
    credit_history = relationship("CreditHistory", back_populates="user")

    @property
    def full_name(self) -> str:
        return f"{self.nombres} {self.apellidos}"

    def __repr__(self):
        return f"<User(id={self.id}, dni={self.dni}, role={self.role})>"
