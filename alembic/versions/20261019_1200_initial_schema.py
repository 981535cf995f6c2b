"""Create users, loans, payments and credit history tables

Revision ID: 3f9c1a7e2b10
Revises:
Create Date: 2026-10-19 12:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f9c1a7e2b10'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # ============================================================
    # Users Table
    # ============================================================
    op.create_table('users',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('dni', sa.String(length=8), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=True),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        sa.Column('role', sa.Enum('CLIENT', 'ADMIN', name='role'), nullable=False),
        sa.Column('nombres', sa.String(length=100), nullable=False),
        sa.Column('apellidos', sa.String(length=100), nullable=False),
        sa.Column('telefono', sa.String(length=20), nullable=False),
        sa.Column('direccion', sa.String(length=255), nullable=True),
        sa.Column('ocupacion', sa.String(length=100), nullable=True),
        sa.Column('ingreso_mensual', sa.Float(), nullable=True),
        sa.Column('credit_score', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint('credit_score >= 0 AND credit_score <= 100', name='ck_users_credit_score_range'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_users_id'), 'users', ['id'], unique=False)
    op.create_index(op.f('ix_users_dni'), 'users', ['dni'], unique=True)
    op.create_index(op.f('ix_users_email'), 'users', ['email'], unique=True)
    op.create_index(op.f('ix_users_telefono'), 'users', ['telefono'], unique=False)

    # ============================================================
    # Loans Table
    # ============================================================
    op.create_table('loans',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        # Terms
        sa.Column('amount', sa.Float(), nullable=False),
        sa.Column('term', sa.Integer(), nullable=False),
        sa.Column('monthly_rate', sa.Float(), nullable=False),
        sa.Column('total_interest', sa.Float(), nullable=False),
        sa.Column('total_payment', sa.Float(), nullable=False),
        sa.Column('monthly_payment', sa.Float(), nullable=False),
        sa.Column('purpose', sa.String(length=255), nullable=True),
        # Lifecycle
        sa.Column('status', sa.Enum('PENDING', 'ACTIVE', 'REJECTED', 'COMPLETED', name='loanstatus'), nullable=False),
        sa.Column('rejection_reason', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('approved_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('rejected_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('completed_at', sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_loans_id'), 'loans', ['id'], unique=False)
    op.create_index(op.f('ix_loans_user_id'), 'loans', ['user_id'], unique=False)
    op.create_index(op.f('ix_loans_status'), 'loans', ['status'], unique=False)

    # ============================================================
    # Payments Table
    # ============================================================
    op.create_table('payments',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('loan_id', sa.Integer(), nullable=False),
        sa.Column('amount', sa.Float(), nullable=False),
        sa.Column('month_number', sa.Integer(), nullable=False),
        sa.Column('paid_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['loan_id'], ['loans.id'], ),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('loan_id', 'month_number', name='uq_payments_loan_month')
    )
    op.create_index(op.f('ix_payments_id'), 'payments', ['id'], unique=False)
    op.create_index(op.f('ix_payments_loan_id'), 'payments', ['loan_id'], unique=False)

    # ============================================================
    # Credit History Table
    # ============================================================
    op.create_table('credit_history',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('event_type', sa.Enum('ACCOUNT_CREATED', 'LOAN_APPROVED', 'PAYMENT_MADE', 'LOAN_COMPLETED', 'LATE_PAYMENT', name='scoreevent'), nullable=False),
        sa.Column('description', sa.String(length=255), nullable=False),
        sa.Column('score_change', sa.Integer(), nullable=False),
        sa.Column('new_score', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_credit_history_id'), 'credit_history', ['id'], unique=False)
    op.create_index(op.f('ix_credit_history_user_id'), 'credit_history', ['user_id'], unique=False)


def downgrade() -> None:
    op.drop_index(op.f('ix_credit_history_user_id'), table_name='credit_history')
    op.drop_index(op.f('ix_credit_history_id'), table_name='credit_history')
    op.drop_table('credit_history')

    op.drop_index(op.f('ix_payments_loan_id'), table_name='payments')
    op.drop_index(op.f('ix_payments_id'), table_name='payments')
    op.drop_table('payments')

    op.drop_index(op.f('ix_loans_status'), table_name='loans')
    op.drop_index(op.f('ix_loans_user_id'), table_name='loans')
    op.drop_index(op.f('ix_loans_id'), table_name='loans')
    op.drop_table('loans')

    op.drop_index(op.f('ix_users_telefono'), table_name='users')
    op.drop_index(op.f('ix_users_email'), table_name='users')
    op.drop_index(op.f('ix_users_dni'), table_name='users')
    op.drop_index(op.f('ix_users_id'), table_name='users')
    op.drop_table('users')

    sa.Enum(name='scoreevent').drop(op.get_bind(), checkfirst=True)
    sa.Enum(name='loanstatus').drop(op.get_bind(), checkfirst=True)
    sa.Enum(name='role').drop(op.get_bind(), checkfirst=True)
