from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from typing import List
import math

from app.modules.admin.schemas import DashboardStats, ClientSummary, ClientLoanStatus
from app.modules.users.models import User, Role
from app.modules.loans.models import Loan, LoanStatus


class AdminService:
    """Read models for the administrative console"""

    def __init__(self, db: AsyncSession):
        self.db = db

    # ============================================================
    # Dashboard
    # ============================================================

    async def get_dashboard_stats(self) -> DashboardStats:
        """Get dashboard statistics"""
        total_clients = await self.db.execute(
            select(func.count(User.id)).where(User.role == Role.CLIENT)
        )
        active_loans = await self.db.execute(
            select(func.count(Loan.id)).where(Loan.status == LoanStatus.ACTIVE)
        )
        pending_loans = await self.db.execute(
            select(func.count(Loan.id)).where(Loan.status == LoanStatus.PENDING)
        )
        total_lent = await self.db.execute(
            select(func.sum(Loan.amount)).where(Loan.status == LoanStatus.ACTIVE)
        )
        average_score = await self.db.execute(
            select(func.avg(User.credit_score)).where(User.role == Role.CLIENT)
        )

        avg = average_score.scalar()
        return DashboardStats(
            total_clients=total_clients.scalar() or 0,
            total_active_loans=active_loans.scalar() or 0,
            total_lent=float(total_lent.scalar() or 0),
            pending_requests=pending_loans.scalar() or 0,
            # half-up, not banker's rounding
            average_score=math.floor(float(avg) + 0.5) if avg is not None else 0
        )

    # ============================================================
    # Clients
    # ============================================================

    async def list_clients(self) -> List[ClientSummary]:
        """All clients, newest first, with the amount of their active loan"""
        result = await self.db.execute(
            select(User)
            .where(User.role == Role.CLIENT)
            .order_by(User.created_at.desc(), User.id.desc())
        )
        clients = result.scalars().all()

        loans_result = await self.db.execute(
            select(Loan.user_id, Loan.amount).where(Loan.status == LoanStatus.ACTIVE)
        )
        active_amounts = {user_id: amount for user_id, amount in loans_result.all()}

        return [
            ClientSummary(
                id=client.id,
                name=client.full_name,
                dni=client.dni,
                phone=client.telefono,
                score=client.credit_score,
                active_amount=active_amounts.get(client.id, 0),
                status=ClientLoanStatus.ACTIVE if client.id in active_amounts else ClientLoanStatus.NO_LOAN
            )
            for client in clients
        ]
