"""
Endpoints for the authenticated client's own profile and score.
"""
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.dependencies import get_current_principal
from app.core.security import Principal
from app.modules.credit.schemas import ScoreResponse
from app.modules.loans.services import LoanService
from app.modules.users import schemas
from app.modules.users.services import UserService

router = APIRouter(prefix="/clients", tags=["clients"])


@router.get("/me", response_model=schemas.ClientProfileResponse)
async def get_my_profile(
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db)
):
    """Get profile and the active loan with its payments"""
    user = await UserService.get_user(db, principal.user_id)
    active_loan = await LoanService(db).get_active_loan(user.id)
    return {"user": user, "active_loan": active_loan}


@router.get("/me/score", response_model=ScoreResponse)
async def get_my_score(
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db)
):
    """Get current score and the latest 20 score events"""
    user, history = await UserService.get_score_history(db, principal.user_id)
    return {"score": user.credit_score, "history": history}


@router.put("/me", response_model=schemas.ProfileUpdateResponse)
async def update_my_profile(
    update_data: schemas.UserProfileUpdate,
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db)
):
    """Update contact and profile fields"""
    user = await UserService.update_profile(db, principal.user_id, update_data)
    return {"message": "Profile updated", "user": user}
