"""
Client registration and login endpoints.
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.modules.users import schemas
from app.modules.users.services import UserService

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", response_model=schemas.RegistrationResponse, status_code=status.HTTP_201_CREATED)
async def register_user(
    user_data: schemas.UserRegistrationRequest,
    db: AsyncSession = Depends(get_db)
):
    """
    Register a new client.

    - DNI must be unique (8 digits)
    - Email is optional but unique when given
    - Starts the credit history with the account-created event
    """
    user = await UserService.register_user(db, user_data)
    return {"message": "User registered successfully", "user": user}


@router.post("/login", response_model=schemas.LoginResponse)
async def login(
    login_data: schemas.UserLoginRequest,
    db: AsyncSession = Depends(get_db)
):
    """
    Login with DNI, email or phone and password.

    Returns a bearer token valid for 7 days.
    """
    user = await UserService.authenticate_user(db, login_data.identifier, login_data.password)
    return {
        "message": "Login successful",
        "token": UserService.create_token(user),
        "user": {
            "id": user.id,
            "nombres": user.nombres,
            "role": user.role,
            "score": user.credit_score
        }
    }
