import logging
from typing import List, Tuple

from sqlalchemy import select, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import ConflictError, NotFoundError, UnauthenticatedError
from app.core.security import get_password_hash, verify_password, create_principal_token
from app.modules.credit.models import CreditHistory, ScoreEvent
from app.modules.credit.services import CreditScoreService
from app.modules.users.models import User, Role
from app.modules.users import schemas

logger = logging.getLogger(__name__)

# Score before ACCOUNT_CREATED is applied; the event brings it to 30
INITIAL_SCORE = 0


class UserService:
    """Service layer for client identity and profile operations"""

    @staticmethod
    async def register_user(db: AsyncSession, user_data: schemas.UserRegistrationRequest) -> User:
        """Register a new client and open their credit history"""

        # Check if DNI already exists
        result = await db.execute(select(User.id).where(User.dni == user_data.dni))
        if result.scalar_one_or_none() is not None:
            raise ConflictError("DNI already registered")

        # Check if email already exists
        if user_data.email:
            result = await db.execute(select(User.id).where(User.email == user_data.email))
            if result.scalar_one_or_none() is not None:
                raise ConflictError("Email already registered")

        user = User(
            dni=user_data.dni,
            nombres=user_data.nombres,
            apellidos=user_data.apellidos,
            telefono=user_data.telefono,
            email=user_data.email,
            password_hash=get_password_hash(user_data.password),
            role=Role.CLIENT,
            credit_score=INITIAL_SCORE
        )

        try:
            db.add(user)
            await db.flush()
        except IntegrityError:
            raise ConflictError("User registration failed. DNI or email already registered.")

        await CreditScoreService(db).apply_event(user.id, ScoreEvent.ACCOUNT_CREATED, "Account created")

        logger.info("Registered user %s (dni=%s)", user.id, user.dni)
        return user

    @staticmethod
    async def authenticate_user(db: AsyncSession, identifier: str, password: str) -> User:
        """Authenticate user with DNI, email or phone and password"""
        result = await db.execute(
            select(User).where(
                or_(
                    User.dni == identifier,
                    User.email == identifier,
                    User.telefono == identifier
                )
            ).order_by(User.id).limit(1)
        )
        user = result.scalars().first()

        if not user or not verify_password(password, user.password_hash):
            logger.warning("Failed login for identifier %s", identifier)
            raise UnauthenticatedError("Invalid credentials")

        return user

    @staticmethod
    def create_token(user: User) -> str:
        return create_principal_token(user.id, user.role)

    @staticmethod
    async def get_user(db: AsyncSession, user_id: int) -> User:
        result = await db.execute(select(User).where(User.id == user_id))
        user = result.scalar_one_or_none()
        if user is None:
            raise NotFoundError("User", user_id)
        return user

    @staticmethod
    async def update_profile(
        db: AsyncSession,
        user_id: int,
        update_data: schemas.UserProfileUpdate
    ) -> User:
        """Update contact/profile fields that were sent"""
        user = await UserService.get_user(db, user_id)
        changes = update_data.model_dump(exclude_unset=True)

        if changes.get("email") and changes["email"] != user.email:
            result = await db.execute(
                select(User.id).where(User.email == changes["email"], User.id != user_id)
            )
            if result.scalar_one_or_none() is not None:
                raise ConflictError("Email already registered")

        for field, value in changes.items():
            setattr(user, field, value)

        await db.flush()
        logger.info("Updated profile of user %s: %s", user_id, sorted(changes))
        return user

    @staticmethod
    async def get_score_history(db: AsyncSession, user_id: int) -> Tuple[User, List[CreditHistory]]:
        """Current score owner plus the latest history entries"""
        user = await UserService.get_user(db, user_id)
        history = await CreditScoreService(db).get_history(user_id)
        return user, history
