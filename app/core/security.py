from dataclasses import dataclass
from datetime import timedelta
from typing import Optional, Dict, Any
from jose import JWTError, jwt
from passlib.context import CryptContext
from app.core.config import settings
from app.core.database import utcnow
from app.core.exceptions import UnauthenticatedError, ForbiddenError
from app.modules.users.models import Role

# Password hashing context
pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.BCRYPT_ROUNDS
)


@dataclass(frozen=True)
class Principal:
    """Authenticated caller resolved from a bearer token"""
    user_id: int
    role: Role

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash"""
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    """Hash a password"""
    return pwd_context.hash(password)


def create_access_token(data: Dict[str, Any], expires_delta: Optional[timedelta] = None) -> str:
    """Create JWT access token"""
    to_encode = data.copy()

    if expires_delta:
        expire = utcnow() + expires_delta
    else:
        expire = utcnow() + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)

    to_encode.update({"exp": expire, "type": "access"})
    encoded_jwt = jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)
    return encoded_jwt


def create_principal_token(user_id: int, role: Role) -> str:
    """Issue the access token handed out at login"""
    return create_access_token(data={"sub": str(user_id), "role": Role(role).value})


def decode_token(token: str) -> Dict[str, Any]:
    """Decode and validate JWT token"""
    try:
        return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        raise UnauthenticatedError("Your session has expired. Please log in again.")


def decode_principal(token: Optional[str]) -> Principal:
    """
    Resolve a bearer token to its principal.

    A missing token and an invalid or expired one are reported the same
    way to the caller.
    """
    if not token:
        raise UnauthenticatedError("Token not provided. Send: Authorization: Bearer <token>")

    payload = decode_token(token)
    if payload.get("type") != "access":
        raise UnauthenticatedError("Your session has expired. Please log in again.")

    try:
        return Principal(user_id=int(payload["sub"]), role=Role(payload["role"]))
    except (KeyError, TypeError, ValueError):
        raise UnauthenticatedError("Your session has expired. Please log in again.")


def authorize(principal: Principal, required_role: Role) -> Principal:
    """Fail with ForbiddenError unless the principal holds required_role"""
    if principal.role != required_role:
        raise ForbiddenError()
    return principal
