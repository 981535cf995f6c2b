from pydantic import BaseModel, EmailStr, Field, validator
from typing import Optional
from datetime import datetime

from app.modules.users.models import Role
from app.modules.loans.schemas import LoanWithPaymentsResponse


# User Registration
class UserRegistrationRequest(BaseModel):
    """Client self-registration request"""
    dni: str = Field(..., min_length=8, max_length=8)
    nombres: str = Field(..., min_length=2, max_length=100)
    apellidos: str = Field(..., min_length=2, max_length=100)
    telefono: str = Field(..., min_length=9, max_length=20)
    email: Optional[EmailStr] = None
    password: str = Field(..., min_length=6)

    @validator('dni')
    def validate_dni(cls, v):
        """DNI is an 8 digit national id"""
        if not v.isdigit():
            raise ValueError('DNI must contain only digits')
        return v


class RegisteredUser(BaseModel):
    id: int
    nombres: str
    dni: str

    class Config:
        from_attributes = True


class RegistrationResponse(BaseModel):
    message: str
    user: RegisteredUser


# User Login
class UserLoginRequest(BaseModel):
    """Login with DNI, email or phone as identifier"""
    identifier: str = Field(..., min_length=1)
    password: str


class LoginUser(BaseModel):
    id: int
    nombres: str
    role: Role
    score: int


class LoginResponse(BaseModel):
    message: str
    token: str
    user: LoginUser


# Profile
class UserProfileResponse(BaseModel):
    id: int
    dni: str
    nombres: str
    apellidos: str
    telefono: str
    email: Optional[str]
    direccion: Optional[str]
    ocupacion: Optional[str]
    ingreso_mensual: Optional[float]
    credit_score: int
    created_at: datetime

    class Config:
        from_attributes = True


class ClientProfileResponse(BaseModel):
    user: UserProfileResponse
    active_loan: Optional[LoanWithPaymentsResponse] = None


class UserProfileUpdate(BaseModel):
    """Contact and profile fields a client may change"""
    email: Optional[EmailStr] = None
    telefono: Optional[str] = Field(None, min_length=9, max_length=20)
    direccion: Optional[str] = Field(None, max_length=255)
    ocupacion: Optional[str] = Field(None, max_length=100)
    ingreso_mensual: Optional[float] = Field(None, ge=0)

    @validator('telefono')
    def validate_telefono(cls, v):
        """Phone may be omitted but not cleared"""
        if v is None:
            raise ValueError('Phone cannot be null')
        return v


class ProfileUpdateResponse(BaseModel):
    message: str
    user: UserProfileResponse
