from pydantic import EmailStr, Field

from ..core.security import UserRole
from .base import CamelModel


class UserRegister(CamelModel):
    name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    password: str = Field(..., min_length=8, max_length=128)


class UserLogin(CamelModel):
    email: EmailStr
    password: str = Field(..., min_length=1, max_length=128)


class RegisterResponse(CamelModel):
    message: str
    user_id: str


class LoginResponse(CamelModel):
    token: str
    role: UserRole
