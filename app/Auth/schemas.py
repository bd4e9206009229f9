from pydantic import EmailStr, Field
from typing import Optional

from app.common.schemas import CamelModel


class RegisterRequest(CamelModel):
    email: EmailStr
    password: str = Field(min_length=1, max_length=128)
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone: Optional[str] = None


class LoginRequest(CamelModel):
    email: EmailStr
    password: str


class ForgotPasswordRequest(CamelModel):
    email: EmailStr


class ResetPasswordRequest(CamelModel):
    token: str = Field(min_length=1)
    password: str


class ChangePasswordRequest(CamelModel):
    current_password: str
    new_password: str
