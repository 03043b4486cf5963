from datetime import datetime
from typing import Optional

from pydantic import EmailStr, Field

from schemas.common import CamelModel


class RegisterRequest(CamelModel):
    email: EmailStr
    password: str = Field(min_length=8)
    display_name: Optional[str] = Field(default=None, min_length=1, max_length=100)


class LoginRequest(CamelModel):
    email: EmailStr
    password: str = Field(min_length=1)


class ProfileUpdate(CamelModel):
    display_name: Optional[str] = Field(default=None, min_length=1, max_length=100)


class PasswordChange(CamelModel):
    current_password: str = Field(min_length=1)
    new_password: str = Field(min_length=8)


class UserOut(CamelModel):
    id: str
    email: str
    display_name: str
    created_at: Optional[datetime] = None


class AuthResponse(CamelModel):
    message: Optional[str] = None
    user: UserOut
