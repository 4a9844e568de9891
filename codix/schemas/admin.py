"""Схемы для администраторов."""
from datetime import datetime
from typing import Dict, Optional

from pydantic import EmailStr, Field

from codix.schemas.base import CamelModel, InputModel
from codix.utils.enums import AdminRole


class SuperAdminInit(InputModel):
    full_name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    password: str = Field(..., min_length=1)


class AdminLogin(InputModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class AdminCreate(InputModel):
    """Создание администратора суперадмином."""

    full_name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    password: str = Field(..., min_length=1)
    role: AdminRole = AdminRole.ADMIN


class RefreshTokenRequest(InputModel):
    refresh_token: Optional[str] = None


class PasswordResetRequest(InputModel):
    email: EmailStr


class PasswordReset(InputModel):
    token: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=1)


class PasswordChange(InputModel):
    current_password: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=1)


class AdminResponse(CamelModel):
    """Данные администратора без секретов."""

    id: int
    full_name: str
    email: str
    role: str
    permissions: Dict[str, bool]
    is_active: bool
    last_login: Optional[datetime] = None
    login_ip: Optional[str] = Field(default=None, alias="loginIP")
    created_at: datetime
    updated_at: datetime
