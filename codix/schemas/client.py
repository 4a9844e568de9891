"""Схемы для клиентов."""
from datetime import datetime
from typing import Optional

from pydantic import EmailStr, Field

from codix.schemas.base import CamelModel, InputModel
from codix.utils.enums import ClientRole, ClientStatus


class Address(CamelModel):
    country: Optional[str] = None
    city: Optional[str] = None
    street: Optional[str] = None


class ClientRegister(InputModel):
    full_name: str = Field(..., min_length=1, max_length=255)
    email: str = Field(..., min_length=1)
    phone: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class ClientLogin(InputModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class ClientDetailsUpdate(InputModel):
    full_name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    email: Optional[str] = None
    phone: Optional[str] = None


class AddressUpdate(InputModel):
    country: Optional[str] = None
    city: Optional[str] = None
    street: Optional[str] = None


class ClientAdminUpdate(InputModel):
    """Изменение клиента администратором."""

    full_name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    status: Optional[ClientStatus] = None
    role: Optional[ClientRole] = None
    is_email_verified: Optional[bool] = None
    is_phone_verified: Optional[bool] = None


class ClientBrief(CamelModel):
    id: int
    full_name: str
    profile_image: str


class ClientResponse(CamelModel):
    """Данные клиента без секретов."""

    id: int
    full_name: str
    email: str
    phone: str
    role: str
    status: str
    profile_image: str
    address: Address
    is_email_verified: bool
    is_phone_verified: bool
    created_at: datetime
    updated_at: datetime
