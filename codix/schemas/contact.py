"""Схемы для обращений."""
from datetime import datetime
from typing import Optional

from pydantic import EmailStr, Field

from codix.schemas.base import CamelModel, InputModel
from codix.schemas.client import ClientBrief
from codix.utils.enums import ContactStatus


class ContactCreate(InputModel):
    full_name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    phone: str = ""
    country: str = ""
    subject: str = Field(..., min_length=1, max_length=255)
    message: str = Field(..., min_length=1)


class ContactUpdate(InputModel):
    status: Optional[ContactStatus] = None
    response_message: Optional[str] = None
    is_archived: Optional[bool] = None


class ContactResponse(CamelModel):
    id: int
    full_name: str
    email: str
    phone: str
    country: str
    subject: str
    message: str
    status: str
    response_message: str
    is_archived: bool
    ip_address: str
    client: Optional[ClientBrief] = None
    responded_by_id: Optional[int] = None
    created_at: datetime
    updated_at: datetime
