"""Схемы клиентских заявок на услуги."""
from datetime import datetime
from typing import List, Optional

from pydantic import Field, field_validator

from codix.core.database import utcnow
from codix.schemas.base import CamelModel, InputModel, to_naive_utc
from codix.utils.enums import ServiceCategory, ServiceRequestStatus


def _future_deadline(value: Optional[datetime]) -> Optional[datetime]:
    value = to_naive_utc(value)
    if value is not None and value <= utcnow():
        raise ValueError("Delivery deadline must be in the future")
    return value


class ServiceRequestCreate(InputModel):
    title: str = Field(..., min_length=1, max_length=255)
    category: ServiceCategory = ServiceCategory.CUSTOM
    description: str = Field(..., min_length=1)
    features: List[str] = Field(default_factory=list)
    budget: Optional[float] = Field(default=None, ge=0)
    delivery_deadline: Optional[datetime] = None

    @field_validator("delivery_deadline")
    @classmethod
    def check_deadline(cls, value):
        return _future_deadline(value)


class ServiceRequestUpdate(InputModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=255)
    category: Optional[ServiceCategory] = None
    description: Optional[str] = Field(default=None, min_length=1)
    features: Optional[List[str]] = None
    budget: Optional[float] = Field(default=None, ge=0)
    delivery_deadline: Optional[datetime] = None

    @field_validator("delivery_deadline")
    @classmethod
    def check_deadline(cls, value):
        return _future_deadline(value)


class ServiceRequestStatusUpdate(InputModel):
    status: ServiceRequestStatus
    admin_notes: Optional[str] = None


class AttachmentResponse(CamelModel):
    id: int
    url: str
    public_id: str
    resource_type: str
    uploaded_at: datetime


class ServiceRequestResponse(CamelModel):
    id: int
    title: str
    category: str
    description: str
    features: List[str]
    budget: Optional[float] = None
    delivery_deadline: Optional[datetime] = None
    status: str
    admin_notes: Optional[str] = None
    created_by_id: int
    attachments: List[AttachmentResponse]
    created_at: datetime
    updated_at: datetime
