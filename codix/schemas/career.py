"""Схемы для заявок на вакансии."""
from datetime import datetime
from typing import Optional

from codix.schemas.base import CamelModel, InputModel
from codix.utils.enums import CareerStatus


class StoredFile(CamelModel):
    url: str
    public_id: str
    resource_type: str


class CareerStatusUpdate(InputModel):
    status: CareerStatus


class CareerResponse(CamelModel):
    id: int
    full_name: str
    email: str
    phone: str
    position_applied: str
    resume: StoredFile
    cover_letter: Optional[StoredFile] = None
    status: str
    source: str
    created_at: datetime
    updated_at: datetime
