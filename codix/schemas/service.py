"""Схемы для услуг и прайсов."""
from datetime import datetime
from typing import List, Optional

from pydantic import Field

from codix.schemas.base import CamelModel, InputModel
from codix.utils.enums import CatalogStatus, ServiceCategory


class ServiceCreate(InputModel):
    title: str = Field(..., min_length=1, max_length=255)
    category: ServiceCategory = ServiceCategory.BUSINESS
    description: str = Field(..., min_length=1)
    features: List[str] = Field(default_factory=list)
    price: float = Field(..., ge=0)
    is_customizable: bool = True
    delivery_time_in_days: int = Field(default=7, ge=1)
    tags: List[str] = Field(default_factory=list)
    status: CatalogStatus = CatalogStatus.ACTIVE


class ServiceUpdate(InputModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=255)
    category: Optional[ServiceCategory] = None
    description: Optional[str] = Field(default=None, min_length=1)
    features: Optional[List[str]] = None
    price: Optional[float] = Field(default=None, ge=0)
    is_customizable: Optional[bool] = None
    delivery_time_in_days: Optional[int] = Field(default=None, ge=1)
    tags: Optional[List[str]] = None
    status: Optional[CatalogStatus] = None


class Thumbnail(CamelModel):
    url: Optional[str] = None
    public_id: Optional[str] = None


class ServiceResponse(CamelModel):
    id: int
    title: str
    category: str
    description: str
    features: List[str]
    price: float
    is_customizable: bool
    delivery_time_in_days: int
    tags: List[str]
    status: str
    thumbnail_url: Optional[str] = None
    thumbnail_public_id: Optional[str] = None
    created_by_id: Optional[int] = None
    created_at: datetime
    updated_at: datetime


class PricingTier(InputModel):
    """Тариф: имя обязательно, цена неотрицательна."""

    name: str = Field(..., min_length=1, max_length=100)
    description: str = ""
    features: List[str] = Field(default_factory=list)
    price: float = Field(..., ge=0)
    delivery_time_in_days: Optional[int] = Field(default=None, ge=1)
    is_popular: bool = False


class PricingCreate(InputModel):
    service_id: int
    tiers: List[PricingTier] = Field(..., min_length=1)
    currency: str = Field(default="USD", min_length=3, max_length=8)
    status: CatalogStatus = CatalogStatus.ACTIVE


class PricingUpdate(InputModel):
    tiers: Optional[List[PricingTier]] = Field(default=None, min_length=1)
    currency: Optional[str] = Field(default=None, min_length=3, max_length=8)
    status: Optional[CatalogStatus] = None


class PricingResponse(CamelModel):
    id: int
    service_id: int
    tiers: List[PricingTier]
    currency: str
    status: str
    created_at: datetime
    updated_at: datetime
