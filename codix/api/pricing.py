"""API для тарифов услуг."""
from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from codix.core.auth import require_permission
from codix.core.database import get_db
from codix.core.permissions import Permission
from codix.models.admin import Admin
from codix.models.service import Pricing, Service
from codix.schemas.service import PricingCreate, PricingResponse, PricingUpdate
from codix.utils.enums import CatalogStatus
from codix.utils.exceptions import ConflictError, NotFoundError, ValidationError
from codix.utils.logger import get_logger
from codix.utils.response import api_response

router = APIRouter()
logger = get_logger(__name__)

manage_pricing = require_permission(Permission.MANAGE_PRICING)


def _dump_tiers(tiers) -> list:
    return [tier.model_dump(by_alias=True) for tier in tiers]


async def _get_pricing(db: AsyncSession, pricing_id: int) -> Pricing:
    pricing = await db.get(Pricing, pricing_id)
    if pricing is None:
        raise NotFoundError("Pricing not found")
    return pricing


@router.get("/service/{service_id}")
async def get_pricing_by_service(service_id: int, db: AsyncSession = Depends(get_db)):
    """Публичный прайс активной услуги."""
    service = await db.get(Service, service_id)
    if service is None or service.status != CatalogStatus.ACTIVE.value:
        raise NotFoundError("Service not found")
    result = await db.execute(
        select(Pricing).where(Pricing.service_id == service_id, Pricing.status == CatalogStatus.ACTIVE.value)
    )
    pricing = result.scalar_one_or_none()
    if pricing is None:
        raise NotFoundError("Pricing not found for this service")
    return api_response(PricingResponse.model_validate(pricing), "Pricing fetched successfully")


@router.post("")
async def create_pricing(
    payload: PricingCreate,
    admin: Admin = Depends(manage_pricing),
    db: AsyncSession = Depends(get_db),
):
    if await db.get(Service, payload.service_id) is None:
        raise NotFoundError("Service not found")
    existing = await db.execute(select(Pricing.id).where(Pricing.service_id == payload.service_id))
    if existing.scalar_one_or_none() is not None:
        raise ConflictError("Pricing already exists for this service")

    pricing = Pricing(
        service_id=payload.service_id,
        tiers=_dump_tiers(payload.tiers),
        currency=payload.currency.upper(),
        status=payload.status.value,
    )
    db.add(pricing)
    await db.commit()
    logger.info("pricing_created", pricing_id=pricing.id, service_id=pricing.service_id, admin_id=admin.id)
    return api_response(PricingResponse.model_validate(pricing), "Pricing created successfully", 201)


@router.patch("/{pricing_id}")
async def update_pricing(
    pricing_id: int,
    payload: PricingUpdate,
    admin: Admin = Depends(manage_pricing),
    db: AsyncSession = Depends(get_db),
):
    changes = payload.model_dump(exclude_unset=True, exclude_none=True)
    if not changes:
        raise ValidationError("At least one field is required")
    pricing = await _get_pricing(db, pricing_id)
    if payload.tiers is not None:
        pricing.tiers = _dump_tiers(payload.tiers)
    if payload.currency is not None:
        pricing.currency = payload.currency.upper()
    if payload.status is not None:
        pricing.status = payload.status.value
    await db.commit()
    logger.info("pricing_updated", pricing_id=pricing_id, admin_id=admin.id)
    return api_response(PricingResponse.model_validate(pricing), "Pricing updated successfully")


@router.delete("/{pricing_id}")
async def delete_pricing(
    pricing_id: int,
    admin: Admin = Depends(manage_pricing),
    db: AsyncSession = Depends(get_db),
):
    pricing = await _get_pricing(db, pricing_id)
    await db.delete(pricing)
    await db.commit()
    logger.info("pricing_deleted", pricing_id=pricing_id, admin_id=admin.id)
    return api_response(None, "Pricing deleted successfully")


@router.patch("/{pricing_id}/toggle-status")
async def toggle_pricing_status(
    pricing_id: int,
    admin: Admin = Depends(manage_pricing),
    db: AsyncSession = Depends(get_db),
):
    pricing = await _get_pricing(db, pricing_id)
    if pricing.status == CatalogStatus.ACTIVE.value:
        pricing.status = CatalogStatus.INACTIVE.value
    else:
        pricing.status = CatalogStatus.ACTIVE.value
    await db.commit()
    return api_response(PricingResponse.model_validate(pricing), f"Pricing is now {pricing.status}")
