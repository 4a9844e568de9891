"""API для каталога услуг (только администраторы)."""
from typing import Optional

from fastapi import APIRouter, Depends, File, Query, UploadFile
from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from codix.core.auth import get_current_admin, require_permission
from codix.core.database import get_db, get_session_maker, run_in_transaction
from codix.core.ownership import verify_ownership
from codix.core.permissions import Permission
from codix.models.admin import Admin
from codix.models.service import Service
from codix.schemas.base import paginate
from codix.schemas.service import ServiceCreate, ServiceResponse, ServiceUpdate
from codix.utils.enums import CatalogStatus, ServiceCategory
from codix.utils.exceptions import NotFoundError, ValidationError
from codix.utils.logger import get_logger
from codix.utils.query import PageParams, apply_sort, fetch_page
from codix.utils.response import api_response
from codix.utils.storage import CloudinaryStorage, get_storage
from codix.utils.uploads import save_upload

router = APIRouter()
logger = get_logger(__name__)

THUMBNAIL_TYPES = {"image/jpeg", "image/png", "image/gif", "image/webp", "video/mp4", "video/webm"}
SORT_COLUMNS = {
    "createdAt": Service.created_at,
    "price": Service.price,
    "title": Service.title,
    "deliveryTimeInDays": Service.delivery_time_in_days,
}
manage_services = require_permission(Permission.MANAGE_SERVICES)


async def _owned_service(session: AsyncSession, service_id: int, admin: Admin) -> Service:
    return await verify_ownership(
        session, Service, service_id, admin.id, owner_field="created_by_id", admin=admin, label="Service"
    )


@router.get("")
async def list_services(
    category: Optional[ServiceCategory] = None,
    status: CatalogStatus = CatalogStatus.ACTIVE,
    min_price: Optional[float] = Query(None, alias="minPrice", ge=0),
    max_price: Optional[float] = Query(None, alias="maxPrice", ge=0),
    search: Optional[str] = None,
    sort_by: str = Query("createdAt", alias="sortBy"),
    sort_order: str = Query("desc", alias="sortOrder"),
    page: PageParams = Depends(),
    admin: Admin = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db),
):
    if min_price is not None and max_price is not None and min_price > max_price:
        raise ValidationError("minPrice cannot be greater than maxPrice")
    query = select(Service).where(Service.status == status.value)
    if category is not None:
        query = query.where(Service.category == category.value)
    if min_price is not None:
        query = query.where(Service.price >= min_price)
    if max_price is not None:
        query = query.where(Service.price <= max_price)
    if search:
        pattern = f"%{search}%"
        query = query.where(or_(Service.title.ilike(pattern), Service.description.ilike(pattern)))
    query = apply_sort(query, SORT_COLUMNS, sort_by, sort_order)

    services, total = await fetch_page(db, query, page)
    data = paginate("services", [ServiceResponse.model_validate(s) for s in services], total, page.page, page.limit)
    return api_response(data, "Services fetched successfully")


@router.get("/{service_id}")
async def get_service(service_id: int, admin: Admin = Depends(get_current_admin), db: AsyncSession = Depends(get_db)):
    service = await db.get(Service, service_id)
    if service is None:
        raise NotFoundError("Service not found")
    return api_response(ServiceResponse.model_validate(service), "Service fetched successfully")


@router.post("")
async def create_service(
    payload: ServiceCreate,
    admin: Admin = Depends(manage_services),
    db: AsyncSession = Depends(get_db),
):
    service = Service(
        **payload.model_dump(exclude={"category", "status"}),
        category=payload.category.value,
        status=payload.status.value,
        created_by_id=admin.id,
    )
    db.add(service)
    await db.commit()
    logger.info("service_created", service_id=service.id, admin_id=admin.id)
    return api_response(ServiceResponse.model_validate(service), "Service created successfully", 201)


@router.patch("/{service_id}")
async def update_service(
    service_id: int,
    payload: ServiceUpdate,
    admin: Admin = Depends(manage_services),
    session_maker: async_sessionmaker = Depends(get_session_maker),
):
    changes = payload.model_dump(exclude_unset=True, exclude_none=True)
    if not changes:
        raise ValidationError("At least one field is required")

    async def work(session: AsyncSession) -> Service:
        service = await _owned_service(session, service_id, admin)
        for field, value in changes.items():
            setattr(service, field, getattr(value, "value", value))
        await session.flush()
        await session.refresh(service)
        return service

    service = await run_in_transaction(work, session_maker)
    logger.info("service_updated", service_id=service_id, admin_id=admin.id, fields=list(changes))
    return api_response(ServiceResponse.model_validate(service), "Service updated successfully")


@router.delete("/{service_id}")
async def delete_service(
    service_id: int,
    admin: Admin = Depends(manage_services),
    session_maker: async_sessionmaker = Depends(get_session_maker),
    storage: CloudinaryStorage = Depends(get_storage),
):
    async def work(session: AsyncSession):
        service = await _owned_service(session, service_id, admin)
        thumbnail = (service.thumbnail_public_id, service.thumbnail_resource_type)
        await session.delete(service)
        return thumbnail

    public_id, kind = await run_in_transaction(work, session_maker)
    if public_id:
        await storage.delete_quietly(public_id, kind)
    logger.info("service_deleted", service_id=service_id, admin_id=admin.id)
    return api_response(None, "Service deleted successfully")


@router.patch("/{service_id}/toggle-status")
async def toggle_service_status(
    service_id: int,
    admin: Admin = Depends(manage_services),
    db: AsyncSession = Depends(get_db),
):
    service = await _owned_service(db, service_id, admin)
    if service.status == CatalogStatus.ACTIVE.value:
        service.status = CatalogStatus.INACTIVE.value
    else:
        service.status = CatalogStatus.ACTIVE.value
    await db.commit()
    logger.info("service_status_toggled", service_id=service_id, status=service.status)
    return api_response(ServiceResponse.model_validate(service), f"Service is now {service.status}")


@router.post("/{service_id}/thumbnail")
async def upload_thumbnail(
    service_id: int,
    thumbnail: UploadFile = File(...),
    admin: Admin = Depends(manage_services),
    db: AsyncSession = Depends(get_db),
    storage: CloudinaryStorage = Depends(get_storage),
):
    """Загрузить превью услуги. Предыдущее удаляется без гарантий."""
    service = await _owned_service(db, service_id, admin)
    path = await save_upload(thumbnail, allowed_types=THUMBNAIL_TYPES)
    uploaded = await storage.upload(path, thumbnail.content_type)

    old = (service.thumbnail_public_id, service.thumbnail_resource_type)
    service.thumbnail_url = uploaded["url"]
    service.thumbnail_public_id = uploaded["publicId"]
    service.thumbnail_resource_type = uploaded["resourceKind"]
    await db.commit()

    if old[0]:
        await storage.delete_quietly(*old)
    logger.info("service_thumbnail_updated", service_id=service_id)
    return api_response(ServiceResponse.model_validate(service), "Thumbnail uploaded successfully")
