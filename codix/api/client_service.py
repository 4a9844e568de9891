"""API для клиентских заявок на услуги."""
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Query, Request, UploadFile
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from codix.core.auth import get_client_admin, get_current_client
from codix.core.database import get_db, get_session_maker, run_in_transaction
from codix.core.ownership import verify_ownership
from codix.core.rate_limit import AUTH_LIMIT, limiter
from codix.models.client import Client
from codix.models.client_service_request import ClientServiceRequest, ServiceRequestAttachment
from codix.schemas.base import paginate
from codix.schemas.client_service import (
    ServiceRequestCreate,
    ServiceRequestResponse,
    ServiceRequestStatusUpdate,
    ServiceRequestUpdate,
)
from codix.utils.enums import EDITABLE_REQUEST_STATUSES, ServiceCategory, ServiceRequestStatus
from codix.utils.exceptions import NotFoundError, ValidationError
from codix.utils.logger import get_logger
from codix.utils.query import PageParams, apply_sort, fetch_page, parse_sort
from codix.utils.response import api_response
from codix.utils.storage import CloudinaryStorage, get_storage, remove_local_file
from codix.utils.uploads import save_uploads

router = APIRouter()
logger = get_logger(__name__)

SORT_COLUMNS = {
    "createdAt": ClientServiceRequest.created_at,
    "updatedAt": ClientServiceRequest.updated_at,
    "budget": ClientServiceRequest.budget,
    "deliveryDeadline": ClientServiceRequest.delivery_deadline,
    "title": ClientServiceRequest.title,
    "status": ClientServiceRequest.status,
}
_EDITABLE = {status.value for status in EDITABLE_REQUEST_STATUSES}


def _ensure_editable(service_request: ClientServiceRequest) -> None:
    if service_request.status not in _EDITABLE:
        raise ValidationError(f"Service request cannot be modified in status '{service_request.status}'")


async def _own_request(session: AsyncSession, request_id: int, client: Client) -> ClientServiceRequest:
    return await verify_ownership(
        session, ClientServiceRequest, request_id, client.id, owner_field="created_by_id", label="Service request"
    )


def _filtered(query, status: Optional[ServiceRequestStatus], category: Optional[ServiceCategory], sort: Optional[str]):
    if status is not None:
        query = query.where(ClientServiceRequest.status == status.value)
    if category is not None:
        query = query.where(ClientServiceRequest.category == category.value)
    sort_by, sort_order = parse_sort(sort)
    return apply_sort(query, SORT_COLUMNS, sort_by, sort_order)


@router.post("")
@limiter.limit(AUTH_LIMIT)
async def create_request(
    request: Request,
    payload: ServiceRequestCreate,
    client: Client = Depends(get_current_client),
    db: AsyncSession = Depends(get_db),
):
    service_request = ClientServiceRequest(
        **payload.model_dump(exclude={"category"}),
        category=payload.category.value,
        created_by_id=client.id,
    )
    db.add(service_request)
    await db.commit()
    await db.refresh(service_request, attribute_names=["attachments"])
    logger.info("service_request_created", request_id=service_request.id, client_id=client.id)
    return api_response(ServiceRequestResponse.model_validate(service_request), "Service request created", 201)


@router.get("")
@limiter.limit(AUTH_LIMIT)
async def list_own_requests(
    request: Request,
    status: Optional[ServiceRequestStatus] = None,
    category: Optional[ServiceCategory] = None,
    sort_by: Optional[str] = Query(None, alias="sortBy"),
    page: PageParams = Depends(),
    client: Client = Depends(get_current_client),
    db: AsyncSession = Depends(get_db),
):
    """Заявки клиента. Сортировка в формате ``поле:asc|desc``."""
    query = _filtered(
        select(ClientServiceRequest).where(ClientServiceRequest.created_by_id == client.id), status, category, sort_by
    )
    items, total = await fetch_page(db, query, page)
    data = paginate("requests", [ServiceRequestResponse.model_validate(i) for i in items], total, page.page, page.limit)
    return api_response(data, "Service requests fetched successfully")


@router.get("/admin/all")
@limiter.limit(AUTH_LIMIT)
async def list_all_requests(
    request: Request,
    status: Optional[ServiceRequestStatus] = None,
    category: Optional[ServiceCategory] = None,
    client_id: Optional[int] = None,
    sort_by: Optional[str] = Query(None, alias="sortBy"),
    page: PageParams = Depends(),
    admin: Client = Depends(get_client_admin),
    db: AsyncSession = Depends(get_db),
):
    query = select(ClientServiceRequest)
    if client_id is not None:
        query = query.where(ClientServiceRequest.created_by_id == client_id)
    items, total = await fetch_page(db, _filtered(query, status, category, sort_by), page)
    data = paginate("requests", [ServiceRequestResponse.model_validate(i) for i in items], total, page.page, page.limit)
    return api_response(data, "Service requests fetched successfully")


@router.patch("/admin/{request_id}/status")
@limiter.limit(AUTH_LIMIT)
async def update_request_status(
    request: Request,
    request_id: int,
    payload: ServiceRequestStatusUpdate,
    admin: Client = Depends(get_client_admin),
    db: AsyncSession = Depends(get_db),
):
    service_request = await db.get(ClientServiceRequest, request_id)
    if service_request is None:
        raise NotFoundError("Service request not found")
    service_request.status = payload.status.value
    if payload.admin_notes is not None:
        service_request.admin_notes = payload.admin_notes
    await db.commit()
    logger.info("service_request_status_updated", request_id=request_id, status=service_request.status)
    return api_response(ServiceRequestResponse.model_validate(service_request), "Service request status updated")


@router.get("/{request_id}")
@limiter.limit(AUTH_LIMIT)
async def get_request(
    request: Request,
    request_id: int,
    client: Client = Depends(get_current_client),
    db: AsyncSession = Depends(get_db),
):
    service_request = await _own_request(db, request_id, client)
    return api_response(ServiceRequestResponse.model_validate(service_request), "Service request fetched successfully")


@router.patch("/{request_id}")
@limiter.limit(AUTH_LIMIT)
async def update_request(
    request: Request,
    request_id: int,
    payload: ServiceRequestUpdate,
    client: Client = Depends(get_current_client),
    session_maker: async_sessionmaker = Depends(get_session_maker),
):
    """Изменить заявку. После изменения она снова ожидает рассмотрения."""
    changes = payload.model_dump(exclude_unset=True, exclude_none=True)
    if not changes:
        raise ValidationError("At least one field is required")

    async def work(session: AsyncSession) -> ClientServiceRequest:
        service_request = await _own_request(session, request_id, client)
        _ensure_editable(service_request)
        for field, value in changes.items():
            setattr(service_request, field, getattr(value, "value", value))
        service_request.status = ServiceRequestStatus.PENDING.value
        await session.flush()
        await session.refresh(service_request)
        return service_request

    service_request = await run_in_transaction(work, session_maker)
    logger.info("service_request_updated", request_id=request_id, client_id=client.id)
    return api_response(ServiceRequestResponse.model_validate(service_request), "Service request updated")


@router.delete("/{request_id}")
@limiter.limit(AUTH_LIMIT)
async def delete_request(
    request: Request,
    request_id: int,
    client: Client = Depends(get_current_client),
    session_maker: async_sessionmaker = Depends(get_session_maker),
    storage: CloudinaryStorage = Depends(get_storage),
):
    async def work(session: AsyncSession):
        service_request = await _own_request(session, request_id, client)
        _ensure_editable(service_request)
        files = [(a.public_id, a.resource_type) for a in service_request.attachments]
        await session.delete(service_request)
        return files

    files = await run_in_transaction(work, session_maker)
    for public_id, kind in files:
        await storage.delete_quietly(public_id, kind)
    logger.info("service_request_deleted", request_id=request_id, client_id=client.id)
    return api_response(None, "Service request deleted successfully")


@router.post("/{request_id}/attachments")
async def upload_attachments(
    request_id: int,
    attachments: List[UploadFile] = File(...),
    client: Client = Depends(get_current_client),
    db: AsyncSession = Depends(get_db),
    storage: CloudinaryStorage = Depends(get_storage),
):
    """Прикрепить файлы к заявке."""
    service_request = await _own_request(db, request_id, client)
    _ensure_editable(service_request)
    paths = await save_uploads(attachments)

    uploaded = []
    try:
        for path, upload in zip(paths, attachments):
            uploaded.append(await storage.upload(path, upload.content_type))
        for item in uploaded:
            service_request.attachments.append(
                ServiceRequestAttachment(
                    url=item["url"], public_id=item["publicId"], resource_type=item["resourceKind"]
                )
            )
        await db.commit()
    except Exception:
        await db.rollback()
        for path in paths:
            remove_local_file(path)
        for item in uploaded:
            await storage.delete_quietly(item["publicId"], item["resourceKind"])
        raise

    await db.refresh(service_request, attribute_names=["attachments"])
    logger.info("service_request_attachments_added", request_id=request_id, count=len(uploaded))
    return api_response(ServiceRequestResponse.model_validate(service_request), "Attachments uploaded successfully")


@router.delete("/{request_id}/attachments/{public_id:path}")
async def delete_attachment(
    request_id: int,
    public_id: str,
    client: Client = Depends(get_current_client),
    db: AsyncSession = Depends(get_db),
    storage: CloudinaryStorage = Depends(get_storage),
):
    """Удалить вложение. Запись удаляется только после удаления файла из хранилища."""
    service_request = await _own_request(db, request_id, client)
    attachment = next((a for a in service_request.attachments if a.public_id == public_id), None)
    if attachment is None:
        raise NotFoundError("Attachment not found")

    await storage.delete(attachment.public_id, attachment.resource_type)
    service_request.attachments.remove(attachment)
    await db.commit()
    logger.info("service_request_attachment_deleted", request_id=request_id, public_id=public_id)
    return api_response(ServiceRequestResponse.model_validate(service_request), "Attachment deleted successfully")
