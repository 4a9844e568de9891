"""API для обращений через форму обратной связи."""
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from codix.core.auth import get_current_client, require_permission
from codix.core.database import get_db
from codix.core.permissions import Permission
from codix.core.rate_limit import AUTH_LIMIT, limiter
from codix.models.admin import Admin
from codix.models.client import Client
from codix.models.contact import Contact
from codix.schemas.base import paginate
from codix.schemas.contact import ContactCreate, ContactResponse, ContactUpdate
from codix.utils.enums import ContactStatus
from codix.utils.exceptions import NotFoundError, ValidationError
from codix.utils.ip import get_client_ip
from codix.utils.logger import get_logger
from codix.utils.query import PageParams, fetch_page
from codix.utils.response import api_response

router = APIRouter()
logger = get_logger(__name__)

manage_contacts = require_permission(Permission.MANAGE_CONTACTS)


async def _save_contact(db: AsyncSession, payload: ContactCreate, request: Request, client: Optional[Client]):
    contact = Contact(
        **payload.model_dump(),
        ip_address=get_client_ip(request),
        client_id=client.id if client else None,
    )
    db.add(contact)
    await db.commit()
    await db.refresh(contact, attribute_names=["client", "responded_by"])
    logger.info("contact_created", contact_id=contact.id, client_id=contact.client_id)
    return contact


@router.post("")
@limiter.limit(AUTH_LIMIT)
async def create_contact(request: Request, payload: ContactCreate, db: AsyncSession = Depends(get_db)):
    """Анонимное обращение."""
    contact = await _save_contact(db, payload, request, None)
    return api_response(ContactResponse.model_validate(contact), "Message sent successfully", 201)


@router.post("/auth")
@limiter.limit(AUTH_LIMIT)
async def create_authenticated_contact(
    request: Request,
    payload: ContactCreate,
    client: Client = Depends(get_current_client),
    db: AsyncSession = Depends(get_db),
):
    """Обращение, привязанное к клиенту."""
    contact = await _save_contact(db, payload, request, client)
    return api_response(ContactResponse.model_validate(contact), "Message sent successfully", 201)


@router.get("/client/me")
@limiter.limit(AUTH_LIMIT)
async def list_my_contacts(
    request: Request,
    page: PageParams = Depends(),
    client: Client = Depends(get_current_client),
    db: AsyncSession = Depends(get_db),
):
    query = select(Contact).where(Contact.client_id == client.id).order_by(Contact.created_at.desc())
    contacts, total = await fetch_page(db, query, page)
    data = paginate("contacts", [ContactResponse.model_validate(c) for c in contacts], total, page.page, page.limit)
    return api_response(data, "Contacts fetched successfully")


@router.get("")
@limiter.limit(AUTH_LIMIT)
async def list_contacts(
    request: Request,
    status: str = Query("all"),
    search: Optional[str] = None,
    page: PageParams = Depends(),
    admin: Admin = Depends(manage_contacts),
    db: AsyncSession = Depends(get_db),
):
    query = select(Contact)
    if status != "all":
        try:
            query = query.where(Contact.status == ContactStatus(status).value)
        except ValueError:
            raise ValidationError(f"Invalid status: {status}")
    if search:
        pattern = f"%{search}%"
        query = query.where(
            or_(Contact.full_name.ilike(pattern), Contact.email.ilike(pattern), Contact.subject.ilike(pattern))
        )
    contacts, total = await fetch_page(db, query.order_by(Contact.created_at.desc()), page)
    data = paginate("contacts", [ContactResponse.model_validate(c) for c in contacts], total, page.page, page.limit)
    return api_response(data, "Contacts fetched successfully")


async def _get_contact(db: AsyncSession, contact_id: int) -> Contact:
    contact = await db.get(Contact, contact_id)
    if contact is None:
        raise NotFoundError("Contact not found")
    return contact


@router.get("/{contact_id}")
@limiter.limit(AUTH_LIMIT)
async def get_contact(
    request: Request,
    contact_id: int,
    admin: Admin = Depends(manage_contacts),
    db: AsyncSession = Depends(get_db),
):
    contact = await _get_contact(db, contact_id)
    return api_response(ContactResponse.model_validate(contact), "Contact fetched successfully")


@router.patch("/{contact_id}")
@limiter.limit(AUTH_LIMIT)
async def update_contact(
    request: Request,
    contact_id: int,
    payload: ContactUpdate,
    admin: Admin = Depends(manage_contacts),
    db: AsyncSession = Depends(get_db),
):
    changes = payload.model_dump(exclude_unset=True, exclude_none=True)
    if not changes:
        raise ValidationError("At least one field is required")
    contact = await _get_contact(db, contact_id)
    for field, value in changes.items():
        setattr(contact, field, getattr(value, "value", value))
    contact.responded_by_id = admin.id
    await db.commit()
    await db.refresh(contact, attribute_names=["responded_by"])
    logger.info("contact_updated", contact_id=contact_id, admin_id=admin.id)
    return api_response(ContactResponse.model_validate(contact), "Contact updated successfully")


@router.delete("/{contact_id}")
@limiter.limit(AUTH_LIMIT)
async def delete_contact(
    request: Request,
    contact_id: int,
    admin: Admin = Depends(manage_contacts),
    db: AsyncSession = Depends(get_db),
):
    contact = await _get_contact(db, contact_id)
    await db.delete(contact)
    await db.commit()
    logger.info("contact_deleted", contact_id=contact_id, admin_id=admin.id)
    return api_response(None, "Contact deleted successfully")
