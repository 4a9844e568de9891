"""API панели администратора: клиенты и модерация блога."""
from typing import List, Optional, Tuple

from fastapi import APIRouter, Depends, Request
from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from codix.core.auth import require_permission
from codix.core.database import get_db, get_session_maker, run_in_transaction
from codix.core.permissions import Permission
from codix.core.rate_limit import AUTH_LIMIT, STRICT_LIMIT, limiter
from codix.models.admin import Admin
from codix.models.blog import Blog
from codix.models.client import Client
from codix.schemas.base import paginate
from codix.schemas.blog import BlogResponse, BlogStatusUpdate
from codix.schemas.client import ClientAdminUpdate, ClientResponse
from codix.utils.enums import BlogStatus, ClientStatus
from codix.utils.exceptions import NotFoundError, ValidationError
from codix.utils.logger import get_logger
from codix.utils.query import PageParams, fetch_page
from codix.utils.response import api_response
from codix.utils.storage import CloudinaryStorage, get_storage

router = APIRouter()
logger = get_logger(__name__)

manage_clients = require_permission(Permission.MANAGE_CLIENTS)
manage_blog = require_permission(Permission.MANAGE_BLOG)


async def _get_client(db: AsyncSession, client_id: int) -> Client:
    client = await db.get(Client, client_id)
    if client is None:
        raise NotFoundError("Client not found")
    return client


async def _get_blog(db: AsyncSession, blog_id: int) -> Blog:
    blog = await db.get(Blog, blog_id)
    if blog is None:
        raise NotFoundError("Blog not found")
    return blog


# Клиенты

@router.get("/clients")
@limiter.limit(AUTH_LIMIT)
async def list_clients(
    request: Request,
    search: Optional[str] = None,
    status: Optional[ClientStatus] = None,
    page: PageParams = Depends(),
    admin: Admin = Depends(manage_clients),
    db: AsyncSession = Depends(get_db),
):
    query = select(Client)
    if status is not None:
        query = query.where(Client.status == status.value)
    if search:
        pattern = f"%{search}%"
        query = query.where(or_(Client.full_name.ilike(pattern), Client.email.ilike(pattern), Client.phone.ilike(pattern)))
    clients, total = await fetch_page(db, query.order_by(Client.created_at.desc()), page)
    data = paginate("clients", [ClientResponse.model_validate(c) for c in clients], total, page.page, page.limit)
    return api_response(data, "Clients fetched successfully")


@router.get("/clients/{client_id}")
@limiter.limit(AUTH_LIMIT)
async def get_client(
    request: Request,
    client_id: int,
    admin: Admin = Depends(manage_clients),
    db: AsyncSession = Depends(get_db),
):
    client = await _get_client(db, client_id)
    return api_response(ClientResponse.model_validate(client), "Client fetched successfully")


@router.patch("/clients/{client_id}")
@limiter.limit(AUTH_LIMIT)
async def update_client(
    request: Request,
    client_id: int,
    payload: ClientAdminUpdate,
    admin: Admin = Depends(manage_clients),
    db: AsyncSession = Depends(get_db),
):
    changes = payload.model_dump(exclude_unset=True, exclude_none=True)
    if not changes:
        raise ValidationError("At least one field is required")
    client = await _get_client(db, client_id)
    for field, value in changes.items():
        setattr(client, field, getattr(value, "value", value))
    # Заблокированный клиент теряет сессию
    if client.status == ClientStatus.BANNED.value:
        client.refresh_token = None
    await db.commit()
    logger.info("client_updated_by_admin", client_id=client_id, admin_id=admin.id, fields=list(changes))
    return api_response(ClientResponse.model_validate(client), "Client updated successfully")


@router.delete("/clients/{client_id}")
@limiter.limit(STRICT_LIMIT)
async def delete_client(
    request: Request,
    client_id: int,
    admin: Admin = Depends(manage_clients),
    session_maker: async_sessionmaker = Depends(get_session_maker),
    storage: CloudinaryStorage = Depends(get_storage),
):
    """Удалить клиента вместе с записями блога и заявками."""

    async def work(session: AsyncSession) -> List[Tuple[str, str]]:
        client = await _get_client(session, client_id)
        await session.refresh(client, attribute_names=["blogs", "service_requests"])
        files = []
        if client.profile_image_public_id:
            files.append((client.profile_image_public_id, "image"))
        files.extend((b.cover_image_public_id, "image") for b in client.blogs if b.cover_image_public_id)
        for service_request in client.service_requests:
            files.extend((a.public_id, a.resource_type) for a in service_request.attachments)
        await session.delete(client)
        return files

    files = await run_in_transaction(work, session_maker)
    for public_id, kind in files:
        await storage.delete_quietly(public_id, kind)
    logger.info("client_deleted_by_admin", client_id=client_id, admin_id=admin.id, files=len(files))
    return api_response(None, "Client deleted successfully")


# Блог

@router.get("/blogs")
@limiter.limit(AUTH_LIMIT)
async def list_all_blogs(
    request: Request,
    status: Optional[BlogStatus] = None,
    search: Optional[str] = None,
    page: PageParams = Depends(),
    admin: Admin = Depends(manage_blog),
    db: AsyncSession = Depends(get_db),
):
    query = select(Blog)
    if status is not None:
        query = query.where(Blog.status == status.value)
    if search:
        pattern = f"%{search}%"
        query = query.where(or_(Blog.title.ilike(pattern), Blog.category.ilike(pattern)))
    blogs, total = await fetch_page(db, query.order_by(Blog.created_at.desc()), page)
    data = paginate("blogs", [BlogResponse.model_validate(b) for b in blogs], total, page.page, page.limit)
    return api_response(data, "Blogs fetched successfully")


@router.get("/blogs/{blog_id}")
@limiter.limit(AUTH_LIMIT)
async def get_blog(
    request: Request,
    blog_id: int,
    admin: Admin = Depends(manage_blog),
    db: AsyncSession = Depends(get_db),
):
    blog = await _get_blog(db, blog_id)
    return api_response(BlogResponse.model_validate(blog), "Blog fetched successfully")


@router.delete("/blogs/{blog_id}")
@limiter.limit(STRICT_LIMIT)
async def delete_blog(
    request: Request,
    blog_id: int,
    admin: Admin = Depends(manage_blog),
    db: AsyncSession = Depends(get_db),
    storage: CloudinaryStorage = Depends(get_storage),
):
    blog = await _get_blog(db, blog_id)
    cover_public_id = blog.cover_image_public_id
    await db.delete(blog)
    await db.commit()
    if cover_public_id:
        await storage.delete_quietly(cover_public_id, "image")
    logger.info("blog_deleted_by_admin", blog_id=blog_id, admin_id=admin.id)
    return api_response(None, "Blog deleted successfully")


@router.patch("/blogs/{blog_id}/status")
@limiter.limit(AUTH_LIMIT)
async def change_blog_status(
    request: Request,
    blog_id: int,
    payload: BlogStatusUpdate,
    admin: Admin = Depends(manage_blog),
    db: AsyncSession = Depends(get_db),
):
    blog = await _get_blog(db, blog_id)
    blog.status = payload.status.value
    await db.commit()
    logger.info("blog_status_changed", blog_id=blog_id, status=blog.status, admin_id=admin.id)
    return api_response(BlogResponse.model_validate(blog), "Blog status updated successfully")


@router.patch("/blogs/{blog_id}/toggle")
@limiter.limit(AUTH_LIMIT)
async def toggle_blog_featured(
    request: Request,
    blog_id: int,
    admin: Admin = Depends(manage_blog),
    db: AsyncSession = Depends(get_db),
):
    blog = await _get_blog(db, blog_id)
    blog.featured = not blog.featured
    await db.commit()
    return api_response(
        BlogResponse.model_validate(blog),
        "Blog marked as featured" if blog.featured else "Blog removed from featured",
    )
