"""API для блога."""
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, Query, Request, UploadFile
from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from codix.core.auth import get_current_client, get_optional_client
from codix.core.database import get_db, get_session_maker, run_in_transaction
from codix.core.ownership import verify_ownership
from codix.core.rate_limit import AUTH_LIMIT, limiter
from codix.models.blog import Blog
from codix.models.client import Client
from codix.schemas.base import paginate
from codix.schemas.blog import BlogCreate, BlogResponse, BlogUpdate
from codix.utils.enums import BlogStatus, ClientStatus
from codix.utils.exceptions import Forbidden, NotFoundError, ValidationError
from codix.utils.logger import get_logger
from codix.utils.query import PageParams, apply_sort, fetch_page
from codix.utils.response import api_response
from codix.utils.storage import CloudinaryStorage, get_storage
from codix.utils.text import make_excerpt, reading_time, unique_slug
from codix.utils.uploads import save_upload

router = APIRouter()
logger = get_logger(__name__)

IMAGE_TYPES = {"image/jpeg", "image/png", "image/gif", "image/webp"}
SORT_COLUMNS = {
    "createdAt": Blog.created_at,
    "updatedAt": Blog.updated_at,
    "views": Blog.views,
    "title": Blog.title,
}


def _search(query, search: Optional[str]):
    if not search:
        return query
    pattern = f"%{search}%"
    return query.where(or_(Blog.title.ilike(pattern), Blog.content.ilike(pattern), Blog.category.ilike(pattern)))


async def _load_by_id_or_slug(db: AsyncSession, blog_id: str) -> Optional[Blog]:
    if blog_id.isdigit():
        blog = await db.get(Blog, int(blog_id))
        if blog is not None:
            return blog
    result = await db.execute(select(Blog).where(Blog.slug == blog_id))
    return result.scalar_one_or_none()


@router.get("")
@limiter.limit(AUTH_LIMIT)
async def list_blogs(
    request: Request,
    category: Optional[str] = None,
    author: Optional[int] = None,
    featured: Optional[bool] = None,
    search: Optional[str] = None,
    sort_by: str = Query("createdAt", alias="sortBy"),
    sort_order: str = Query("desc", alias="sortOrder"),
    page: PageParams = Depends(),
    db: AsyncSession = Depends(get_db),
):
    """Опубликованные записи с фильтрами."""
    query = select(Blog).where(Blog.status == BlogStatus.PUBLISHED.value)
    if category:
        query = query.where(Blog.category == category)
    if author is not None:
        query = query.where(Blog.author_id == author)
    if featured is not None:
        query = query.where(Blog.featured == featured)
    query = apply_sort(_search(query, search), SORT_COLUMNS, sort_by, sort_order)

    blogs, total = await fetch_page(db, query, page)
    data = paginate("blogs", [BlogResponse.model_validate(b) for b in blogs], total, page.page, page.limit)
    return api_response(data, "Blogs fetched successfully")


@router.get("/author/{author_id}")
@limiter.limit(AUTH_LIMIT)
async def list_blogs_by_author(
    request: Request,
    author_id: int,
    page: PageParams = Depends(),
    db: AsyncSession = Depends(get_db),
    viewer: Optional[Client] = Depends(get_optional_client),
):
    """Записи автора. Сам автор видит и черновики."""
    if await db.get(Client, author_id) is None:
        raise NotFoundError("Author not found")
    query = select(Blog).where(Blog.author_id == author_id)
    if viewer is None or viewer.id != author_id:
        query = query.where(Blog.status == BlogStatus.PUBLISHED.value)
    blogs, total = await fetch_page(db, query.order_by(Blog.created_at.desc()), page)
    data = paginate("blogs", [BlogResponse.model_validate(b) for b in blogs], total, page.page, page.limit)
    return api_response(data, "Author blogs fetched successfully")


@router.get("/{blog_id}")
@limiter.limit(AUTH_LIMIT)
async def get_blog(
    request: Request,
    blog_id: str,
    db: AsyncSession = Depends(get_db),
    viewer: Optional[Client] = Depends(get_optional_client),
):
    """Запись по ID или slug. Просмотры считаются только для не-авторов."""
    blog = await _load_by_id_or_slug(db, blog_id)
    if blog is None:
        raise NotFoundError("Blog not found")

    is_author = viewer is not None and viewer.id == blog.author_id
    if not is_author:
        if blog.status != BlogStatus.PUBLISHED.value:
            raise NotFoundError("Blog not found")
        blog.views += 1
        await db.commit()
    return api_response(BlogResponse.model_validate(blog), "Blog fetched successfully")


@router.post("")
@limiter.limit(AUTH_LIMIT)
async def create_blog(
    request: Request,
    payload: BlogCreate,
    client: Client = Depends(get_current_client),
    db: AsyncSession = Depends(get_db),
):
    if client.status != ClientStatus.ACTIVE.value:
        raise Forbidden("Only active clients can create blogs")

    blog = Blog(
        title=payload.title,
        slug=unique_slug(payload.title),
        content=payload.content,
        excerpt=make_excerpt(payload.content),
        reading_time=reading_time(payload.content),
        author_id=client.id,
        tags=payload.tags,
        category=payload.category,
        status=payload.status.value,
        seo_title=payload.seo_title or payload.title,
        seo_description=payload.seo_description or make_excerpt(payload.content, 160),
        meta_keywords=payload.meta_keywords,
    )
    db.add(blog)
    await db.commit()
    await db.refresh(blog, attribute_names=["author", "liked_by"])
    logger.info("blog_created", blog_id=blog.id, author_id=client.id)
    return api_response(BlogResponse.model_validate(blog), "Blog created successfully", 201)


@router.patch("/{blog_id}")
async def update_blog(
    blog_id: int,
    payload: BlogUpdate,
    client: Client = Depends(get_current_client),
    session_maker: async_sessionmaker = Depends(get_session_maker),
):
    changes = payload.model_dump(exclude_unset=True, exclude_none=True)
    if not changes:
        raise ValidationError("At least one field is required")

    async def work(session: AsyncSession) -> Blog:
        blog = await verify_ownership(session, Blog, blog_id, client.id, owner_field="author_id", label="Blog")
        for field, value in changes.items():
            setattr(blog, field, getattr(value, "value", value))
        if "title" in changes:
            blog.slug = unique_slug(blog.title)
        if "content" in changes:
            blog.excerpt = make_excerpt(blog.content)
            blog.reading_time = reading_time(blog.content)
        await session.flush()
        await session.refresh(blog)
        return blog

    blog = await run_in_transaction(work, session_maker)
    logger.info("blog_updated", blog_id=blog.id, fields=list(changes))
    return api_response(BlogResponse.model_validate(blog), "Blog updated successfully")


@router.delete("/{blog_id}")
async def delete_blog(
    blog_id: int,
    client: Client = Depends(get_current_client),
    session_maker: async_sessionmaker = Depends(get_session_maker),
    storage: CloudinaryStorage = Depends(get_storage),
):
    async def work(session: AsyncSession) -> Optional[str]:
        blog = await verify_ownership(session, Blog, blog_id, client.id, owner_field="author_id", label="Blog")
        public_id = blog.cover_image_public_id
        await session.delete(blog)
        return public_id

    cover_public_id = await run_in_transaction(work, session_maker)
    if cover_public_id:
        await storage.delete_quietly(cover_public_id, "image")
    logger.info("blog_deleted", blog_id=blog_id, author_id=client.id)
    return api_response(None, "Blog deleted successfully")


@router.post("/{blog_id}/like")
async def toggle_like(
    blog_id: int,
    client: Client = Depends(get_current_client),
    db: AsyncSession = Depends(get_db),
):
    """Поставить или снять лайк (только опубликованные записи)."""
    blog = await db.get(Blog, blog_id)
    if blog is None:
        raise NotFoundError("Blog not found")
    if blog.status != BlogStatus.PUBLISHED.value:
        raise ValidationError("Only published blogs can be liked")

    if any(liker.id == client.id for liker in blog.liked_by):
        blog.liked_by = [liker for liker in blog.liked_by if liker.id != client.id]
        liked = False
    else:
        blog.liked_by.append(client)
        liked = True
    await db.commit()
    return api_response(
        {"liked": liked, "likeCount": blog.like_count},
        "Blog liked" if liked else "Blog unliked",
    )


@router.patch("/{blog_id}/cover-image")
async def upload_cover_image(
    blog_id: int,
    cover_image: UploadFile = File(..., alias="coverImage"),
    alt_text: Optional[str] = Form(None, alias="altText"),
    client: Client = Depends(get_current_client),
    db: AsyncSession = Depends(get_db),
    storage: CloudinaryStorage = Depends(get_storage),
):
    """Загрузить обложку. Предыдущая удаляется без гарантий."""
    blog = await verify_ownership(db, Blog, blog_id, client.id, owner_field="author_id", label="Blog")
    path = await save_upload(cover_image, allowed_types=IMAGE_TYPES)
    uploaded = await storage.upload(path, cover_image.content_type)

    old_public_id = blog.cover_image_public_id
    blog.cover_image_url = uploaded["url"]
    blog.cover_image_public_id = uploaded["publicId"]
    blog.cover_image_alt = alt_text or blog.title
    try:
        await db.commit()
    except Exception:
        await db.rollback()
        await storage.delete_quietly(uploaded["publicId"], "image")
        raise

    if old_public_id:
        await storage.delete_quietly(old_public_id, "image")
    logger.info("blog_cover_updated", blog_id=blog.id)
    return api_response(BlogResponse.model_validate(blog), "Cover image updated successfully")
