"""API для заявок на вакансии."""
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, Request, UploadFile
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from codix.core.auth import get_current_admin
from codix.core.database import get_db, get_session_maker, run_in_transaction
from codix.core.rate_limit import AUTH_LIMIT, limiter
from codix.models.admin import Admin
from codix.models.career import Career
from codix.schemas.base import paginate
from codix.schemas.career import CareerResponse, CareerStatusUpdate
from codix.utils.enums import CareerSource, CareerStatus
from codix.utils.exceptions import ConflictError, NotFoundError, ValidationError
from codix.utils.logger import get_logger
from codix.utils.query import PageParams, fetch_page
from codix.utils.response import api_response
from codix.utils.storage import CloudinaryStorage, get_storage
from codix.utils.uploads import save_upload
from codix.utils.validators import is_valid_email, is_valid_phone, require_fields

router = APIRouter()
logger = get_logger(__name__)

DOCUMENT_TYPES = {
    "application/pdf",
    "application/msword",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
}


@router.post("")
@limiter.limit(AUTH_LIMIT)
async def create_application(
    request: Request,
    full_name: str = Form("", alias="fullName"),
    email: str = Form(""),
    phone: str = Form(""),
    position_applied: str = Form("", alias="positionApplied"),
    source: CareerSource = Form(CareerSource.WEBSITE),
    resume: Optional[UploadFile] = File(None),
    cover_letter: Optional[UploadFile] = File(None, alias="coverLetter"),
    session_maker: async_sessionmaker = Depends(get_session_maker),
    storage: CloudinaryStorage = Depends(get_storage),
):
    """
    Принять заявку соискателя.

    Резюме загружается в хранилище до записи в БД. Если запись не удалась,
    загруженные файлы удаляются без гарантий.
    """
    require_fields(
        {"fullName": full_name, "email": email, "phone": phone, "positionApplied": position_applied},
        ("fullName", "email", "phone", "positionApplied"),
    )
    if resume is None or not resume.filename:
        raise ValidationError("Resume file is required")
    email = email.strip().lower()
    if not is_valid_email(email):
        raise ValidationError("Invalid email address")
    if not is_valid_phone(phone):
        raise ValidationError("Invalid phone number")

    async with session_maker() as session:
        existing = await session.execute(select(Career.id).where(Career.email == email))
        if existing.scalar_one_or_none() is not None:
            raise ConflictError("An application with this email already exists")

    resume_file = await storage.upload(await save_upload(resume, DOCUMENT_TYPES), resume.content_type)
    uploaded = [resume_file]
    try:
        letter_file = None
        if cover_letter is not None and cover_letter.filename:
            letter_file = await storage.upload(await save_upload(cover_letter, DOCUMENT_TYPES), cover_letter.content_type)
            uploaded.append(letter_file)

        async def work(session: AsyncSession) -> Career:
            career = Career(
                full_name=full_name.strip(),
                email=email,
                phone=phone.strip(),
                position_applied=position_applied.strip(),
                source=source.value,
                resume_url=resume_file["url"],
                resume_public_id=resume_file["publicId"],
                resume_resource_type=resume_file["resourceKind"],
            )
            if letter_file:
                career.cover_letter_url = letter_file["url"]
                career.cover_letter_public_id = letter_file["publicId"]
                career.cover_letter_resource_type = letter_file["resourceKind"]
            session.add(career)
            await session.flush()
            return career

        career = await run_in_transaction(work, session_maker)
    except Exception:
        for item in uploaded:
            await storage.delete_quietly(item["publicId"], item["resourceKind"])
        raise

    logger.info("career_application_created", career_id=career.id, position=career.position_applied)
    return api_response(CareerResponse.model_validate(career), "Application submitted successfully", 201)


@router.get("")
@limiter.limit(AUTH_LIMIT)
async def list_applications(
    request: Request,
    status: Optional[CareerStatus] = None,
    position: Optional[str] = None,
    page: PageParams = Depends(),
    admin: Admin = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db),
):
    query = select(Career)
    if status is not None:
        query = query.where(Career.status == status.value)
    if position:
        query = query.where(Career.position_applied.ilike(f"%{position}%"))
    careers, total = await fetch_page(db, query.order_by(Career.created_at.desc()), page)
    data = paginate("applications", [CareerResponse.model_validate(c) for c in careers], total, page.page, page.limit)
    return api_response(data, "Applications fetched successfully")


@router.patch("/{career_id}/status")
@limiter.limit(AUTH_LIMIT)
async def update_application_status(
    request: Request,
    career_id: int,
    payload: CareerStatusUpdate,
    admin: Admin = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db),
):
    career = await db.get(Career, career_id)
    if career is None:
        raise NotFoundError("Application not found")
    career.status = payload.status.value
    await db.commit()
    logger.info("career_status_updated", career_id=career_id, status=career.status, admin_id=admin.id)
    return api_response(CareerResponse.model_validate(career), "Application status updated")


@router.delete("/{career_id}")
@limiter.limit(AUTH_LIMIT)
async def delete_application(
    request: Request,
    career_id: int,
    admin: Admin = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db),
    storage: CloudinaryStorage = Depends(get_storage),
):
    career = await db.get(Career, career_id)
    if career is None:
        raise NotFoundError("Application not found")
    files = [(career.resume_public_id, career.resume_resource_type)]
    if career.cover_letter_public_id:
        files.append((career.cover_letter_public_id, career.cover_letter_resource_type))
    await db.delete(career)
    await db.commit()

    for public_id, kind in files:
        await storage.delete_quietly(public_id, kind)
    logger.info("career_application_deleted", career_id=career_id, admin_id=admin.id)
    return api_response(None, "Application deleted successfully")
