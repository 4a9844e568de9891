"""API для аккаунтов клиентов."""
from datetime import timedelta

from fastapi import APIRouter, Depends, File, Query, Request, UploadFile
from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from codix.core.auth import (
    clear_auth_cookies,
    ensure_client_enabled,
    extract_refresh_token,
    get_current_client,
    set_auth_cookies,
)
from codix.core.database import get_db, get_session_maker, run_in_transaction, utcnow
from codix.core.rate_limit import AUTH_LIMIT, STRICT_LIMIT, limiter
from codix.core.security import (
    TokenKind,
    TokenService,
    check_refresh_token,
    get_password_hash,
    get_token_service,
    verify_password,
)
from codix.models.client import Client
from codix.schemas.admin import PasswordChange, PasswordReset, PasswordResetRequest, RefreshTokenRequest
from codix.schemas.client import AddressUpdate, ClientDetailsUpdate, ClientLogin, ClientRegister, ClientResponse
from codix.utils.email import Mailer, get_mailer
from codix.utils.enums import PrincipalType
from codix.utils.exceptions import (
    AuthenticationError,
    ConflictError,
    ExpiredOrInvalidToken,
    Forbidden,
    ValidationError,
)
from codix.utils.logger import get_logger
from codix.utils.response import api_response
from codix.utils.storage import CloudinaryStorage, get_storage
from codix.utils.uploads import save_upload
from codix.utils.validators import ensure_strong_password, is_valid_email, is_valid_phone

router = APIRouter()
logger = get_logger(__name__)

IMAGE_TYPES = {"image/jpeg", "image/png", "image/gif", "image/webp"}
GENERIC_RESET_MESSAGE = "If an account with that email exists, a password reset link has been sent"


async def _ensure_unique(db: AsyncSession, email=None, phone=None, exclude_id=None) -> None:
    """
    Raises:
        ConflictError: Email или телефон уже заняты
    """
    conditions = []
    if email:
        conditions.append(Client.email == email)
    if phone:
        conditions.append(Client.phone == phone)
    if not conditions:
        return
    query = select(Client).where(or_(*conditions))
    if exclude_id is not None:
        query = query.where(Client.id != exclude_id)
    existing = (await db.execute(query)).scalars().first()
    if existing is None:
        return
    if email and existing.email == email:
        raise ConflictError("Client with this email already exists")
    raise ConflictError("Client with this phone number already exists")


@router.post("/register")
@limiter.limit(AUTH_LIMIT)
async def register(
    request: Request,
    payload: ClientRegister,
    session_maker: async_sessionmaker = Depends(get_session_maker),
    token_service: TokenService = Depends(get_token_service),
    mailer: Mailer = Depends(get_mailer),
):
    """
    Регистрация клиента.

    Создание аккаунта и отправка письма подтверждения выполняются в одной
    транзакции: если письмо не ушло, аккаунт не создаётся.
    """
    email = payload.email.lower()
    if not is_valid_email(email):
        raise ValidationError("Invalid email address")
    if not is_valid_phone(payload.phone):
        raise ValidationError("Invalid phone number")
    ensure_strong_password(payload.password, PrincipalType.CLIENT)

    async def work(session: AsyncSession) -> Client:
        await _ensure_unique(session, email=email, phone=payload.phone)
        client = Client(
            full_name=payload.full_name,
            email=email,
            phone=payload.phone,
            password_hash=get_password_hash(payload.password, PrincipalType.CLIENT),
        )
        session.add(client)
        await session.flush()
        client.verification_token = token_service.issue(client, TokenKind.EMAIL_VERIFICATION)
        await session.flush()
        await mailer.send_verification_email(client.email, client.full_name, client.verification_token)
        return client

    client = await run_in_transaction(work, session_maker)
    logger.info("client_registered", client_id=client.id)
    return api_response(
        ClientResponse.model_validate(client),
        "Client registered successfully. Please verify your email",
        201,
    )


@router.get("/verify-email")
async def verify_email(
    token: str = Query(..., min_length=1),
    db: AsyncSession = Depends(get_db),
    token_service: TokenService = Depends(get_token_service),
):
    try:
        claims = token_service.verify(token, TokenKind.EMAIL_VERIFICATION)
    except ExpiredOrInvalidToken:
        raise ValidationError("Invalid or expired verification token")
    client = await db.get(Client, claims.subject_id)
    if client is None or claims.principal_type != PrincipalType.CLIENT:
        raise ValidationError("Invalid or expired verification token")
    if client.is_email_verified:
        raise ValidationError("Email is already verified")
    if client.verification_token != token:
        raise ValidationError("Invalid or expired verification token")

    client.is_email_verified = True
    client.verification_token = None
    await db.commit()
    logger.info("client_email_verified", client_id=client.id)
    return api_response(None, "Email verified successfully")


@router.post("/login")
@limiter.limit(AUTH_LIMIT)
async def login(
    request: Request,
    payload: ClientLogin,
    db: AsyncSession = Depends(get_db),
    token_service: TokenService = Depends(get_token_service),
):
    result = await db.execute(select(Client).where(Client.email == payload.email.lower()))
    client = result.scalar_one_or_none()
    if client is None or not verify_password(payload.password, client.password_hash):
        raise AuthenticationError("Invalid email or password")
    if not client.is_email_verified:
        raise Forbidden("Please verify your email before logging in")
    ensure_client_enabled(client)

    tokens = token_service.issue_pair(client)
    await db.commit()
    logger.info("client_logged_in", client_id=client.id)

    response = api_response(
        {"client": ClientResponse.model_validate(client), **tokens},
        "Client logged in successfully",
    )
    set_auth_cookies(response, PrincipalType.CLIENT, tokens, token_service)
    return response


@router.post("/refresh-token")
@limiter.limit(AUTH_LIMIT)
async def refresh_token(
    request: Request,
    payload: RefreshTokenRequest = RefreshTokenRequest(),
    db: AsyncSession = Depends(get_db),
    token_service: TokenService = Depends(get_token_service),
):
    presented = extract_refresh_token(request, PrincipalType.CLIENT, payload.refresh_token)
    claims = token_service.verify(presented, TokenKind.REFRESH)
    if claims.principal_type != PrincipalType.CLIENT:
        raise ExpiredOrInvalidToken()

    client = await db.get(Client, claims.subject_id)
    if client is None:
        raise ExpiredOrInvalidToken()
    ensure_client_enabled(client)
    check_refresh_token(presented, client.refresh_token)

    tokens = token_service.issue_pair(client)
    await db.commit()

    response = api_response(tokens, "Access token refreshed")
    set_auth_cookies(response, PrincipalType.CLIENT, tokens, token_service)
    return response


@router.post("/logout")
async def logout(client: Client = Depends(get_current_client), db: AsyncSession = Depends(get_db)):
    client.refresh_token = None
    await db.commit()
    logger.info("client_logged_out", client_id=client.id)
    response = api_response(None, "Client logged out successfully")
    clear_auth_cookies(response, PrincipalType.CLIENT)
    return response


@router.get("/me")
async def me(client: Client = Depends(get_current_client)):
    return api_response(ClientResponse.model_validate(client), "Client fetched successfully")


@router.patch("/update-details")
async def update_details(
    payload: ClientDetailsUpdate,
    client: Client = Depends(get_current_client),
    db: AsyncSession = Depends(get_db),
):
    changes = payload.model_dump(exclude_unset=True, exclude_none=True)
    if not changes:
        raise ValidationError("At least one field is required")

    email = changes.get("email")
    if email is not None:
        email = email.lower()
        if not is_valid_email(email):
            raise ValidationError("Invalid email address")
        changes["email"] = email
    phone = changes.get("phone")
    if phone is not None and not is_valid_phone(phone):
        raise ValidationError("Invalid phone number")

    await _ensure_unique(db, email=email, phone=phone, exclude_id=client.id)
    for field, value in changes.items():
        setattr(client, field, value)
    await db.commit()
    logger.info("client_details_updated", client_id=client.id, fields=list(changes))
    return api_response(ClientResponse.model_validate(client), "Account details updated successfully")


@router.patch("/update-address")
async def update_address(
    payload: AddressUpdate,
    client: Client = Depends(get_current_client),
    db: AsyncSession = Depends(get_db),
):
    changes = payload.model_dump(exclude_unset=True)
    if not changes:
        raise ValidationError("At least one address field is required")
    for field, value in changes.items():
        setattr(client, f"address_{field}", value)
    await db.commit()
    return api_response(ClientResponse.model_validate(client), "Address updated successfully")


@router.post("/change-password")
async def change_password(
    payload: PasswordChange,
    client: Client = Depends(get_current_client),
    db: AsyncSession = Depends(get_db),
):
    if not verify_password(payload.current_password, client.password_hash):
        raise ValidationError("Current password is incorrect")
    if payload.current_password == payload.new_password:
        raise ValidationError("New password must be different from the current one")
    ensure_strong_password(payload.new_password, PrincipalType.CLIENT)

    client.password_hash = get_password_hash(payload.new_password, PrincipalType.CLIENT)
    client.refresh_token = None
    await db.commit()
    logger.info("client_password_changed", client_id=client.id)
    response = api_response(None, "Password changed successfully")
    clear_auth_cookies(response, PrincipalType.CLIENT)
    return response


@router.post("/request-password-reset")
@limiter.limit(STRICT_LIMIT)
async def request_password_reset(
    request: Request,
    payload: PasswordResetRequest,
    db: AsyncSession = Depends(get_db),
    token_service: TokenService = Depends(get_token_service),
    mailer: Mailer = Depends(get_mailer),
):
    result = await db.execute(select(Client).where(Client.email == payload.email.lower()))
    client = result.scalar_one_or_none()
    if client is not None:
        token = token_service.issue(client, TokenKind.PASSWORD_RESET)
        client.reset_token = token
        client.reset_token_expires = utcnow() + timedelta(minutes=token_service.settings.reset_token_expire_minutes)
        await db.commit()
        await mailer.send_password_reset_email(client.email, client.full_name, token)
        logger.info("client_password_reset_requested", client_id=client.id)
    return api_response(None, GENERIC_RESET_MESSAGE)


@router.post("/reset-password")
@limiter.limit(STRICT_LIMIT)
async def reset_password(
    request: Request,
    payload: PasswordReset,
    db: AsyncSession = Depends(get_db),
    token_service: TokenService = Depends(get_token_service),
):
    claims = token_service.verify(payload.token, TokenKind.PASSWORD_RESET)
    if claims.principal_type != PrincipalType.CLIENT:
        raise ExpiredOrInvalidToken()
    client = await db.get(Client, claims.subject_id)
    if (
        client is None
        or client.reset_token != payload.token
        or client.reset_token_expires is None
        or client.reset_token_expires < utcnow()
    ):
        raise ValidationError("Invalid or expired reset token")

    ensure_strong_password(payload.new_password, PrincipalType.CLIENT)
    client.password_hash = get_password_hash(payload.new_password, PrincipalType.CLIENT)
    client.reset_token = None
    client.reset_token_expires = None
    client.refresh_token = None
    await db.commit()
    logger.info("client_password_reset", client_id=client.id)
    return api_response(None, "Password reset successfully")


@router.patch("/upload-profile-image")
async def upload_profile_image(
    profile_image: UploadFile = File(..., alias="profileImage"),
    client: Client = Depends(get_current_client),
    db: AsyncSession = Depends(get_db),
    storage: CloudinaryStorage = Depends(get_storage),
):
    """Заменить фото профиля. Старое фото удаляется без гарантий."""
    path = await save_upload(profile_image, allowed_types=IMAGE_TYPES)
    uploaded = await storage.upload(path, profile_image.content_type)

    old_public_id = client.profile_image_public_id
    client.profile_image = uploaded["url"]
    client.profile_image_public_id = uploaded["publicId"]
    await db.commit()

    if old_public_id:
        await storage.delete_quietly(old_public_id, "image")
    logger.info("client_profile_image_updated", client_id=client.id)
    return api_response(ClientResponse.model_validate(client), "Profile image updated successfully")
