"""API для аккаунтов администраторов."""
from datetime import timedelta

from fastapi import APIRouter, Depends, Request
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from codix.core.auth import (
    clear_auth_cookies,
    extract_refresh_token,
    get_current_admin,
    get_current_superadmin,
    set_auth_cookies,
)
from codix.core.database import get_db, utcnow
from codix.core.permissions import default_permissions
from codix.core.rate_limit import AUTH_LIMIT, STRICT_LIMIT, limiter
from codix.core.security import (
    TokenKind,
    TokenService,
    check_refresh_token,
    get_password_hash,
    get_token_service,
    verify_password,
)
from codix.models.admin import Admin
from codix.schemas.admin import (
    AdminCreate,
    AdminLogin,
    AdminResponse,
    PasswordChange,
    PasswordReset,
    PasswordResetRequest,
    RefreshTokenRequest,
    SuperAdminInit,
)
from codix.utils.email import Mailer, get_mailer
from codix.utils.enums import AdminRole, PrincipalType
from codix.utils.exceptions import (
    AuthenticationError,
    ConflictError,
    ExpiredOrInvalidToken,
    Forbidden,
    NotFoundError,
    ValidationError,
)
from codix.utils.ip import get_client_ip
from codix.utils.logger import get_logger
from codix.utils.response import api_response
from codix.utils.validators import ensure_strong_password

router = APIRouter()
logger = get_logger(__name__)

GENERIC_RESET_MESSAGE = "If an account with that email exists, a password reset link has been sent"


async def _ensure_email_free(db: AsyncSession, email: str) -> None:
    result = await db.execute(select(Admin.id).where(Admin.email == email))
    if result.scalar_one_or_none() is not None:
        raise ConflictError("Admin with this email already exists")


@router.post("/init-superadmin")
@limiter.limit(STRICT_LIMIT)
async def init_superadmin(request: Request, payload: SuperAdminInit, db: AsyncSession = Depends(get_db)):
    """Создать единственного суперадмина."""
    result = await db.execute(select(Admin.id).where(Admin.role == AdminRole.SUPERADMIN.value))
    if result.first() is not None:
        raise Forbidden("Superadmin already exists")

    ensure_strong_password(payload.password, PrincipalType.ADMIN)
    email = payload.email.lower()
    await _ensure_email_free(db, email)

    admin = Admin(
        full_name=payload.full_name,
        email=email,
        password_hash=get_password_hash(payload.password, PrincipalType.ADMIN),
        role=AdminRole.SUPERADMIN.value,
        permissions=default_permissions(AdminRole.SUPERADMIN.value),
        is_active=True,
    )
    db.add(admin)
    await db.commit()
    logger.info("superadmin_created", admin_id=admin.id)
    return api_response(AdminResponse.model_validate(admin), "Superadmin created successfully", 201)


@router.post("/login")
@limiter.limit(AUTH_LIMIT)
async def login(
    request: Request,
    payload: AdminLogin,
    db: AsyncSession = Depends(get_db),
    token_service: TokenService = Depends(get_token_service),
):
    """Вход администратора."""
    result = await db.execute(select(Admin).where(Admin.email == payload.email.lower()))
    admin = result.scalar_one_or_none()
    if admin is None:
        raise NotFoundError("Admin not found")
    if not admin.is_active:
        raise Forbidden("Admin account is deactivated")
    if not verify_password(payload.password, admin.password_hash):
        logger.warning("admin_login_failed", admin_id=admin.id)
        raise AuthenticationError("Invalid credentials")

    admin.last_login = utcnow()
    admin.login_ip = get_client_ip(request)
    tokens = token_service.issue_pair(admin)
    await db.commit()
    logger.info("admin_logged_in", admin_id=admin.id, ip=admin.login_ip)

    response = api_response(
        {"admin": AdminResponse.model_validate(admin), **tokens},
        "Admin logged in successfully",
    )
    set_auth_cookies(response, PrincipalType.ADMIN, tokens, token_service)
    return response


@router.post("/refresh-token")
@limiter.limit(AUTH_LIMIT)
async def refresh_token(
    request: Request,
    payload: RefreshTokenRequest = RefreshTokenRequest(),
    db: AsyncSession = Depends(get_db),
    token_service: TokenService = Depends(get_token_service),
):
    """Обновить пару токенов (старый refresh-токен становится недействительным)."""
    presented = extract_refresh_token(request, PrincipalType.ADMIN, payload.refresh_token)
    claims = token_service.verify(presented, TokenKind.REFRESH)
    if claims.principal_type != PrincipalType.ADMIN:
        raise ExpiredOrInvalidToken()

    admin = await db.get(Admin, claims.subject_id)
    if admin is None or not admin.is_active:
        raise ExpiredOrInvalidToken()
    check_refresh_token(presented, admin.refresh_token)

    tokens = token_service.issue_pair(admin)
    await db.commit()

    response = api_response(tokens, "Access token refreshed")
    set_auth_cookies(response, PrincipalType.ADMIN, tokens, token_service)
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
    """Запросить сброс пароля. Ответ не раскрывает, существует ли аккаунт."""
    result = await db.execute(select(Admin).where(Admin.email == payload.email.lower()))
    admin = result.scalar_one_or_none()
    if admin is not None and admin.is_active:
        token = token_service.issue(admin, TokenKind.PASSWORD_RESET)
        admin.reset_token = token
        admin.reset_token_expires = utcnow() + timedelta(minutes=token_service.settings.reset_token_expire_minutes)
        await db.commit()
        await mailer.send_password_reset_email(admin.email, admin.full_name, token, admin=True)
        logger.info("admin_password_reset_requested", admin_id=admin.id)
    return api_response(None, GENERIC_RESET_MESSAGE)


@router.post("/reset-password")
@limiter.limit(STRICT_LIMIT)
async def reset_password(
    request: Request,
    payload: PasswordReset,
    db: AsyncSession = Depends(get_db),
    token_service: TokenService = Depends(get_token_service),
):
    """Установить новый пароль по токену сброса."""
    claims = token_service.verify(payload.token, TokenKind.PASSWORD_RESET)
    if claims.principal_type != PrincipalType.ADMIN:
        raise ExpiredOrInvalidToken()
    admin = await db.get(Admin, claims.subject_id)
    if (
        admin is None
        or admin.reset_token != payload.token
        or admin.reset_token_expires is None
        or admin.reset_token_expires < utcnow()
    ):
        raise ValidationError("Invalid or expired reset token")

    ensure_strong_password(payload.new_password, PrincipalType.ADMIN)
    admin.password_hash = get_password_hash(payload.new_password, PrincipalType.ADMIN)
    admin.reset_token = None
    admin.reset_token_expires = None
    admin.refresh_token = None
    await db.commit()
    logger.info("admin_password_reset", admin_id=admin.id)
    return api_response(None, "Password reset successfully")


@router.get("/me")
async def me(admin: Admin = Depends(get_current_admin)):
    return api_response(AdminResponse.model_validate(admin), "Admin fetched successfully")


@router.post("/create-admin")
async def create_admin(
    payload: AdminCreate,
    db: AsyncSession = Depends(get_db),
    superadmin: Admin = Depends(get_current_superadmin),
):
    """Создать администратора с правами по умолчанию для роли."""
    if payload.role == AdminRole.SUPERADMIN:
        raise ValidationError("Role must be one of: admin, moderator, client")
    ensure_strong_password(payload.password, PrincipalType.ADMIN)
    email = payload.email.lower()
    await _ensure_email_free(db, email)

    admin = Admin(
        full_name=payload.full_name,
        email=email,
        password_hash=get_password_hash(payload.password, PrincipalType.ADMIN),
        role=payload.role.value,
        permissions=default_permissions(payload.role.value),
        is_active=True,
    )
    db.add(admin)
    await db.commit()
    logger.info("admin_created", admin_id=admin.id, role=admin.role, created_by=superadmin.id)
    return api_response(AdminResponse.model_validate(admin), "Admin created successfully", 201)


@router.delete("/{admin_id}")
async def delete_admin(
    admin_id: int,
    db: AsyncSession = Depends(get_db),
    superadmin: Admin = Depends(get_current_superadmin),
):
    if admin_id == superadmin.id:
        raise ValidationError("You cannot delete your own account")
    admin = await db.get(Admin, admin_id)
    if admin is None:
        raise NotFoundError("Admin not found")
    await db.delete(admin)
    await db.commit()
    logger.info("admin_deleted", admin_id=admin_id, deleted_by=superadmin.id)
    return api_response(None, "Admin deleted successfully")


@router.post("/logout")
async def logout(admin: Admin = Depends(get_current_admin), db: AsyncSession = Depends(get_db)):
    admin.refresh_token = None
    await db.commit()
    logger.info("admin_logged_out", admin_id=admin.id)
    response = api_response(None, "Admin logged out successfully")
    clear_auth_cookies(response, PrincipalType.ADMIN)
    return response


@router.post("/change-password")
async def change_password(
    payload: PasswordChange,
    admin: Admin = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db),
):
    """Сменить пароль. Все сессии завершаются."""
    if not verify_password(payload.current_password, admin.password_hash):
        raise ValidationError("Current password is incorrect")
    if payload.current_password == payload.new_password:
        raise ValidationError("New password must be different from the current one")
    ensure_strong_password(payload.new_password, PrincipalType.ADMIN)

    admin.password_hash = get_password_hash(payload.new_password, PrincipalType.ADMIN)
    admin.refresh_token = None
    await db.commit()
    logger.info("admin_password_changed", admin_id=admin.id)
    response = api_response(None, "Password changed successfully")
    clear_auth_cookies(response, PrincipalType.ADMIN)
    return response
