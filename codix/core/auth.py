"""Аутентификация запросов: токены из cookie или заголовка."""
from typing import Callable, Optional

from fastapi import Depends, Request, Response
from sqlalchemy.ext.asyncio import AsyncSession

from codix.core.config import get_settings
from codix.core.database import get_db
from codix.core.permissions import Permission, has_permission
from codix.core.security import TokenKind, TokenService, get_token_service
from codix.models.admin import Admin
from codix.models.client import Client
from codix.utils.enums import AdminRole, ClientStatus, PrincipalType
from codix.utils.exceptions import AuthenticationError, AuthorizationError, ExpiredOrInvalidToken, Forbidden
from codix.utils.logger import get_logger

logger = get_logger(__name__)

CLIENT_ACCESS_COOKIE = "accessToken"
CLIENT_REFRESH_COOKIE = "refreshToken"
ADMIN_ACCESS_COOKIE = "adminAccessToken"
ADMIN_REFRESH_COOKIE = "adminRefreshToken"

_COOKIES = {
    PrincipalType.CLIENT: (CLIENT_ACCESS_COOKIE, CLIENT_REFRESH_COOKIE),
    PrincipalType.ADMIN: (ADMIN_ACCESS_COOKIE, ADMIN_REFRESH_COOKIE),
}
_DISABLED_CLIENT_STATUSES = {ClientStatus.BANNED.value, ClientStatus.INACTIVE.value}


def _cookie_options() -> dict:
    settings = get_settings()
    return {
        "httponly": True,
        "secure": True,
        "samesite": "none" if settings.is_production else "lax",
    }


def set_auth_cookies(
    response: Response,
    principal_type: PrincipalType,
    tokens: dict,
    token_service: TokenService,
) -> None:
    """Установить cookie с парой токенов."""
    access_name, refresh_name = _COOKIES[principal_type]
    options = _cookie_options()
    response.set_cookie(
        access_name,
        tokens["accessToken"],
        max_age=token_service.lifetime_seconds(TokenKind.ACCESS),
        **options,
    )
    response.set_cookie(
        refresh_name,
        tokens["refreshToken"],
        max_age=token_service.lifetime_seconds(TokenKind.REFRESH),
        **options,
    )


def clear_auth_cookies(response: Response, principal_type: PrincipalType) -> None:
    options = _cookie_options()
    for name in _COOKIES[principal_type]:
        response.delete_cookie(name, **options)


def extract_access_token(request: Request, principal_type: PrincipalType) -> Optional[str]:
    """Токен из cookie, иначе из заголовка Authorization: Bearer."""
    token = request.cookies.get(_COOKIES[principal_type][0])
    if token:
        return token
    authorization = request.headers.get("Authorization", "")
    scheme, _, value = authorization.partition(" ")
    if scheme.lower() == "bearer" and value.strip():
        return value.strip()
    return None


def extract_refresh_token(request: Request, principal_type: PrincipalType, body_token: Optional[str]) -> Optional[str]:
    return request.cookies.get(_COOKIES[principal_type][1]) or body_token


def ensure_client_enabled(client: Client) -> None:
    """
    Raises:
        Forbidden: Клиент заблокирован или деактивирован
    """
    if client.status in _DISABLED_CLIENT_STATUSES:
        raise Forbidden(f"Your account is {client.status}")


def ensure_admin_enabled(admin: Admin) -> None:
    """
    Raises:
        Forbidden: Администратор деактивирован
    """
    if not admin.is_active:
        raise Forbidden("Admin account is deactivated")


async def _authenticate(request, db, token_service, principal_type, model, gate: Callable):
    token = extract_access_token(request, principal_type)
    if not token:
        raise AuthenticationError("Unauthorized request")

    claims = token_service.verify(token, TokenKind.ACCESS)
    if claims.principal_type != principal_type:
        raise ExpiredOrInvalidToken()

    principal = await db.get(model, claims.subject_id)
    if principal is None:
        raise ExpiredOrInvalidToken()
    # Заблокированный субъект получает 403 даже с отозванной сессией
    gate(principal)
    # После выхода или смены пароля refresh-токен очищен
    if principal.refresh_token is None:
        raise ExpiredOrInvalidToken()
    return principal


async def get_current_client(
    request: Request,
    db: AsyncSession = Depends(get_db),
    token_service: TokenService = Depends(get_token_service),
) -> Client:
    """Текущий активный клиент из access-токена."""
    return await _authenticate(request, db, token_service, PrincipalType.CLIENT, Client, ensure_client_enabled)


async def get_optional_client(
    request: Request,
    db: AsyncSession = Depends(get_db),
    token_service: TokenService = Depends(get_token_service),
) -> Optional[Client]:
    """Клиент, если запрос аутентифицирован, иначе None."""
    if not extract_access_token(request, PrincipalType.CLIENT):
        return None
    try:
        return await _authenticate(request, db, token_service, PrincipalType.CLIENT, Client, ensure_client_enabled)
    except (AuthenticationError, AuthorizationError):
        return None


async def get_current_admin(
    request: Request,
    db: AsyncSession = Depends(get_db),
    token_service: TokenService = Depends(get_token_service),
) -> Admin:
    """Текущий активный администратор из access-токена."""
    return await _authenticate(request, db, token_service, PrincipalType.ADMIN, Admin, ensure_admin_enabled)


async def get_current_superadmin(admin: Admin = Depends(get_current_admin)) -> Admin:
    if admin.role != AdminRole.SUPERADMIN.value:
        raise Forbidden("Only superadmin can perform this action")
    return admin


def require_permission(permission: Permission) -> Callable:
    """Dependency: администратор с указанным правом."""

    async def checker(admin: Admin = Depends(get_current_admin)) -> Admin:
        if not has_permission(admin, permission):
            logger.warning("permission_denied", admin_id=admin.id, permission=permission.value)
            raise Forbidden(f"You do not have permission: {permission.value}")
        return admin

    return checker


async def get_client_admin(client: Client = Depends(get_current_client)) -> Client:
    """Клиент с ролью admin."""
    if client.role != "admin":
        raise Forbidden("Admin access required")
    return client
