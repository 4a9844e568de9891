"""Исключения приложения.

Каждое исключение несёт HTTP-статус, под которым оно попадает в ответ.
Обработчики в ``codix.api.errors`` переводят их в единый конверт ответа.
"""
from typing import Any, Optional


class AppError(Exception):
    """Базовое исключение приложения."""

    status_code: int = 500
    default_message: str = "Internal server error"

    def __init__(self, message: Optional[str] = None, data: Any = None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message
        self.data = data


class ValidationError(AppError):
    """Некорректные или отсутствующие входные данные."""

    status_code = 400
    default_message = "Invalid input"


class WeakCredential(ValidationError):
    """Пароль не проходит проверку сложности."""

    default_message = "Password does not meet strength requirements"


class AuthenticationError(AppError):
    """Нет токена, он невалиден или истёк."""

    status_code = 401
    default_message = "Unauthorized request"


class ExpiredOrInvalidToken(AuthenticationError):
    default_message = "Invalid or expired token"


class RefreshTokenReused(AuthenticationError):
    default_message = "Refresh token is expired or used"


class AuthorizationError(AppError):
    """Принципал валиден, но прав недостаточно."""

    status_code = 403
    default_message = "Forbidden"


Forbidden = AuthorizationError


class NotFoundError(AppError):
    status_code = 404
    default_message = "Resource not found"


class ConflictError(AppError):
    """Нарушение уникальности."""

    status_code = 409
    default_message = "Resource already exists"


class InternalError(AppError):
    status_code = 500
    default_message = "Internal server error"


class StorageError(InternalError):
    """Ошибка объектного хранилища."""

    default_message = "Object storage request failed"
