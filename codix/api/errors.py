"""Обработчики исключений: всё приводится к единому конверту."""
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException

from codix.core.config import get_settings
from codix.utils.exceptions import AppError
from codix.utils.logger import get_logger
from codix.utils.response import api_response

logger = get_logger(__name__)


def _validation_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid input"
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ()) if part not in ("body", "query", "path", "form"))
    message = first.get("msg", "Invalid input")
    return f"{location}: {message}" if location else message


async def app_error_handler(request: Request, exc: AppError):
    if exc.status_code >= 500:
        logger.error("app_error", path=request.url.path, error=exc.message, error_type=type(exc).__name__)
    return api_response(data=exc.data, message=exc.message, status_code=exc.status_code)


async def validation_error_handler(request: Request, exc: RequestValidationError):
    return api_response(message=_validation_message(exc), status_code=400)


async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return api_response(message=str(exc.detail), status_code=exc.status_code, headers=getattr(exc, "headers", None))


async def rate_limit_handler(request: Request, exc: RateLimitExceeded):
    logger.warning("rate_limit_exceeded", path=request.url.path, limit=str(exc.detail))
    return api_response(message="Too many requests, please try again later", status_code=429)


async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("unhandled_error", path=request.url.path, error=str(exc))
    message = "Internal server error" if get_settings().is_production else str(exc)
    return api_response(message=message, status_code=500)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(RateLimitExceeded, rate_limit_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
