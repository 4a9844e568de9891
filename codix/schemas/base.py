"""Базовые схемы."""
import math
from datetime import datetime, timezone
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Схема с camelCase-именами в JSON."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class InputModel(CamelModel):
    """Входная схема: лишние поля запрещены."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
        str_strip_whitespace=True,
    )


class Pagination(CamelModel):
    total: int
    page: int
    limit: int
    total_pages: int


def paginate(key: str, items: List[Any], total: int, page: int, limit: int) -> dict:
    """Данные страницы: {key: [...], "pagination": {...}}."""
    return {
        key: items,
        "pagination": Pagination(
            total=total,
            page=page,
            limit=limit,
            total_pages=math.ceil(total / limit) if limit else 0,
        ),
    }


def to_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Привести дату к UTC без tzinfo (формат хранения)."""
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)
