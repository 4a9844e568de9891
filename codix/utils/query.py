"""Сортировка и пагинация списков."""
from typing import Dict, Optional, Tuple

from fastapi import Query
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import Select

from codix.utils.exceptions import ValidationError

MAX_PAGE_SIZE = 100


class PageParams:
    """Dependency: параметры страницы."""

    def __init__(
        self,
        page: int = Query(1, ge=1),
        limit: int = Query(10, ge=1, le=MAX_PAGE_SIZE),
    ):
        self.page = page
        self.limit = limit

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


def apply_sort(query: Select, columns: Dict[str, object], sort_by: Optional[str], sort_order: str = "desc") -> Select:
    """
    Отсортировать по разрешённому полю.

    Raises:
        ValidationError: Поле не разрешено или порядок не asc/desc
    """
    sort_by = sort_by or "createdAt"
    if sort_by not in columns:
        raise ValidationError(f"Cannot sort by '{sort_by}'. Allowed: {', '.join(columns)}")
    if sort_order not in ("asc", "desc"):
        raise ValidationError("sortOrder must be 'asc' or 'desc'")
    column = columns[sort_by]
    return query.order_by(column.desc() if sort_order == "desc" else column.asc())


def parse_sort(value: Optional[str], default: str = "createdAt:desc") -> Tuple[str, str]:
    """Разобрать строку вида ``field:order``."""
    field, _, order = (value or default).partition(":")
    return field, (order or "desc").lower()


async def fetch_page(db: AsyncSession, query: Select, page: PageParams):
    """Вернуть (элементы страницы, общее число)."""
    total = await db.scalar(select(func.count()).select_from(query.order_by(None).subquery()))
    result = await db.execute(query.offset(page.offset).limit(page.limit))
    return result.scalars().all(), total or 0
