"""Подключение к базе данных и транзакции."""
from datetime import datetime, timezone
from typing import AsyncGenerator, Awaitable, Callable, Optional, TypeVar

from fastapi import Depends
from sqlalchemy import BigInteger, Integer
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base

from codix.core.config import get_settings
from codix.utils.logger import get_logger

T = TypeVar("T")
logger = get_logger(__name__)

# SQLite автоинкрементирует только INTEGER PRIMARY KEY
BigIntegerPK = BigInteger().with_variant(Integer(), "sqlite")


def utcnow() -> datetime:
    """Текущее время в UTC без tzinfo (так хранятся все даты)."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def engine_options(url: str) -> dict:
    """Параметры движка для указанного URL."""
    if url.startswith("sqlite"):
        return {"echo": False}
    settings = get_settings()
    return {
        "echo": False,
        "pool_size": settings.database_pool_size,
        "max_overflow": settings.database_max_overflow,
        "pool_pre_ping": True,
    }


engine = create_async_engine(get_settings().database_url, **engine_options(get_settings().database_url))

AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)

Base = declarative_base()


def get_session_maker() -> async_sessionmaker:
    """Dependency: фабрика сессий."""
    return AsyncSessionLocal


async def run_in_transaction(
    work: Callable[[AsyncSession], Awaitable[T]],
    session_maker: Optional[async_sessionmaker] = None,
) -> T:
    """
    Выполнить ``work`` в одной транзакции.

    Все изменения, сделанные ``work`` через переданную сессию, фиксируются
    вместе либо откатываются вместе. Сессия закрывается на любом пути выхода.

    Args:
        work: Корутина, принимающая сессию
        session_maker: Фабрика сессий (по умолчанию основная)

    Returns:
        Результат ``work``

    Raises:
        Исключение из ``work`` после отката
    """
    maker = session_maker or AsyncSessionLocal
    async with maker() as session:
        try:
            result = await work(session)
            await session.commit()
            return result
        except Exception as e:
            await session.rollback()
            logger.warning("transaction_rolled_back", error=str(e), error_type=type(e).__name__)
            raise


async def get_db(session_maker: async_sessionmaker = Depends(get_session_maker)) -> AsyncGenerator[AsyncSession, None]:
    """Dependency для получения сессии БД."""
    async with session_maker() as session:
        try:
            yield session
        finally:
            await session.close()
