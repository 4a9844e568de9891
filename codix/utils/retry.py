"""Утилиты для повторных попыток."""
import asyncio
import random
from typing import Callable, Optional, Tuple, Type, TypeVar

from codix.core.config import get_settings
from codix.utils.logger import get_logger

T = TypeVar("T")
logger = get_logger(__name__)


async def retry_with_backoff(
    func: Callable[..., T],
    *args,
    max_attempts: Optional[int] = None,
    base_delay: Optional[float] = None,
    max_delay: Optional[float] = None,
    retry_on: Tuple[Type[BaseException], ...] = (Exception,),
    **kwargs,
) -> T:
    """
    Выполнить функцию с повторными попытками и exponential backoff.

    Args:
        func: Функция или корутинная функция
        max_attempts: Максимальное количество попыток
        base_delay: Базовая задержка в секундах
        max_delay: Максимальная задержка в секундах
        retry_on: Исключения, после которых имеет смысл повторить

    Raises:
        Последнее исключение после всех попыток
    """
    settings = get_settings()
    max_attempts = max_attempts or settings.max_retry_attempts
    base_delay = settings.retry_base_delay if base_delay is None else base_delay
    max_delay = settings.retry_max_delay if max_delay is None else max_delay

    for attempt in range(1, max_attempts + 1):
        try:
            if asyncio.iscoroutinefunction(func):
                return await func(*args, **kwargs)
            return func(*args, **kwargs)
        except retry_on as e:
            if attempt >= max_attempts:
                logger.error("retry_exhausted", attempts=max_attempts, error=str(e))
                raise
            # Exponential backoff with jitter
            delay = min(base_delay * (2 ** (attempt - 1)) + random.uniform(0, base_delay), max_delay)
            logger.warning("retry_attempt", attempt=attempt, max_attempts=max_attempts, delay=delay, error=str(e))
            await asyncio.sleep(delay)
