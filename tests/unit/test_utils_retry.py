"""Тесты для утилиты retry."""
import pytest

from codix.utils.exceptions import StorageError
from codix.utils.retry import retry_with_backoff


@pytest.mark.asyncio
@pytest.mark.unit
async def test_retry_success():
    """Тест успешного выполнения без повторных попыток."""
    call_count = 0

    async def success_func():
        nonlocal call_count
        call_count += 1
        return "success"

    result = await retry_with_backoff(success_func, max_attempts=3, base_delay=0.01)
    assert result == "success"
    assert call_count == 1


@pytest.mark.asyncio
@pytest.mark.unit
async def test_retry_with_failures():
    """Тест повторных попыток при ошибках."""
    call_count = 0

    async def fail_then_success():
        nonlocal call_count
        call_count += 1
        if call_count < 3:
            raise StorageError("Temporary error")
        return "success"

    result = await retry_with_backoff(fail_then_success, max_attempts=3, base_delay=0.01)
    assert result == "success"
    assert call_count == 3


@pytest.mark.asyncio
@pytest.mark.unit
async def test_retry_exhausted():
    """Тест исчерпания попыток."""
    call_count = 0

    async def always_fail():
        nonlocal call_count
        call_count += 1
        raise StorageError("Persistent error")

    with pytest.raises(StorageError):
        await retry_with_backoff(always_fail, max_attempts=2, base_delay=0.01)
    assert call_count == 2


@pytest.mark.asyncio
@pytest.mark.unit
async def test_retry_skips_unlisted_errors():
    call_count = 0

    def sync_fail():
        nonlocal call_count
        call_count += 1
        raise ValueError("not retryable")

    with pytest.raises(ValueError):
        await retry_with_backoff(sync_fail, max_attempts=3, base_delay=0.01, retry_on=(StorageError,))
    assert call_count == 1
