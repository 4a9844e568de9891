"""Тесты для транзакций."""
import pytest
from sqlalchemy import func, select

from codix.core.database import run_in_transaction
from codix.models import Client


def _client(n: int) -> Client:
    return Client(full_name=f"C{n}", email=f"c{n}@example.com", phone=f"+1555100{n:04d}", password_hash="x")


async def _count(session_maker) -> int:
    async with session_maker() as session:
        return await session.scalar(select(func.count()).select_from(Client))


@pytest.mark.asyncio
@pytest.mark.unit
async def test_commit_on_success(session_maker):
    async def work(session):
        session.add_all([_client(1), _client(2)])
        await session.flush()
        return "done"

    assert await run_in_transaction(work, session_maker) == "done"
    assert await _count(session_maker) == 2


@pytest.mark.asyncio
@pytest.mark.unit
async def test_rollback_on_error(session_maker):
    async def work(session):
        session.add(_client(1))
        await session.flush()
        session.add(_client(2))
        await session.flush()
        raise RuntimeError("second step failed")

    with pytest.raises(RuntimeError, match="second step failed"):
        await run_in_transaction(work, session_maker)
    assert await _count(session_maker) == 0


@pytest.mark.asyncio
@pytest.mark.unit
async def test_session_closed_after_work(session_maker):
    captured = {}

    async def work(session):
        captured["session"] = session
        session.add(_client(1))

    await run_in_transaction(work, session_maker)
    assert not captured["session"].in_transaction()
