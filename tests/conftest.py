"""Конфигурация pytest."""

import os
import tempfile
from itertools import count
from typing import AsyncGenerator, Dict, List, Optional

# Настройки должны быть заданы до импорта приложения
os.environ.setdefault("ACCESS_TOKEN_SECRET", "test-access-secret-0123456789abcdef0123")
os.environ.setdefault("REFRESH_TOKEN_SECRET", "test-refresh-secret-0123456789abcdef012")
os.environ.setdefault("RESET_TOKEN_SECRET", "test-reset-secret-0123456789abcdef012345")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///" + os.path.join(tempfile.gettempdir(), "codix-test.db"))
os.environ.setdefault("UPLOAD_DIR", tempfile.mkdtemp(prefix="codix-uploads-"))
os.environ["ENVIRONMENT"] = "test"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["CLIENT_HASH_ROUNDS"] = "4"
os.environ["ADMIN_HASH_ROUNDS"] = "4"
os.environ["RETRY_BASE_DELAY"] = "0.01"

import httpx  # noqa: E402
import pytest  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine  # noqa: E402

from codix.core.config import get_settings  # noqa: E402
from codix.core.database import Base, get_session_maker  # noqa: E402
from codix.core.permissions import default_permissions  # noqa: E402
from codix.core.security import TokenService, get_password_hash  # noqa: E402
from codix.models import Admin, Client  # noqa: E402
from codix.utils.email import EmailDeliveryError, get_mailer  # noqa: E402
from codix.utils.enums import AdminRole, PrincipalType  # noqa: E402
from codix.utils.exceptions import StorageError  # noqa: E402
from codix.utils.storage import detect_resource_kind, get_storage, remove_local_file  # noqa: E402

CLIENT_PASSWORD = "Client1!"
ADMIN_PASSWORD = "Admin123!"


class FakeStorage:
    """Хранилище в памяти вместо Cloudinary."""

    def __init__(self):
        self._ids = count(1)
        self.uploaded: List[Dict[str, str]] = []
        self.deleted: List[str] = []
        self.fail_delete = False

    async def upload(self, path: str, content_type: Optional[str] = None) -> Dict[str, str]:
        try:
            kind = detect_resource_kind(path, content_type).value
            n = next(self._ids)
            item = {"url": f"https://cdn.test/{kind}/{n}", "publicId": f"codix/file-{n}", "resourceKind": kind}
            self.uploaded.append(item)
            return item
        finally:
            remove_local_file(path)

    async def delete(self, public_id: str, kind: str = "image") -> None:
        if self.fail_delete:
            raise StorageError("Delete failed: error")
        self.deleted.append(public_id)

    async def delete_quietly(self, public_id: Optional[str], kind: Optional[str] = None) -> bool:
        if not public_id:
            return False
        try:
            await self.delete(public_id, kind or "image")
            return True
        except StorageError:
            return False


class FakeMailer:
    """Отправитель писем, запоминающий письма."""

    def __init__(self):
        self.sent: List[Dict[str, str]] = []
        self.fail = False

    async def _record(self, **message):
        if self.fail:
            raise EmailDeliveryError()
        self.sent.append(message)

    async def send(self, to: str, subject: str, html: str) -> None:
        await self._record(kind="generic", to=to, subject=subject)

    async def send_verification_email(self, to: str, full_name: str, token: str) -> None:
        await self._record(kind="verification", to=to, token=token)

    async def send_password_reset_email(self, to: str, full_name: str, token: str, admin: bool = False) -> None:
        await self._record(kind="reset", to=to, token=token)


@pytest.fixture
async def engine(tmp_path):
    """Движок на временной SQLite базе."""
    test_engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield test_engine
    await test_engine.dispose()


@pytest.fixture
def session_maker(engine) -> async_sessionmaker:
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)


@pytest.fixture
async def db_session(session_maker) -> AsyncGenerator[AsyncSession, None]:
    """Фикстура для тестовой сессии БД."""
    async with session_maker() as session:
        yield session


@pytest.fixture
def token_service() -> TokenService:
    return TokenService(get_settings())


@pytest.fixture
def storage() -> FakeStorage:
    return FakeStorage()


@pytest.fixture
def mailer() -> FakeMailer:
    return FakeMailer()


@pytest.fixture
def app(session_maker, storage, mailer):
    from codix.main import app as fastapi_app

    fastapi_app.dependency_overrides[get_session_maker] = lambda: session_maker
    fastapi_app.dependency_overrides[get_storage] = lambda: storage
    fastapi_app.dependency_overrides[get_mailer] = lambda: mailer
    yield fastapi_app
    fastapi_app.dependency_overrides.clear()


@pytest.fixture
async def http(app) -> AsyncGenerator[httpx.AsyncClient, None]:
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


def bearer(token: str) -> Dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def make_client(session_maker, token_service):
    """Фабрика клиентов: возвращает (client, access_token)."""
    counter = count(1)

    async def factory(verified: bool = True, role: str = "client", status: str = "active"):
        n = next(counter)
        async with session_maker() as session:
            client = Client(
                full_name=f"Client {n}",
                email=f"client{n}@example.com",
                phone=f"+1555000{n:04d}",
                password_hash=get_password_hash(CLIENT_PASSWORD, PrincipalType.CLIENT),
                is_email_verified=verified,
                role=role,
                status=status,
            )
            session.add(client)
            await session.flush()
            tokens = token_service.issue_pair(client)
            await session.commit()
        return client, tokens["accessToken"]

    return factory


@pytest.fixture
def make_admin(session_maker, token_service):
    """Фабрика администраторов: возвращает (admin, access_token)."""
    counter = count(1)

    async def factory(role: str = AdminRole.ADMIN.value, permissions: Optional[dict] = None, active: bool = True):
        n = next(counter)
        async with session_maker() as session:
            admin = Admin(
                full_name=f"Admin {n}",
                email=f"admin{n}@example.org",
                password_hash=get_password_hash(ADMIN_PASSWORD, PrincipalType.ADMIN),
                role=role,
                permissions=default_permissions(role) if permissions is None else permissions,
                is_active=active,
            )
            session.add(admin)
            await session.flush()
            tokens = token_service.issue_pair(admin)
            await session.commit()
        return admin, tokens["accessToken"]

    return factory
