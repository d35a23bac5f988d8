"""Shared fixtures.

Markers:
    @pytest.mark.unit        - No database or network
    @pytest.mark.integration - Temporary SQLite database per test
"""

import os

# Настройки читаются при импорте приложения
os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

from typing import Any, Callable, Dict, List, Optional

import httpx
import pytest
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from app.core.config import Settings, get_settings
from app.core.db import Base, get_db
from app.core.security import create_access_token
from app.db.repositories.document_repository import DocumentRepository
from app.domains.documents.entities import Document
from app.domains.identity.entities import IdentityContext
from app.infrastructure.identity.client import IdentityProviderClient, get_identity_client
from app.infrastructure.realtime.client import RealtimeClient, get_realtime_client
from app.main import app

REALTIME_BASE_URL = "https://realtime.test"
REALTIME_SECRET = "rt-secret"
ADMIN_KEY = "admin-key"
IDENTITY_BASE_URL = "https://idp.test"
IDENTITY_SECRET = "idp-secret"


@pytest.fixture
async def engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")

    @event.listens_for(engine.sync_engine, "connect")
    def _enable_foreign_keys(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def test_settings() -> Settings:
    return Settings(
        jwt_secret=os.environ["JWT_SECRET"],
        anonymous_read_fallback=True,
        realtime_base_url=REALTIME_BASE_URL,
        realtime_secret_key=REALTIME_SECRET,
        admin_api_key=ADMIN_KEY,
    )


class FakeRealtimeService:
    """Поддельный сервис совместного редактирования для httpx.MockTransport"""

    def __init__(self):
        self.requests: List[httpx.Request] = []
        self.status_code = 200
        self.unreachable = False

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.unreachable:
            raise httpx.ConnectError("connection refused", request=request)
        if self.status_code >= 400:
            return httpx.Response(self.status_code, json={"error": "rejected"})
        return httpx.Response(self.status_code, json={"token": "session-token"})


@pytest.fixture
def realtime_service() -> FakeRealtimeService:
    return FakeRealtimeService()


@pytest.fixture
async def realtime_client(realtime_service):
    client = RealtimeClient(
        base_url=REALTIME_BASE_URL,
        secret_key=REALTIME_SECRET,
        transport=httpx.MockTransport(realtime_service.handle),
    )
    yield client
    await client.aclose()


class FakeIdentityProvider:
    """Поддельный каталог пользователей для httpx.MockTransport"""

    def __init__(self):
        self.requests: List[httpx.Request] = []
        self.status_code = 200
        self.unreachable = False
        # Ответ в обертке {"data": [...]}
        self.wrapped = False
        self.users: List[Dict[str, Any]] = [
            self.record("alice", "Alice", "Smith", "alice@example.com", "https://img.test/alice.png"),
            self.record("bob", email="bob@example.com"),
            self.record("carol"),
        ]

    @staticmethod
    def record(
        user_id: str,
        first_name: Optional[str] = None,
        last_name: Optional[str] = None,
        email: Optional[str] = None,
        image_url: Optional[str] = None
    ) -> Dict[str, Any]:
        """Запись пользователя в формате каталога провайдера"""
        return {
            "id": user_id,
            "first_name": first_name,
            "last_name": last_name,
            "primary_email_address_id": f"email_{user_id}" if email else None,
            "email_addresses": [{"id": f"email_{user_id}", "email_address": email}] if email else [],
            "image_url": image_url,
        }

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.unreachable:
            raise httpx.ConnectError("connection refused", request=request)
        if self.status_code >= 400:
            return httpx.Response(self.status_code, json={"errors": [{"message": "rejected"}]})
        return httpx.Response(self.status_code, json={"data": self.users} if self.wrapped else self.users)


@pytest.fixture
def identity_service() -> FakeIdentityProvider:
    return FakeIdentityProvider()


@pytest.fixture
async def identity_client(identity_service):
    client = IdentityProviderClient(
        base_url=IDENTITY_BASE_URL,
        secret_key=IDENTITY_SECRET,
        transport=httpx.MockTransport(identity_service.handle),
    )
    yield client
    await client.aclose()


@pytest.fixture
async def client(session_factory, test_settings, realtime_client, identity_client):
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_settings] = lambda: test_settings
    app.dependency_overrides[get_realtime_client] = lambda: realtime_client
    app.dependency_overrides[get_identity_client] = lambda: identity_client

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers() -> Callable[..., Dict[str, str]]:
    """Заголовки с токеном в формате провайдера идентификации"""

    def make(subject: str, organization_id: Optional[str] = None, **claims: Any) -> Dict[str, str]:
        payload = {"sub": subject, **claims}
        if organization_id:
            payload["org_id"] = organization_id
        return {"Authorization": f"Bearer {create_access_token(payload)}"}

    return make


@pytest.fixture
def alice() -> IdentityContext:
    return IdentityContext(subject="alice", organization_id="org1", display_name="Alice")


@pytest.fixture
async def stored_document(db_session, alice) -> Document:
    """Документ alice в организации org1"""
    repository = DocumentRepository(db_session)
    return await repository.create(Document.create_document(alice, title="Quarterly plan"))
