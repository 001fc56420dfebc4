"""Pytest configuration and fixtures."""

import uuid

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.pool import StaticPool

from master_agentes.core.auth import create_access_token
from master_agentes.domain.services.credential_service import CredentialService
from master_agentes.persistence.database import Base, Database, get_db
from master_agentes.persistence.models import *  # noqa: F401, F403
from master_agentes.persistence.models.tenant import Tenant, User
from master_agentes.persistence.repositories.tenant_repository import TenantRepository
from master_agentes.persistence.repositories.user_repository import UserRepository

TEST_API_KEY = "cv-test-api-key-1234567890"
TEST_ORG_ID = "org-test-001"


@pytest.fixture
async def database():
    """In-memory SQLite handle shared by every connection of one test."""
    database = Database("sqlite+aiosqlite:///:memory:", poolclass=StaticPool)
    await database.create_all()

    yield database

    async with database.engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await database.dispose()


@pytest.fixture
async def db_session(database):
    """Create a test database session."""
    async with database.session_factory() as session:
        yield session


@pytest.fixture
async def client(db_session):
    """Create a test HTTP client bound to the test session."""
    from master_agentes.main import app

    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
async def server_error_client(db_session):
    """Client that returns 500 responses instead of re-raising app errors."""
    from master_agentes.main import app

    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def make_tenant(db_session):
    """Factory for tenants."""

    async def _make_tenant(name: str | None = None) -> Tenant:
        return await TenantRepository(db_session).create(
            None, name=name or f"Tenant {uuid.uuid4().hex[:8]}"
        )

    return _make_tenant


@pytest.fixture
def make_user(db_session):
    """Factory for users belonging to a tenant."""

    async def _make_user(tenant: Tenant | None, email: str | None = None) -> User:
        return await UserRepository(db_session).create(
            tenant.id if tenant else None,
            email=email or f"user-{uuid.uuid4().hex[:8]}@example.com",
            name="Test User",
        )

    return _make_user


@pytest.fixture
def make_credential(db_session):
    """Factory for active ChatVolt credentials."""

    async def _make_credential(
        tenant: Tenant,
        api_key: str = TEST_API_KEY,
        org_id: str = TEST_ORG_ID,
        webhook_secret: str | None = None,
    ):
        return await CredentialService(db_session).upsert(
            tenant.id, api_key=api_key, org_id=org_id, webhook_secret=webhook_secret
        )

    return _make_credential


@pytest.fixture
def auth_headers_for():
    """Bearer headers for a session of the given user."""

    def _auth_headers(user: User) -> dict[str, str]:
        token = create_access_token({"sub": str(user.id)})
        return {"Authorization": f"Bearer {token}"}

    return _auth_headers


@pytest.fixture
def proxy_headers() -> dict[str, str]:
    """Headers ChatVolt sends with the default test credential."""
    return {"x-api-key": TEST_API_KEY, "x-org-id": TEST_ORG_ID}
