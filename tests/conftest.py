"""Pytest configuration and fixtures."""

from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from automation_bridge.clients.monday_client import MondayClient
from automation_bridge.config import MondaySettings, Settings, get_settings
from automation_bridge.database.models import Base
from automation_bridge.database.session import get_session
from automation_bridge.dependencies import get_monday_client
from automation_bridge.main import create_app
from automation_bridge.services.signature import compute_signature

# Test database URL (in-memory SQLite for unit tests)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

SIGNING_SECRET = "test-signing-secret"


@pytest.fixture
def test_settings():
    """Settings with a fully configured monday.com app."""
    return Settings(
        service_name="automation-bridge-test",
        environment="test",
        database_url="sqlite:///:memory:",
        log_level="DEBUG",
        monday=MondaySettings(
            client_id="test-client-id",
            client_secret="test-client-secret",
            signing_secret=SIGNING_SECRET,
            redirect_uri=None,
        ),
    )


@pytest.fixture
async def engine():
    """Create test database engine."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
async def session(engine):
    """Create test database session."""
    async_session = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async with async_session() as session:
        yield session
        await session.rollback()


@pytest.fixture
def monday_client():
    """Fake platform client; every call is an AsyncMock."""
    client = MagicMock(spec=MondayClient)
    client.authorization_url.return_value = (
        "https://auth.monday.com/oauth2/authorize?client_id=test-client-id"
    )
    client.exchange_code = AsyncMock(return_value="access-token-1")
    client.get_account_id = AsyncMock(return_value=1001)
    client.get_column_text = AsyncMock(return_value="hello")
    client.change_simple_column_value = AsyncMock(return_value={"change_simple_column_value": {"id": "1"}})
    return client


@pytest.fixture
def app(test_settings, session, monday_client):
    """Application with settings, database and platform client overridden."""
    application = create_app()

    async def override_get_session():
        yield session

    application.dependency_overrides[get_settings] = lambda: test_settings
    application.dependency_overrides[get_session] = override_get_session
    application.dependency_overrides[get_monday_client] = lambda: monday_client

    yield application

    application.dependency_overrides.clear()


@pytest.fixture
async def client(app):
    """Async HTTP client bound to the application."""
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as client:
        yield client


@pytest.fixture
def sign():
    """Sign a raw body the way the platform does."""

    def _sign(body: bytes, secret: str = SIGNING_SECRET) -> str:
        return compute_signature(secret, body)

    return _sign
