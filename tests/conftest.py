"""Pytest configuration and fixtures."""

import os
import sys
from collections.abc import AsyncGenerator, Awaitable, Callable
from pathlib import Path
from typing import Any
from uuid import UUID, uuid4

# Disable rate limiting in tests
os.environ["RATE_LIMIT_ENABLED"] = "false"

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.ext.compiler import compiles
from sqlalchemy.pool import StaticPool

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from domain.services.identity_service import resolve_identity
from infrastructure.auth.jwt_provider import JWTAuthProvider
from infrastructure.auth.provider import TokenUser
from infrastructure.database.models import Base, ProfileModel
from infrastructure.sms.provider import SmsResult


# Compile JSONB as JSON for SQLite (used in tests)
@compiles(JSONB, "sqlite")
def _compile_jsonb_sqlite(type_: Any, compiler: Any, **kw: Any) -> str:
    return "JSON"


# Test database URL (SQLite in memory)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

# Fixed external identity of the authenticated test user
TEST_EXTERNAL_ID = "user_test_2abcXYZ"
TEST_USER_PHONE = "+15550001111"


class OutboxSmsNotifier:
    """SMS notifier that records messages instead of sending them."""

    def __init__(self) -> None:
        self.sent: list[dict[str, Any]] = []
        self.fail = False

    async def send(self, phone: str, template: str, args: dict[str, Any]) -> SmsResult:
        if self.fail:
            return SmsResult(success=False, error="gateway down")
        self.sent.append({"phone": phone, "body": template.format(**args)})
        return SmsResult(success=True, message_id=f"SM{len(self.sent)}")


@pytest.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """Create a fresh in-memory database per test."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
async def session_factory(
    engine: AsyncEngine,
) -> AsyncGenerator[async_sessionmaker[AsyncSession], None]:
    """Create session factory."""
    factory = async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )
    yield factory


@pytest.fixture
def make_user(
    session_factory: async_sessionmaker[AsyncSession],
) -> Callable[..., Awaitable[UUID]]:
    """Insert a registered profile and return its id."""

    async def _make(
        username: str,
        name: str = "",
        phone: str | None = None,
        external_id: str | None = None,
    ) -> UUID:
        profile = ProfileModel(
            id=uuid4(),
            external_identity=resolve_identity(external_id or f"ext_{username}"),
            username=username,
            name=name,
            phone=phone,
        )
        async with session_factory() as session:
            session.add(profile)
            await session.commit()
        return profile.id

    return _make


@pytest.fixture
def test_user() -> TokenUser:
    """Create a test user with a fixed external identity."""
    return TokenUser(external_id=TEST_EXTERNAL_ID)


@pytest.fixture
async def test_profile_id(make_user: Callable[..., Awaitable[UUID]]) -> UUID:
    """Register the test user's profile."""
    return await make_user(
        "testuser", name="Test User", phone=TEST_USER_PHONE, external_id=TEST_EXTERNAL_ID
    )


@pytest.fixture
def auth_provider() -> JWTAuthProvider:
    """Create auth provider for testing."""
    return JWTAuthProvider(
        secret_key="test-secret-key",
        algorithm="HS256",
        expire_minutes=30,
    )


@pytest.fixture
def auth_token(auth_provider: JWTAuthProvider, test_user: TokenUser) -> str:
    """Create auth token for test user."""
    return str(auth_provider.create_token(test_user))


@pytest.fixture
def auth_headers(auth_token: str) -> dict[str, str]:
    """Create authorization headers."""
    return {"Authorization": f"Bearer {auth_token}"}


@pytest.fixture
def sms_outbox() -> OutboxSmsNotifier:
    return OutboxSmsNotifier()


@pytest.fixture
async def client() -> AsyncGenerator[AsyncClient, None]:
    """Create async test client (no auth)."""
    from main import app

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


def _override_services(
    app: FastAPI,
    session_factory: async_sessionmaker[AsyncSession],
    sms: OutboxSmsNotifier,
) -> None:
    """Point every service getter at the test database."""
    from api.v1.dependencies import (
        get_contact_graph_service,
        get_contact_service,
        get_identity_service,
        get_like_service,
        get_notification_service,
        get_profile_service,
    )
    from domain.services.contact_graph_service import ContactGraphService
    from domain.services.contact_service import ContactService
    from domain.services.identity_service import IdentityService
    from domain.services.like_service import LikeService
    from domain.services.notification_service import NotificationService
    from domain.services.profile_service import ProfileService
    from infrastructure.database.sqlalchemy_uow import SQLAlchemyUnitOfWork

    def test_uow_factory() -> SQLAlchemyUnitOfWork:
        return SQLAlchemyUnitOfWork(session_factory)

    identity_service = IdentityService(test_uow_factory)
    notification_service = NotificationService(test_uow_factory)
    like_service = LikeService(
        test_uow_factory,
        notification_service=notification_service,
        sms_notifier=sms,
        invite_template="{from_name} likes you on doggo: {download_url}",
        download_url="https://doggo.test/app",
    )

    app.dependency_overrides[get_identity_service] = lambda: identity_service
    app.dependency_overrides[get_profile_service] = lambda: ProfileService(test_uow_factory)
    app.dependency_overrides[get_contact_graph_service] = lambda: ContactGraphService(
        test_uow_factory
    )
    app.dependency_overrides[get_contact_service] = lambda: ContactService(test_uow_factory)
    app.dependency_overrides[get_notification_service] = lambda: notification_service
    app.dependency_overrides[get_like_service] = lambda: like_service


@pytest.fixture
async def authenticated_client(
    session_factory: async_sessionmaker[AsyncSession],
    test_profile_id: UUID,
    test_user: TokenUser,
    auth_provider: JWTAuthProvider,
    sms_outbox: OutboxSmsNotifier,
) -> AsyncGenerator[AsyncClient, None]:
    """
    Create authenticated test client with proper database and auth overrides.

    This client:
    - Uses an in-memory SQLite database
    - Registers a profile for the test user
    - Overrides auth dependency to return the test user
    - Points every service at the test database and a recording SMS notifier
    """
    from api.dependencies.auth import get_auth_provider, get_current_user
    from main import create_app

    app = create_app()

    async def override_get_user() -> TokenUser:
        return test_user

    app.dependency_overrides[get_current_user] = override_get_user
    app.dependency_overrides[get_auth_provider] = lambda: auth_provider
    _override_services(app, session_factory, sms_outbox)

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c

    app.dependency_overrides.clear()


@pytest.fixture
async def unregistered_client(
    session_factory: async_sessionmaker[AsyncSession],
    auth_provider: JWTAuthProvider,
    auth_headers: dict[str, str],
    sms_outbox: OutboxSmsNotifier,
) -> AsyncGenerator[AsyncClient, None]:
    """Client with a valid token whose identity has no profile yet."""
    from api.dependencies.auth import get_auth_provider
    from main import create_app

    app = create_app()
    app.dependency_overrides[get_auth_provider] = lambda: auth_provider
    _override_services(app, session_factory, sms_outbox)

    transport = ASGITransport(app=app)
    async with AsyncClient(
        transport=transport, base_url="http://test", headers=auth_headers
    ) as c:
        yield c

    app.dependency_overrides.clear()
