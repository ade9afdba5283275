"""Service test fixtures — async DB, upstream fakes, and a FastAPI test client.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - get_db dependency overridden to use the test DB session
    - db_manager patched so the readiness probe sees the test engine
    - Upstream clients run on httpx.MockTransport; nothing leaves the process
    - session.user decides who the gateway thinks is signed in (None = anonymous)

Design Decisions:
    - SQLite in-memory with StaticPool: every session shares one connection, so
      rows written through the API are visible to assertions
    - get_current_user overridden rather than the cookie flow; the cookie flow
      has its own test against a fake users service
"""

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

import storefront.infrastructure.database as db_module
from storefront.api.deps import (
    get_chatbot, get_current_user, get_platform_client, get_shopping_client,
)
from storefront.db.base import Base
from storefront.db.session import create_all
from storefront.infrastructure.database import DatabaseSessionManager, get_db
from storefront.infrastructure.platform_client import PlatformApiClient
from storefront.infrastructure.shopping_client import ShoppingServiceClient
from storefront.main import app
from storefront.services.chatbot import FashionChatbot

from tests.services.fake_upstream import FakeUpstream, platform_success, shopping_success
from tests.services.mock_anthropic import MockAnthropicClient, text_response

OWNER = {"id": "user-1", "email": "owner@example.com"}
SHOPPER = {"id": "user-2", "email": "shopper@example.com"}


class SessionUser:
    def __init__(self):
        self.user = None


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False, poolclass=StaticPool,
    )
    await create_all(engine)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    return async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False,
    )


@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session


@pytest.fixture
def session():
    return SessionUser()


@pytest.fixture
def as_owner(session):
    session.user = OWNER
    return OWNER


@pytest.fixture
def platform():
    return FakeUpstream(platform_success)


@pytest.fixture
def shopping():
    return FakeUpstream(shopping_success)


@pytest.fixture
def anthropic_mock():
    return MockAnthropicClient([text_response("Cuff those jeans and own it.")])


@pytest.fixture
async def client(
    test_engine, test_session_factory, session, platform, shopping, anthropic_mock,
):
    """FastAPI test client with DB, session user, and upstreams overridden."""
    async def override_get_db():
        async with test_session_factory() as db:
            yield db

    async def override_current_user():
        return session.user

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_current_user] = override_current_user
    app.dependency_overrides[get_platform_client] = lambda: PlatformApiClient(
        "https://platform.test/v1/run", "platform-test-key", transport=platform.transport,
    )
    app.dependency_overrides[get_shopping_client] = lambda: ShoppingServiceClient(
        "https://shopping.test", "storefront-test", transport=shopping.transport,
    )
    app.dependency_overrides[get_chatbot] = lambda: FashionChatbot(
        anthropic_mock, "claude-test",
    )

    original_manager = db_module.db_manager
    fake_manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    fake_manager.engine = test_engine
    fake_manager._session_factory = test_session_factory
    db_module.db_manager = fake_manager

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    db_module.db_manager = original_manager
