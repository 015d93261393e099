"""
Global pytest configuration and fixtures.

API tests run the FastAPI app over httpx.ASGITransport against an in-memory
SQLite database. The session, AI, email and LinkedIn dependencies are
overridden per test.
"""
from typing import AsyncGenerator

import httpx
import pytest
import pytest_asyncio
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

import relateai.models  # noqa: F401
from relateai.api.deps import get_ai, get_email, get_linkedin
from relateai.core.rate_limit import LIMITERS
from relateai.database import get_session
from relateai.main import app
from relateai.services.email_service import MockEmailService
from relateai.services.integrations.linkedin import LinkedInConfig, MockLinkedInClient
from tests.utils import FakeAI, create_account, create_contact, register


TEST_DATABASE_URL = "sqlite+aiosqlite://"


@pytest.fixture(autouse=True)
def reset_rate_limits():
    """Rate limiters are process-wide; start every test with empty windows."""
    for limiter in LIMITERS:
        limiter.reset()
    yield
    for limiter in LIMITERS:
        limiter.reset()


@pytest_asyncio.fixture(scope="function")
async def test_db_engine():
    """In-memory SQLite engine shared across sessions of one test."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False}
    )

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
def session_factory(test_db_engine):
    return sessionmaker(test_db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
def fake_ai() -> FakeAI:
    return FakeAI(fail=True)


@pytest.fixture
def email_service() -> MockEmailService:
    return MockEmailService()


@pytest.fixture
def linkedin_client() -> MockLinkedInClient:
    return MockLinkedInClient(
        config=LinkedInConfig(client_id="test-client", client_secret="test-secret"),
        http_client=httpx.AsyncClient(transport=httpx.MockTransport(lambda request: httpx.Response(500)))
    )


@pytest_asyncio.fixture(scope="function")
async def client(session_factory, fake_ai, email_service, linkedin_client) -> AsyncGenerator[AsyncClient, None]:
    """API client with every external dependency overridden."""

    async def override_get_session():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_session] = override_get_session
    app.dependency_overrides[get_ai] = lambda: fake_ai
    app.dependency_overrides[get_email] = lambda: email_service
    app.dependency_overrides[get_linkedin] = lambda: linkedin_client

    async with AsyncClient(
        transport=httpx.ASGITransport(app=app),
        base_url="http://testserver"
    ) as client:
        yield client

    app.dependency_overrides.clear()
    await linkedin_client.close()


@pytest_asyncio.fixture
async def user(client) -> dict:
    return await register(client)


@pytest.fixture
def auth_headers(user) -> dict:
    return {"x-auth-token": user["token"]}


@pytest_asyncio.fixture
async def account(client, auth_headers) -> dict:
    return await create_account(client, auth_headers, website="https://acme.com", industry="Software")


@pytest_asyncio.fixture
async def contact(client, auth_headers, account) -> dict:
    return await create_contact(client, auth_headers, account["id"], title="VP Sales")
