"""Pytest configuration and fixtures."""

import os
from collections.abc import AsyncGenerator, Callable
from typing import Any

# Test settings must be in place before application modules are imported
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["JWT_SECRET_KEY"] = "test-secret-key"
os.environ["JWT_ALGORITHM"] = "HS256"
os.environ["SUPABASE_URL"] = ""

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.ext.compiler import compiles
from sqlalchemy.pool import StaticPool

from domain.entities.profile import IdentityClaims
from infrastructure.auth.jwt_provider import JWTAuthProvider
from infrastructure.auth.provider import TokenUser
from infrastructure.database.models import Base
from infrastructure.database.sqlalchemy_uow import SQLAlchemyUnitOfWork


# Compile JSONB as JSON for SQLite (used in tests)
@compiles(JSONB, "sqlite")
def _compile_jsonb_sqlite(type_: Any, compiler: Any, **kw: Any) -> str:
    return "JSON"


# Test database URL (SQLite in memory)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

TEST_SUBJECT = "user_test123"


async def create_test_engine(url: str = TEST_DATABASE_URL) -> AsyncEngine:
    """Create an engine with all tables.

    In-memory databases share one connection. File databases take the write
    lock when a transaction begins, so concurrent writers queue on the busy
    timeout instead of failing with "database is locked".
    """
    if url == TEST_DATABASE_URL:
        engine = create_async_engine(
            url,
            poolclass=StaticPool,
            connect_args={"check_same_thread": False},
        )
    else:
        engine = create_async_engine(url, connect_args={"timeout": 30})

        @event.listens_for(engine.sync_engine, "connect")
        def _disable_driver_transactions(dbapi_connection: Any, connection_record: Any) -> None:
            dbapi_connection.isolation_level = None

        @event.listens_for(engine.sync_engine, "begin")
        def _begin_immediate(conn: Any) -> None:
            conn.exec_driver_sql("BEGIN IMMEDIATE")

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    return engine


@pytest.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """Create a fresh test database per test."""
    engine = await create_test_engine()
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create session factory."""
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


@pytest.fixture
async def db_session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    """Create a fresh database session for each test."""
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
def uow_factory(
    session_factory: async_sessionmaker[AsyncSession],
) -> Callable[[], SQLAlchemyUnitOfWork]:
    """UoW factory bound to the test database."""

    def factory() -> SQLAlchemyUnitOfWork:
        return SQLAlchemyUnitOfWork(session_factory)

    return factory


@pytest.fixture
def test_user() -> TokenUser:
    """The default caller used by API tests."""
    return TokenUser(
        subject=TEST_SUBJECT,
        claims=IdentityClaims(
            username="tester",
            email="test@example.com",
            full_name="Test User",
        ),
        role="authenticated",
    )


@pytest.fixture
def other_user() -> TokenUser:
    """A second caller, for ownership checks."""
    return TokenUser(
        subject="user_other456",
        claims=IdentityClaims(email="other@example.com", first_name="Olga"),
        role="authenticated",
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
def make_auth_headers(auth_provider: JWTAuthProvider) -> Callable[[TokenUser], dict[str, str]]:
    """Build authorization headers carrying a signed token for any user."""

    def make(user: TokenUser) -> dict[str, str]:
        return {"Authorization": f"Bearer {auth_provider.create_token(user)}"}

    return make


@pytest.fixture
def auth_headers(
    make_auth_headers: Callable[[TokenUser], dict[str, str]], test_user: TokenUser
) -> dict[str, str]:
    """Create authorization headers."""
    return make_auth_headers(test_user)


@pytest.fixture
def app(
    session_factory: async_sessionmaker[AsyncSession],
    uow_factory: Callable[[], SQLAlchemyUnitOfWork],
    auth_provider: JWTAuthProvider,
) -> FastAPI:
    """
    Create the application wired to the test database.

    - Services use a UoW factory bound to the in-memory SQLite database
    - Tokens are validated by the HS256 test provider
    """
    from api.dependencies.auth import get_auth_provider
    from api.v1.dependencies import (
        get_apify_key_service,
        get_linkedin_profile_service,
        get_profile_service,
        get_scraping_job_service,
    )
    from domain.services.apify_key_service import ApifyKeyService
    from domain.services.linkedin_profile_service import LinkedInProfileService
    from domain.services.profile_service import ProfileService
    from domain.services.scraping_job_service import ScrapingJobService
    from infrastructure.database.session import get_async_session
    from main import create_app

    app = create_app()

    async def override_get_async_session() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_auth_provider] = lambda: auth_provider
    app.dependency_overrides[get_async_session] = override_get_async_session
    app.dependency_overrides[get_profile_service] = lambda: ProfileService(uow_factory)
    app.dependency_overrides[get_apify_key_service] = lambda: ApifyKeyService(uow_factory)
    app.dependency_overrides[get_linkedin_profile_service] = lambda: LinkedInProfileService(
        uow_factory
    )
    app.dependency_overrides[get_scraping_job_service] = lambda: ScrapingJobService(uow_factory)
    return app


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """Create async test client (no auth)."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
async def authenticated_client(
    app: FastAPI,
    auth_headers: dict[str, str],
) -> AsyncGenerator[AsyncClient, None]:
    """Create a test client that sends the default user's token on every request."""
    transport = ASGITransport(app=app)
    async with AsyncClient(
        transport=transport,
        base_url="http://test",
        headers=auth_headers,
    ) as c:
        yield c
    app.dependency_overrides.clear()
