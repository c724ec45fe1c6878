"""
Shared test fixtures for the backoffice admin test suite.

Each test gets a fresh in-memory SQLite database (aiosqlite + StaticPool)
seeded with the RBAC reference data, and the app's ``get_db`` dependency
is pointed at it.
"""

import os
import sys
from collections.abc import AsyncGenerator, Iterable

import pytest

# Ensure project root is importable
ROOT_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if ROOT_DIR not in sys.path:
    sys.path.insert(0, ROOT_DIR)

# Override environment BEFORE importing application modules
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["JWT_SECRET"] = "test-secret-not-for-production"
os.environ["APP_ENV"] = "test"
os.environ["ALLOWED_ORIGINS"] = "http://testserver"

from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.api.v1.deps import get_db
from app.api.v1.endpoints.auth import limiter
from app.core.security import hash_password, issue_token
from app.db.base import Base
from app.db.seed import seed_reference_data
from app.db.session import enable_sqlite_foreign_keys
from app.main import app
from app.models.rbac import UserRole
from app.models.user import AdminUser
from app.services import grants

# Login is throttled per client IP; every test shares one
limiter.enabled = False

DEFAULT_PASSWORD = "correct-horse-battery"


@pytest.fixture
async def session_factory() -> AsyncGenerator[async_sessionmaker[AsyncSession], None]:
    """Fresh seeded database wired into the app for the duration of a test."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    enable_sqlite_foreign_keys(engine.sync_engine)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with factory() as session:
        await seed_reference_data(session)

    async def _override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with factory() as session:
            yield session

    app.dependency_overrides[get_db] = _override_get_db
    yield factory
    app.dependency_overrides.pop(get_db, None)
    await engine.dispose()


@pytest.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Return a raw database session for direct queries in tests."""
    async with session_factory() as session:
        yield session


@pytest.fixture
async def async_client(session_factory) -> AsyncGenerator[AsyncClient, None]:
    """Return a httpx AsyncClient wired to the app."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def make_admin(db_session: AsyncSession):
    """Factory creating an admin user with role assignments and direct grants.

    ``grants`` is an iterable of ``(action_name, entity_name)`` pairs.
    """

    async def _make(
        email: str,
        *,
        password: str = DEFAULT_PASSWORD,
        roles: Iterable = (),
        direct: Iterable[tuple[str, str]] = (),
    ) -> AdminUser:
        user = AdminUser(
            username=email.split("@")[0],
            first_name="Test",
            last_name="Admin",
            email=email,
            password_hash=hash_password(password),
        )
        db_session.add(user)
        await db_session.flush()
        for role_id in roles:
            db_session.add(UserRole(admin_user_id=user.id, role_id=role_id))
        await db_session.commit()
        for action, entity in direct:
            await grants.grant_user_permission(db_session, user.id, action, entity)
        return user

    return _make


@pytest.fixture
def grant_role(db_session: AsyncSession):
    """Grant ``(action, entity)`` pairs to a role."""

    async def _grant(role_id, *pairs: tuple[str, str]) -> None:
        for action, entity in pairs:
            await grants.grant_role_permission(db_session, role_id, action, entity)

    return _grant


@pytest.fixture
def auth_headers():
    """Build an Authorization header carrying a fresh token for *user*."""

    def _headers(user: AdminUser) -> dict[str, str]:
        return {"Authorization": f"Bearer {issue_token(user.id)}"}

    return _headers
