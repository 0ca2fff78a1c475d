"""
Shared test fixtures for the Quotation Management API test suite.

Each test gets its own in-memory SQLite database (aiosqlite + AsyncSession)
swapped in through ``app.dependency_overrides``.
"""

import os
import sys
from typing import AsyncGenerator

import pytest

# Ensure project root is importable
ROOT_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if ROOT_DIR not in sys.path:
    sys.path.insert(0, ROOT_DIR)

# Override environment BEFORE importing application modules
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["JWT_SECRET"] = "test-secret"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["DB_RECONNECT_BACKOFF_SECONDS"] = "0"

from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from quotation_api.api.deps import get_db
from quotation_api.core.security import PasswordHasher, TokenConfig, TokenIssuer, TokenVerifier
from quotation_api.db.base import Base
from quotation_api.main import app
from quotation_api.models.user import User
from quotation_api.schemas.user import UserPublic

TEST_SECRET = "test-secret"


@pytest.fixture
async def test_engine() -> AsyncGenerator[AsyncEngine, None]:
    """Fresh in-memory database with all tables created."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(test_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def async_client(session_factory) -> AsyncGenerator[AsyncClient, None]:
    """Return a httpx AsyncClient wired to the app."""

    async def _override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = _override_get_db
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.pop(get_db, None)


@pytest.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Return a raw database session for direct queries in tests."""
    async with session_factory() as session:
        yield session


# ── Auth helpers ────────────────────────────────────────────────────
@pytest.fixture
def hasher() -> PasswordHasher:
    return PasswordHasher(rounds=4)


@pytest.fixture
def token_config() -> TokenConfig:
    return TokenConfig(secret=TEST_SECRET)


@pytest.fixture
def issuer(token_config: TokenConfig) -> TokenIssuer:
    return TokenIssuer(token_config)


@pytest.fixture
def verifier(token_config: TokenConfig) -> TokenVerifier:
    return TokenVerifier(token_config)


@pytest.fixture
def user_headers(issuer: TokenIssuer) -> dict[str, str]:
    token = issuer.issue(UserPublic(id=1, username="bob", email="bob@example.com", role="user"))
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin_headers(issuer: TokenIssuer) -> dict[str, str]:
    token = issuer.issue(UserPublic(id=2, username="root", email="root@example.com", role="admin"))
    return {"Authorization": f"Bearer {token}"}


class InMemoryCredentialStore:
    """Credential store double that records every insert."""

    def __init__(self) -> None:
        self.users: list[User] = []
        self.inserts = 0

    async def find_users(self, email: str, username: str) -> list[User]:
        return [u for u in self.users if u.email == email or u.username == username]

    async def insert_user(self, username: str, email: str, password_hash: str, role: str) -> int:
        self.inserts += 1
        user = User(
            id=len(self.users) + 1,
            username=username,
            email=email,
            password_hash=password_hash,
            role=role,
        )
        self.users.append(user)
        return user.id

    async def find_user_by_email(self, email: str) -> User | None:
        return next((u for u in self.users if u.email == email), None)


@pytest.fixture
def store() -> InMemoryCredentialStore:
    return InMemoryCredentialStore()
