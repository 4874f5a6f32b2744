"""
Pytest configuration and fixtures for the user directory tests.
"""

import os

# Settings are read at import time; point them at throwaway backends first.
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("CELERY_BROKER_URL", "memory://")
os.environ.setdefault("CELERY_RESULT_BACKEND", "cache+memory://")

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from userdir.api.dependencies import get_activation_notifier
from userdir.database import Base, get_db
from userdir.exceptions import NotificationError
from userdir.main import app
from userdir.models.user import User
from userdir.repositories import UserRepository
from userdir.services.notifications import ActivationNotifier
from userdir.services.user_service import UserService


class RecordingNotifier(ActivationNotifier):
    """Notifier double that remembers who it was asked to notify."""

    def __init__(self, fail: bool = False):
        self.fail = fail
        self.sent: list[str] = []

    def send_activation(self, user: User) -> None:
        if self.fail:
            raise NotificationError("broker unavailable")
        self.sent.append(user.login)


@pytest_asyncio.fixture
async def engine():
    """Fresh in-memory database per test."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session(engine) -> AsyncSession:
    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with factory() as session:
        yield session


@pytest.fixture
def user_repo(session) -> UserRepository:
    return UserRepository(session)


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def failing_notifier() -> RecordingNotifier:
    return RecordingNotifier(fail=True)


@pytest.fixture
def user_service(user_repo, notifier) -> UserService:
    return UserService(user_repo, notifier)


@pytest.fixture
def make_user(user_repo):
    """Insert a user row directly through the store."""

    async def _make_user(login: str, email: str | None = None, mobile: str | None = None, **extra) -> User:
        data = {
            "login": login,
            "email": email or f"{login}@example.com",
            "mobile": mobile,
            "activated": False,
        }
        data.update(extra)
        return await user_repo.create(data)

    return _make_user


@pytest_asyncio.fixture
async def client(session, notifier):
    """HTTP client bound to the app, sharing the test session and notifier."""

    async def override_get_db():
        yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_activation_notifier] = lambda: notifier
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()
