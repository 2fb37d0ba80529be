import os

# Settings are read at import time; point them at an in-memory store first
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ["ENVIRONMENT"] = "testing"

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import NullPool
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession as AsyncSessionSQLModel

import proconnect.models  # noqa: F401
from proconnect.core.config import settings
from proconnect.core.security import create_access_token
from proconnect.db.database import get_db
from proconnect.main import app
from proconnect.models.user import User


@pytest_asyncio.fixture(scope="function")
async def async_test_engine(tmp_path):
    """Fresh schema for each test, on TEST_DATABASE_URL when set, else a file-backed SQLite store.

    Each session gets its own connection (NullPool), so concurrent sessions are isolated.
    """
    db_url = settings.ASYNC_TEST_DATABASE_URL
    if db_url:
        test_engine = create_async_engine(db_url, poolclass=NullPool)
    else:
        test_engine = create_async_engine(
            f"sqlite+aiosqlite:///{tmp_path}/test.db",
            connect_args={"check_same_thread": False},
            poolclass=NullPool,
        )
    async with test_engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.drop_all)
        await conn.run_sync(SQLModel.metadata.create_all)

    yield test_engine

    if db_url:
        async with test_engine.begin() as conn:
            await conn.run_sync(SQLModel.metadata.drop_all)
    await test_engine.dispose()


@pytest.fixture(scope="function")
def session_factory(async_test_engine):
    return sessionmaker(
        bind=async_test_engine,
        class_=AsyncSessionSQLModel,
        expire_on_commit=False,
        autoflush=False
    )


@pytest_asyncio.fixture(scope="function")
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture(scope="function")
async def client(session_factory):
    """API client; every request gets its own session, as in production."""
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def create_user(db_session):
    async def _create_user(name: str = "Test User", email: str = None, password: str = "secret123"):
        user = User(name=name, email=email or f"{name.lower().replace(' ', '.')}@example.com", hashed_password="")
        user.set_password(password)
        db_session.add(user)
        await db_session.commit()
        return user
    return _create_user


@pytest_asyncio.fixture
async def alice(create_user):
    return await create_user("Alice")


@pytest_asyncio.fixture
async def bob(create_user):
    return await create_user("Bob")


@pytest_asyncio.fixture
async def carol(create_user):
    return await create_user("Carol")


def auth_headers(user: User) -> dict:
    return {"Authorization": f"Bearer {create_access_token(user.id)}"}


@pytest.fixture
def headers_for():
    return auth_headers
