"""Pytest configuration and fixtures for integration tests."""
import os
import sys

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

# Set test environment before importing app
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["AUTH_ENABLED"] = "true"
os.environ["AUTH_SECRET_KEY"] = "test-secret-key-for-taskboard-tests-only-0123456789"
os.environ["AUTH_BCRYPT_ROUNDS"] = "4"
os.environ.pop("REDIS_URL", None)

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool

from app.main import app
from app.database import get_async_session
from app.models import Base

# Use in-memory SQLite for tests
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


# Configure pytest-asyncio
def pytest_configure(config):
    config.addinivalue_line(
        "markers", "asyncio: mark test as an asyncio test"
    )


@pytest_asyncio.fixture(scope="function")
async def test_engine():
    """Create test database engine."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def test_session(test_engine):
    """Create test database session."""
    async_session = async_sessionmaker(
        test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with async_session() as session:
        yield session


@pytest_asyncio.fixture(scope="function")
async def anon_client(test_engine):
    """Create an unauthenticated test client with overridden database."""
    async_session_maker = async_sessionmaker(
        test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async def override_get_session():
        async with async_session_maker() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_async_session] = override_get_session

    # No Redis in tests; events are skipped
    from app import dependencies
    dependencies.redis_client = None

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test"
    ) as client:
        yield client

    app.dependency_overrides.clear()


@pytest.fixture
def register(anon_client: AsyncClient):
    """Factory registering a user and returning its Authorization headers."""

    async def _register(email: str, password: str = "correct-horse-battery") -> dict:
        response = await anon_client.post(
            "/v1/auth/register", json={"email": email, "password": password}
        )
        assert response.status_code == 201, response.text
        return {"Authorization": f"Bearer {response.json()['accessToken']}"}

    return _register


@pytest_asyncio.fixture(scope="function")
async def client(anon_client: AsyncClient, register):
    """Test client authenticated as alice@example.com."""
    anon_client.headers.update(await register("alice@example.com"))
    return anon_client


@pytest.fixture
def make_board(client: AsyncClient):
    """Factory creating a project and returning ``(project_id, {column name: id})``."""

    async def _make_board(name: str = "Board") -> tuple[str, dict]:
        response = await client.post("/v1/projects/", json={"name": name})
        assert response.status_code == 201, response.text
        data = response.json()
        return data["id"], {c["name"]: c["id"] for c in data["columns"]}

    return _make_board


@pytest.fixture
def add_task(client: AsyncClient):
    """Factory creating a task and returning its JSON."""

    async def _add_task(project_id: str, column_id: str, title: str, description: str = "") -> dict:
        response = await client.post(
            f"/v1/projects/{project_id}/tasks",
            json={"columnId": column_id, "title": title, "description": description},
        )
        assert response.status_code == 201, response.text
        return response.json()

    return _add_task


@pytest.fixture
def column_layout(client: AsyncClient):
    """Factory returning ``[(title, order), ...]`` for one column as the server lists it."""

    async def _column_layout(project_id: str, column_id: str) -> list[tuple[str, int]]:
        response = await client.get(f"/v1/projects/{project_id}/tasks")
        assert response.status_code == 200, response.text
        return [
            (t["title"], t["order"])
            for t in response.json()
            if t["column"]["id"] == column_id
        ]

    return _column_layout
