"""Test config and shared fixtures."""
import pytest
from typing import AsyncGenerator, List
from httpx import ASGITransport, AsyncClient
from loguru import logger
from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from main import app
from framework.database.sql_driver import enable_sqlite_foreign_keys
from apps.models import Company, Employee
from apps.repository_manager import RepositoryManager
from apps.service_manager import get_db


# In-memory SQLite for tests
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture(scope="function")
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """Fresh in-memory database with every table created."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False
    )
    enable_sqlite_foreign_keys(engine)

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker:
    """Session factory; each call stands in for one request's session."""
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def async_session(session_factory: async_sessionmaker) -> AsyncGenerator[AsyncSession, None]:
    """Create async test database session."""
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
def repository_manager(async_session: AsyncSession) -> RepositoryManager:
    return RepositoryManager(session=async_session)


@pytest.fixture
async def seeded_companies(session_factory: async_sessionmaker) -> List[Company]:
    """Seed the two companies used by the listing scenarios (inserted out of order)."""
    companies = [
        Company(name="C2", address="A2", country="CA"),
        Company(name="C1", address="A1", country="US"),
    ]
    async with session_factory() as session:
        session.add_all(companies)
        await session.commit()
    return companies


@pytest.fixture
async def client(session_factory: async_sessionmaker) -> AsyncGenerator[AsyncClient, None]:
    """Create test client bound to the in-memory database."""
    async def _get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = _get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def employee_factory():
    """Build an unsaved Employee for a company, overriding any field."""
    def _make(company_id: int, **overrides) -> Employee:
        fields = {"name": "Sam Raiden", "age": 26, "position": "Developer", "company_id": company_id}
        fields.update(overrides)
        return Employee(**fields)
    return _make


@pytest.fixture
def log_records():
    """Capture loguru records (with their bound extras) emitted during the test."""
    records = []
    handler_id = logger.add(lambda message: records.append(message.record), level="DEBUG")
    yield records
    logger.remove(handler_id)
