"""
Test configuration and fixtures for Chama Tracker backend tests.
"""
import pytest_asyncio
from typing import AsyncGenerator
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import NullPool

from chama.main import app
from chama.client import ContributionsClient
from chama.core.periods import current_year
from chama.db.base import Base, Database, get_db
from chama.models.member import Member
from chama.models.contribution import Contribution


@pytest_asyncio.fixture(scope="function")
async def db_engine(tmp_path):
    """Create a test database engine.

    Uses a file-based SQLite DB to avoid :memory: multiple-connection issues
    with SQLAlchemy + aiosqlite (each new connection would see an empty DB).
    """
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
        echo=False,
        poolclass=NullPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def db_session(db_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session."""
    async_session_maker = async_sessionmaker(
        db_engine,
        class_=AsyncSession,
        expire_on_commit=False
    )
    async with async_session_maker() as session:
        yield session
        await session.rollback()


@pytest_asyncio.fixture(scope="function")
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Create a test client with database session override."""
    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest_asyncio.fixture(scope="function")
async def api_client(client: AsyncClient) -> AsyncGenerator[ContributionsClient, None]:
    """ContributionsClient wired to the app through the same overridden session."""
    async with ContributionsClient("http://test", transport=ASGITransport(app=app)) as api:
        yield api


@pytest_asyncio.fixture
async def test_member(db_session: AsyncSession) -> Member:
    """Create a test member with an empty current-year record."""
    member = Member(
        name="John Doe",
        phone="0700000000",
        email="john@example.com",
    )
    db_session.add(member)
    await db_session.flush()

    db_session.add(Contribution(member_id=member.id, year=current_year()))
    await db_session.flush()
    return member


@pytest_asyncio.fixture
async def second_member(db_session: AsyncSession) -> Member:
    """Create a second member, alphabetically before John Doe."""
    member = Member(name="Alice Achieng", phone="0711111111")
    db_session.add(member)
    await db_session.flush()

    db_session.add(Contribution(member_id=member.id, year=current_year()))
    await db_session.flush()
    return member


@pytest_asyncio.fixture(scope="function")
async def database(tmp_path) -> AsyncGenerator[Database, None]:
    """A real Database on app.state, with no get_db override."""
    app.dependency_overrides.clear()
    database = Database(f"sqlite+aiosqlite:///{tmp_path / 'app.db'}")
    await database.create_all()
    app.state.database = database
    yield database
    del app.state.database
    await database.dispose()


@pytest_asyncio.fixture(scope="function")
async def app_client(database: Database) -> AsyncGenerator[AsyncClient, None]:
    """Client that goes through the real session dependency.

    Unhandled exceptions come back as the app's 500 response instead of
    being re-raised into the test.
    """
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
