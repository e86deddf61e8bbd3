"""
Test fixtures - in-memory SQLite database + authenticated HTTP client
"""
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker

from truckhub.database import Base, get_db, enable_sqlite_foreign_keys
from truckhub.main import app
from truckhub.api.auth import get_password_hash, create_access_token
from truckhub.models.user import User
from truckhub.models.organization import Organization
from truckhub.models.food_truck import FoodTruck
from truckhub.services.cache import ResourceCache, get_cache


@pytest_asyncio.fixture()
async def db_session():
    """Create a fresh in-memory SQLite database for each test"""
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", echo=False)
    enable_sqlite_foreign_keys(engine)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async with session_factory() as session:
        yield session

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest_asyncio.fixture()
async def seed_data(db_session):
    """Insert baseline test data: owner with an organization and one truck, plus an outsider"""
    owner = User(
        email="owner@truckhub.io",
        first_name="Rosa",
        last_name="Diaz",
        hashed_password=get_password_hash("testpass123"),
    )
    outsider = User(
        email="other@truckhub.io",
        first_name="Sam",
        last_name="Lee",
        hashed_password=get_password_hash("testpass123"),
    )
    db_session.add_all([owner, outsider])
    await db_session.flush()

    org = Organization(name="Taco Fleet", owner_id=owner.id)
    db_session.add(org)
    await db_session.flush()

    truck = FoodTruck(organization_id=org.id, name="El Camion", cuisine="Mexican")
    db_session.add(truck)
    await db_session.commit()
    for obj in (owner, outsider, org, truck):
        await db_session.refresh(obj)

    return {"owner": owner, "outsider": outsider, "org": org, "truck": truck}


@pytest_asyncio.fixture()
async def cache():
    return ResourceCache(ttl_seconds=None)


def _override(db_session, cache):
    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_cache] = lambda: cache


@pytest_asyncio.fixture()
async def client(db_session, seed_data, cache):
    """Authenticated httpx AsyncClient bound to the FastAPI app (truck owner)"""
    _override(db_session, cache)

    token = create_access_token(data={"sub": seed_data["owner"].email})

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test", follow_redirects=True) as ac:
        ac.headers["Authorization"] = f"Bearer {token}"
        yield ac

    app.dependency_overrides.clear()


@pytest_asyncio.fixture()
async def outsider_client(db_session, seed_data, cache):
    """Authenticated as a user with no access to the seeded truck"""
    _override(db_session, cache)

    token = create_access_token(data={"sub": seed_data["outsider"].email})

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test", follow_redirects=True) as ac:
        ac.headers["Authorization"] = f"Bearer {token}"
        yield ac

    app.dependency_overrides.clear()


@pytest_asyncio.fixture()
async def unauth_client(db_session, cache):
    """Unauthenticated httpx AsyncClient"""
    _override(db_session, cache)

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test", follow_redirects=True) as ac:
        yield ac

    app.dependency_overrides.clear()
