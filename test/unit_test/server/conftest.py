from dataclasses import dataclass
from typing import AsyncGenerator, Awaitable, Callable
from unittest.mock import patch

import jwt
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine
from sqlmodel.pool import StaticPool

from farmops.core.database import Base
from farmops.core.database import entities  # noqa: F401
from farmops.core.database.entities import Farm, FarmUser, User
from farmops.core.database.utils import create_sessionmaker, enable_sqlite_foreign_keys
from farmops.core.models.domain import FarmRole
from farmops.server.core.config import settings

# Use in-memory SQLite for testing
# Note: StaticPool keeps the single in-memory connection alive across sessions
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@dataclass
class Actor:
    """A user with a bearer token, as seen by the API."""

    user: User
    headers: dict


def make_token(user: User) -> str:
    config = settings.auth
    return jwt.encode(
        {"sub": user.external_id, "email": user.email, "name": user.name},
        config.jwt_secret,
        algorithm=config.jwt_algorithm,
    )


@pytest.fixture(autouse=True)
def storage_dirs(tmp_path, monkeypatch):
    """Point uploads and generated documents at a per-test directory."""
    monkeypatch.setattr(settings, "uploads_dir", str(tmp_path / "uploads"))
    monkeypatch.setattr(settings, "documents_dir", str(tmp_path / "documents"))
    return tmp_path


@pytest_asyncio.fixture
async def test_engine() -> AsyncGenerator[AsyncEngine, None]:
    """Create a fresh in-memory database per test."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    enable_sqlite_foreign_keys(engine)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture(name="session")
async def session_fixture(test_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create a new session for each test."""
    async with create_sessionmaker(test_engine)() as session:
        yield session


@pytest_asyncio.fixture(name="client")
async def client_fixture(session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Create an async HTTP client with mocked lifespan and overridden dependencies."""
    from farmops.core.database import get_session
    from farmops.server.main import app

    async def get_session_override() -> AsyncGenerator[AsyncSession, None]:
        yield session

    app.dependency_overrides[get_session] = get_session_override

    # Mock the lifespan to prevent database initialization during tests
    async def mock_lifespan(app):
        yield

    with patch("farmops.server.main.lifespan", mock_lifespan):
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://localhost") as client:
            yield client

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def farm(session: AsyncSession) -> Farm:
    farm = Farm(name="Green Sprouts", slug="green-sprouts", phone="555-0100", city="Portland", state="OR")
    session.add(farm)
    await session.commit()
    await session.refresh(farm)
    return farm


@pytest.fixture
def make_actor(session: AsyncSession) -> Callable[..., Awaitable[Actor]]:
    """Factory creating a user with the given role on a farm (or no membership)."""
    counter = {"n": 0}

    async def _make(farm: Farm = None, role: FarmRole = None, email: str = None) -> Actor:
        counter["n"] += 1
        n = counter["n"]
        user = User(external_id=f"auth|user-{n}", email=email or f"user{n}@example.com", name=f"User {n}")
        session.add(user)
        await session.flush()
        if farm is not None and role is not None:
            session.add(FarmUser(user_id=user.id, farm_id=farm.id, role=role))
        await session.commit()
        await session.refresh(user)
        return Actor(user=user, headers={"Authorization": f"Bearer {make_token(user)}"})

    return _make


@pytest_asyncio.fixture
async def owner(farm: Farm, make_actor) -> Actor:
    return await make_actor(farm, FarmRole.OWNER, email="owner@example.com")


@pytest_asyncio.fixture
async def operator(farm: Farm, make_actor) -> Actor:
    return await make_actor(farm, FarmRole.FARM_OPERATOR)


class FarmApi:
    """Shortcuts for calling the farm-scoped endpoints in tests."""

    def __init__(self, client: AsyncClient, farm: Farm) -> None:
        self.client = client
        self.farm = farm

    def url(self, path: str = "") -> str:
        return f"/api/v1/farms/{self.farm.id}{path}"

    async def create_product(self, actor: Actor, **overrides) -> dict:
        payload = {
            "name": "Sunflower",
            "days_soaking": 1,
            "days_germination": 3,
            "days_light": 6,
            "avg_yield_per_tray": 10,
        }
        payload.update(overrides)
        response = await self.client.post(self.url("/products"), json=payload, headers=actor.headers)
        assert response.status_code == 201, response.text
        return response.json()["data"]

    async def create_sku(self, actor: Actor, product_id: str, **overrides) -> dict:
        payload = {"sku_code": "SUN-4OZ", "name": "Sunflower 4oz", "weight_oz": 4, "price": 500}
        payload.update(overrides)
        response = await self.client.post(
            self.url(f"/products/{product_id}/skus"), json=payload, headers=actor.headers
        )
        assert response.status_code == 201, response.text
        return response.json()["data"]

    async def create_order(self, actor: Actor, product_id: str, **overrides) -> dict:
        payload = {
            "customer_name": "Cafe Verde",
            "items": [{"product_id": product_id, "quantity_oz": 40, "harvest_date": "2026-11-20T00:00:00"}],
        }
        payload.update(overrides)
        response = await self.client.post(self.url("/orders"), json=payload, headers=actor.headers)
        assert response.status_code == 201, response.text
        return response.json()["data"]


@pytest.fixture
def api(client: AsyncClient, farm: Farm) -> FarmApi:
    return FarmApi(client, farm)
