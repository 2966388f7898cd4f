"""
Animal Rescue API — Test Configuration (conftest.py)
=====================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy:
    Function-scoped (created fresh for each test):
    ├── database: Database over a throwaway SQLite file (aiosqlite), schema created
    ├── repository: AnimalRepository over that database
    ├── dispatcher: RequestDispatcher over that repository
    ├── mock_repository: AsyncMock with the AnimalRepository interface
    ├── test_client: HTTPX AsyncClient talking to create_app(database=...)
    ├── fido_payload: the minimal four-field create body
    └── full_payload: a body with every attribute populated
"""

import os

# Override settings for testing BEFORE any app imports
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///./rescue_test.db"
os.environ["DB_SECRET_ARN"] = ""
os.environ["LOG_LEVEL"] = "WARNING"

from unittest.mock import AsyncMock  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402

from rescue_api.database import Base, Database  # noqa: E402
from rescue_api.services.animal_repository import AnimalRepository  # noqa: E402
from rescue_api.services.dispatcher import RequestDispatcher  # noqa: E402


@pytest_asyncio.fixture
async def database(tmp_path):
    """
    Provides a Database backed by a fresh SQLite file.

    A file (not :memory:) so every pooled connection sees the same schema.
    """
    db = Database.from_url(f"sqlite+aiosqlite:///{tmp_path / 'rescue.db'}")
    async with db.engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield db
    await db.dispose()


@pytest.fixture
def repository(database):
    return AnimalRepository(database)


@pytest.fixture
def dispatcher(repository):
    return RequestDispatcher(repository)


@pytest.fixture
def mock_repository():
    """
    AsyncMock standing in for AnimalRepository.

    Usage:
        mock_repository.get_by_id.return_value = Animal(id=1, name="Rex")
        mock_repository.get_by_id.assert_not_awaited()
    """
    return AsyncMock(spec=AnimalRepository)


@pytest_asyncio.fixture
async def test_client(database):
    """
    Provides an async HTTP test client for endpoint testing.

    ASGITransport does not run the lifespan, so the app gets the test
    database injected through the factory.
    """
    from rescue_api.main import create_app

    app = create_app(database=database)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def fido_payload():
    return {
        "name": "Fido",
        "species": "Dog",
        "arrivalDate": "2024-01-01",
        "status": "available",
    }


@pytest.fixture
def full_payload():
    return {
        "name": "Luna",
        "species": "Cat",
        "breed": "Domestic Shorthair",
        "age": 3,
        "sex": "female",
        "description": "Shy at first, loves window sills",
        "arrivalDate": "2024-02-14",
        "healthStatus": "healthy",
        "sterilisationStatus": True,
        "chipNumber": "985112004321987",
        "internalNotes": "Needs a quiet home",
        "reasonOnboarded": "Owner surrender",
        "latestVaccinationDate": "2024-03-01",
        "currentLocation": "Cattery B",
        "status": "available",
    }
