"""Pytest configuration and fixtures."""
import asyncio
import os
import tempfile
from collections import Counter
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

# Set test environment before importing app
os.environ['DATABASE_PATH'] = ':memory:'
os.environ['CORS_ORIGINS'] = 'http://localhost'
os.environ['YANDEX_DISK_TOKEN'] = 'test_token'

from fieldops.main import app, start_services, stop_services
from fieldops.backend.sqlite import SQLiteBackend
from fieldops.database import init_database
from fieldops.exceptions import BackendError


class RecordingBackend(SQLiteBackend):
    """SQLite backend that counts reads and can be told to fail them."""

    def __init__(self, database_path):
        super().__init__(database_path)
        self.selects = Counter()
        self.failing = set()

    async def select(self, query):
        self.selects[query.collection] += 1
        if query.collection in self.failing:
            raise BackendError(f"{query.collection} is unavailable", 'unavailable')
        return await super().select(query)


class GatedBackend(SQLiteBackend):
    """SQLite backend whose next read is held until ``gate`` is set."""

    def __init__(self, database_path):
        super().__init__(database_path)
        self.gate = asyncio.Event()
        self.hold_next = False

    async def select(self, query):
        if self.hold_next:
            self.hold_next = False
            rows = await super().select(query)
            await self.gate.wait()
            return rows
        return await super().select(query)


@pytest_asyncio.fixture
async def db_path():
    """Initialize test database."""
    # Create a temp file for SQLite
    fd, path = tempfile.mkstemp(suffix='.db')
    os.close(fd)

    await init_database(path)
    yield path

    # Cleanup
    try:
        os.unlink(path)
    except OSError:
        pass


@pytest_asyncio.fixture
async def backend(db_path) -> RecordingBackend:
    return RecordingBackend(db_path)


@pytest_asyncio.fixture
async def gated_backend(db_path) -> GatedBackend:
    return GatedBackend(db_path)


@pytest_asyncio.fixture
async def client(db_path) -> AsyncGenerator[AsyncClient, None]:
    """Create async test client with live collection mirrors."""
    await start_services(app, db_path)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    await stop_services(app)


@pytest_asyncio.fixture
async def regions(client):
    """Two regions created directly in the backend."""
    backend = app.state.backend
    north = await backend.insert('regions', {'name': 'North'})
    south = await backend.insert('regions', {'name': 'South'})
    return {'north': north['id'], 'south': south['id']}


@pytest_asyncio.fixture
async def admin_headers(client):
    admin = await app.state.backend.insert('users', {
        'name': 'Admin', 'email': 'admin@example.com', 'role': 'admin',
    })
    return {'X-User-Id': admin['id']}


@pytest_asyncio.fixture
async def engineer_headers(client, regions):
    engineer = await app.state.backend.insert('users', {
        'name': 'Nino Beridze', 'email': 'nino@example.com', 'role': 'engineer',
        'region_id': regions['north'], 'assigned_regions': [regions['north']],
    })
    return {'X-User-Id': engineer['id']}


@pytest.fixture
def sample_worker_data():
    """Sample worker data for tests."""
    return {
        "fullName": "Giorgi Kapanadze",
        "personalId": "01001012345",
        "dailySalary": 80.0,
    }


@pytest.fixture
def sample_equipment_data():
    """Sample equipment data for tests."""
    return {
        "type": "Excavator",
        "licensePlate": "AA-123-BB",
        "operatorName": "Levan Gelashvili",
        "operatorId": "01001054321",
        "dailySalary": 120.0,
        "fuelType": "diesel",
    }


@pytest.fixture
def sample_incident_data():
    """Sample incident data for tests."""
    return {
        "date": "2024-06-15",
        "type": "Damage",
        "description": "Pipe damaged during excavation",
        "latitude": 41.7151,
        "longitude": 44.8271,
    }
