"""Pytest configuration and fixtures."""

import pytest
import pytest_asyncio
import tempfile
from pathlib import Path

from gym_tracker.db import RecordStore
from gym_tracker.models import Series
from gym_tracker.services import Services


@pytest.fixture
def temp_db_path():
    """Create a temporary database path."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir) / "test.db"


@pytest_asyncio.fixture
async def store(temp_db_path):
    """An initialized record store backed by a temporary database."""
    record_store = RecordStore(temp_db_path)
    await record_store.init()
    return record_store


@pytest.fixture
def services(store):
    """All services wired to the temporary store."""
    return Services.from_store(store)


@pytest_asyncio.fixture
async def sample_data(services):
    """Two customers, two machines and three workouts."""
    alex = await services.customers.create(name="Alex", email="alex@example.com")
    sam = await services.customers.create(name="Sam", phone="555-0100")
    treadmill = await services.machines.create(name="Treadmill", type="Cardio")
    press = await services.machines.create(name="Leg Press", type="Strength")

    workouts = [
        await services.workouts.create(
            customer_id=alex.id,
            machine_id=treadmill.id,
            date="2024-01-01",
            series=[Series(sets=3, reps=10, weight=0)],
        ),
        await services.workouts.create(
            customer_id=alex.id,
            machine_id=press.id,
            date="2024-01-02",
            series=[Series(sets=3, reps=12, weight=80), Series(sets=2, reps=8, weight=100)],
            notes="Felt strong",
        ),
        await services.workouts.create(
            customer_id=sam.id,
            machine_id=press.id,
            date="2024-01-02",
            series=[Series(sets=4, reps=8, weight=60)],
        ),
    ]
    return {
        "customers": {"alex": alex, "sam": sam},
        "machines": {"treadmill": treadmill, "press": press},
        "workouts": workouts,
    }
