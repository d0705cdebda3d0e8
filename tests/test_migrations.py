"""Tests for workout schema migration."""

import json
import logging
from datetime import date

import aiosqlite
import pytest

from gym_tracker.db import (
    RecordStore,
    decode_workout,
    is_legacy,
    migrate_record,
    migrate_workouts,
    upgrade,
)
from gym_tracker.models import LegacyWorkout, Series, Workout


def legacy_record(record_id="w1", sets=3, reps=10, weight=40):
    return {
        "id": record_id,
        "customerId": "c1",
        "machineId": "m1",
        "date": "2024-01-01T00:00:00.000Z",
        "sets": sets,
        "reps": reps,
        "weight": weight,
        "notes": "old format",
        "createdAt": "2024-01-01T08:00:00.000Z",
    }


def current_record(record_id="w2"):
    return {
        "id": record_id,
        "customerId": "c1",
        "machineId": "m1",
        "date": "2024-02-01",
        "series": [{"sets": 2, "reps": 8, "weight": 50}],
        "createdAt": "2024-02-01T08:00:00+00:00",
    }


class TestDecode:
    """Tests for shape detection and conversion."""

    def test_is_legacy(self):
        assert is_legacy(legacy_record())
        assert not is_legacy(current_record())

    def test_empty_series_with_sets_is_legacy(self):
        record = legacy_record()
        record["series"] = []
        assert is_legacy(record)

    def test_non_numeric_sets_is_not_legacy(self):
        record = legacy_record()
        record["sets"] = "3"
        assert not is_legacy(record)

    def test_decode_returns_tagged_shape(self):
        assert isinstance(decode_workout(legacy_record()), LegacyWorkout)
        assert isinstance(decode_workout(current_record()), Workout)

    def test_upgrade(self):
        """Test the flat fields become a single series entry."""
        workout = upgrade(LegacyWorkout.from_dict(legacy_record()))

        assert workout.series == [Series(sets=3, reps=10, weight=40)]
        assert workout.id == "w1"
        assert workout.date == date(2024, 1, 1)
        assert workout.notes == "old format"

    def test_migrate_record_drops_legacy_fields(self):
        workout, changed = migrate_record(legacy_record())
        data = workout.to_dict()

        assert changed
        assert data["series"] == [{"sets": 3, "reps": 10, "weight": 40.0}]
        for key in ("sets", "reps", "weight"):
            assert key not in data

    def test_migrate_is_idempotent(self):
        """Test migrating an already migrated record changes nothing."""
        first, _ = migrate_record(legacy_record())
        second, changed = migrate_record(first.to_dict())

        assert not changed
        assert second == first

    def test_leftover_legacy_fields_are_stripped(self):
        """Test a record with both shapes keeps its series and drops the rest."""
        record = current_record()
        record["sets"] = 9
        workout, changed = migrate_record(record)

        assert changed
        assert workout.series == [Series(sets=2, reps=8, weight=50)]

    def test_neither_shape_defaults_to_empty_series(self):
        record = current_record()
        del record["series"]
        workout, changed = migrate_record(record)

        assert workout.series == []
        assert not changed

    def test_unrecordable_legacy_record_is_flagged(self, caplog):
        """Test a legacy record with zero sets upgrades but is logged."""
        with caplog.at_level(logging.WARNING, logger="gym_tracker.db.migrations"):
            workout, changed = migrate_record(legacy_record(sets=0))

        assert changed
        assert workout.series == [Series(sets=0, reps=10, weight=40)]
        assert "no recordable series" in caplog.text


class TestBatchMigration:
    """Tests for the migration pass run at initialization."""

    @pytest.mark.asyncio
    async def test_version_bump_rewrites_legacy_records(self, temp_db_path):
        store = RecordStore(temp_db_path)
        await store.init()
        await store.add("workouts", legacy_record("w1"))
        await store.add("workouts", legacy_record("w3", sets=5, reps=5, weight=100))
        await store.add("workouts", current_record("w2"))

        # Pretend the database was written by the flat-field version
        async with aiosqlite.connect(temp_db_path) as db:
            await db.execute("PRAGMA user_version = 1")
            await db.commit()

        migrated = await store.init()

        assert migrated == 2
        raw = await store.get_by_id("workouts", "w3")
        assert raw["series"] == [{"sets": 5, "reps": 5, "weight": 100.0}]
        assert "sets" not in raw
        assert await store.get_by_id("workouts", "w2") == current_record("w2")

    @pytest.mark.asyncio
    async def test_no_batch_pass_without_version_bump(self, store):
        """Test stray legacy records are left for the read path."""
        await store.add("workouts", legacy_record())

        assert await store.init() == 0
        assert "sets" in await store.get_by_id("workouts", "w1")

    @pytest.mark.asyncio
    async def test_unreadable_rows_are_skipped(self, temp_db_path):
        async with aiosqlite.connect(temp_db_path) as db:
            await db.execute("CREATE TABLE workouts (id TEXT PRIMARY KEY, data TEXT NOT NULL)")
            await db.execute(
                "INSERT INTO workouts (id, data) VALUES (?, ?)", ("bad", "{not json")
            )
            await db.execute(
                "INSERT INTO workouts (id, data) VALUES (?, ?)",
                ("w1", json.dumps(legacy_record("w1"))),
            )
            await db.commit()

            assert await migrate_workouts(db) == 1

            cursor = await db.execute("SELECT data FROM workouts WHERE id = 'bad'")
            assert (await cursor.fetchone())[0] == "{not json"


class TestReadPathMigration:
    """Tests for migration on read through the workout service."""

    @pytest.mark.asyncio
    async def test_get_by_id_heals_legacy_record(self, services):
        await services.store.add("workouts", legacy_record())

        workout = await services.workouts.get_by_id("w1")
        again = await services.workouts.get_by_id("w1")

        assert workout.series == [Series(sets=3, reps=10, weight=40)]
        assert again == workout
        raw = await services.store.get_by_id("workouts", "w1")
        assert "sets" not in raw and "reps" not in raw and "weight" not in raw

    @pytest.mark.asyncio
    async def test_get_all_heals_legacy_records(self, services):
        await services.store.add("workouts", legacy_record("w1"))
        await services.store.add("workouts", current_record("w2"))

        workouts = await services.workouts.get_all()

        assert all(w.series for w in workouts)
        for raw in await services.store.get_all("workouts"):
            assert "sets" not in raw

    @pytest.mark.asyncio
    async def test_get_by_customer_heals_legacy_records(self, services):
        customer = await services.customers.create(name="Alex", id="c1")
        await services.machines.create(name="Rower", type="Cardio", id="m1")
        await services.store.add("workouts", legacy_record())

        history = await services.workouts.get_by_customer(customer.id)

        assert len(history) == 1
        assert history[0].series == [Series(sets=3, reps=10, weight=40)]
        assert "sets" not in await services.store.get_by_id("workouts", "w1")
