"""Tests for the record store."""

import aiosqlite
import pytest

from gym_tracker.db import DB_VERSION, RecordStore
from gym_tracker.errors import (
    DuplicateKey,
    NotFound,
    StorageUnavailable,
    UnknownCollection,
    UnknownIndex,
)


class TestRecordStore:
    """Tests for RecordStore CRUD operations."""

    @pytest.mark.asyncio
    async def test_add_and_get(self, store):
        """Test a stored record reads back unchanged."""
        record = {"id": "c1", "name": "Alex", "deactivated": False}
        await store.add("customers", record)

        assert await store.get_by_id("customers", "c1") == record

    @pytest.mark.asyncio
    async def test_get_missing_returns_none(self, store):
        assert await store.get_by_id("customers", "nope") is None

    @pytest.mark.asyncio
    async def test_add_duplicate_raises(self, store):
        """Test inserting an existing id fails."""
        await store.add("machines", {"id": "m1", "name": "Rower"})

        with pytest.raises(DuplicateKey):
            await store.add("machines", {"id": "m1", "name": "Other"})

        assert (await store.get_by_id("machines", "m1"))["name"] == "Rower"

    @pytest.mark.asyncio
    async def test_same_id_in_different_collections(self, store):
        """Test collections are keyed independently."""
        await store.add("customers", {"id": "x"})
        await store.add("machines", {"id": "x"})
        assert await store.count("customers") == 1
        assert await store.count("machines") == 1

    @pytest.mark.asyncio
    async def test_get_all(self, store):
        for i in range(3):
            await store.add("customers", {"id": f"c{i}", "name": f"Customer {i}"})

        records = await store.get_all("customers")
        assert sorted(r["id"] for r in records) == ["c0", "c1", "c2"]

    @pytest.mark.asyncio
    async def test_update_replaces_record(self, store):
        """Test update is a full overwrite, not a merge."""
        await store.add("customers", {"id": "c1", "name": "Alex", "email": "a@x.com"})
        await store.update("customers", {"id": "c1", "name": "Alexandra"})

        assert await store.get_by_id("customers", "c1") == {"id": "c1", "name": "Alexandra"}

    @pytest.mark.asyncio
    async def test_update_missing_raises(self, store):
        with pytest.raises(NotFound):
            await store.update("customers", {"id": "ghost", "name": "Nobody"})
        assert await store.get_by_id("customers", "ghost") is None

    @pytest.mark.asyncio
    async def test_delete(self, store):
        await store.add("customers", {"id": "c1", "name": "Alex"})
        await store.delete("customers", "c1")
        assert await store.get_by_id("customers", "c1") is None

    @pytest.mark.asyncio
    async def test_delete_missing_is_noop(self, store):
        await store.delete("customers", "ghost")

    @pytest.mark.asyncio
    async def test_find_by_index(self, store):
        """Test secondary index lookups on workouts."""
        await store.add("workouts", {"id": "w1", "customerId": "c1", "machineId": "m1", "date": "2024-01-01"})
        await store.add("workouts", {"id": "w2", "customerId": "c1", "machineId": "m2", "date": "2024-01-02"})
        await store.add("workouts", {"id": "w3", "customerId": "c2", "machineId": "m1", "date": "2024-01-02"})

        by_customer = await store.find_by_index("workouts", "customerId", "c1")
        by_machine = await store.find_by_index("workouts", "machineId", "m1")
        by_date = await store.find_by_index("workouts", "date", "2024-01-02")

        assert sorted(r["id"] for r in by_customer) == ["w1", "w2"]
        assert sorted(r["id"] for r in by_machine) == ["w1", "w3"]
        assert sorted(r["id"] for r in by_date) == ["w2", "w3"]
        assert await store.find_by_index("workouts", "customerId", "c9") == []

    @pytest.mark.asyncio
    async def test_find_by_customer_name(self, store):
        await store.add("customers", {"id": "c1", "name": "Alex"})
        result = await store.find_by_index("customers", "name", "Alex")
        assert [r["id"] for r in result] == ["c1"]

    @pytest.mark.asyncio
    async def test_unknown_index_raises(self, store):
        with pytest.raises(UnknownIndex):
            await store.find_by_index("workouts", "notes", "x")

    @pytest.mark.asyncio
    async def test_unknown_collection_raises(self, store):
        with pytest.raises(UnknownCollection):
            await store.get_all("trainers")

    @pytest.mark.asyncio
    async def test_record_without_id_rejected(self, store):
        with pytest.raises(ValueError):
            await store.add("customers", {"name": "Anonymous"})


class TestSchemaSetup:
    """Tests for store initialization."""

    @pytest.mark.asyncio
    async def test_init_is_idempotent(self, temp_db_path):
        """Test init can run repeatedly without losing data."""
        store = RecordStore(temp_db_path)
        await store.init()
        await store.add("customers", {"id": "c1", "name": "Alex"})

        assert await store.init() == 0
        assert await store.get_by_id("customers", "c1") is not None

    @pytest.mark.asyncio
    async def test_schema_version_and_indexes(self, store):
        async with aiosqlite.connect(store.db_path) as db:
            cursor = await db.execute("PRAGMA user_version")
            assert (await cursor.fetchone())[0] == DB_VERSION

            cursor = await db.execute(
                "SELECT name FROM sqlite_master WHERE type = 'index' AND name LIKE 'idx_%'"
            )
            names = {row[0] for row in await cursor.fetchall()}

        assert {
            "idx_customers_name",
            "idx_workouts_customerid",
            "idx_workouts_machineid",
            "idx_workouts_date",
        } <= names

    @pytest.mark.asyncio
    async def test_unusable_path_raises_storage_unavailable(self, temp_db_path):
        """Test a directory in place of the database file is fatal."""
        temp_db_path.mkdir()
        store = RecordStore(temp_db_path)

        with pytest.raises(StorageUnavailable):
            await store.init()


class TestUnreadableRecords:
    """Tests for rows whose stored text is not a JSON object."""

    async def _insert_raw(self, store, record_id, data):
        # The name index would reject text SQLite cannot parse as JSON
        async with aiosqlite.connect(store.db_path) as db:
            await db.execute("DROP INDEX idx_customers_name")
            await db.execute(
                "INSERT INTO customers (id, data) VALUES (?, ?)", (record_id, data)
            )
            await db.commit()

    @pytest.mark.asyncio
    async def test_get_all_skips_unreadable_rows(self, store):
        await store.add("customers", {"id": "c1", "name": "Alex"})
        await self._insert_raw(store, "broken", "{not json")

        assert await store.get_all("customers") == [{"id": "c1", "name": "Alex"}]

    @pytest.mark.asyncio
    async def test_get_by_id_treats_unreadable_row_as_missing(self, store):
        await self._insert_raw(store, "broken", "[1, 2]")

        assert await store.get_by_id("customers", "broken") is None

    @pytest.mark.asyncio
    async def test_exists(self, temp_db_path):
        store = RecordStore(temp_db_path)
        assert not store.exists()

        await store.init()
        assert store.exists()
