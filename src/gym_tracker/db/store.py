"""Keyed record storage over the customers, machines and workouts collections."""

import json
import logging
from pathlib import Path

import aiosqlite

from ..errors import DuplicateKey, NotFound, UnknownCollection, UnknownIndex
from .engine import COLLECTIONS, INDEXES, get_db_path, init_db

logger = logging.getLogger(__name__)


def _decode(collection: str, data: str) -> dict | None:
    """Parse a stored record, or None if the stored text is not a JSON object."""
    try:
        record = json.loads(data)
    except ValueError as e:
        logger.warning("Skipping unreadable %s record: %s", collection, e)
        return None
    if not isinstance(record, dict):
        logger.warning("Skipping non-object %s record", collection)
        return None
    return record


def _decode_rows(collection: str, rows) -> list[dict]:
    records = (_decode(collection, row[0]) for row in rows)
    return [r for r in records if r is not None]


class RecordStore:
    """Generic keyed-collection store.

    Records are JSON objects keyed by their ``id`` field. Every call opens
    its own connection and commits before returning, so each operation is
    one transaction. The store does not validate record contents.
    """

    def __init__(self, db_path: Path | None = None):
        self.db_path = db_path or get_db_path()

    async def init(self) -> int:
        """Create the schema if needed and run pending migrations.

        Returns:
            Number of workout records migrated
        """
        return await init_db(self.db_path)

    def exists(self) -> bool:
        """Whether the database file has been created."""
        return self.db_path.exists()

    async def add(self, collection: str, record: dict) -> None:
        """Insert a new record.

        Raises:
            DuplicateKey: If a record with the same id exists
        """
        table = self._table(collection)
        record_id = self._record_id(record)
        async with aiosqlite.connect(self.db_path) as db:
            try:
                await db.execute(
                    f"INSERT INTO {table} (id, data) VALUES (?, ?)",
                    (record_id, json.dumps(record)),
                )
            except aiosqlite.IntegrityError as e:
                raise DuplicateKey(collection, record_id) from e
            await db.commit()
        logger.debug("Added %s/%s", collection, record_id)

    async def get_all(self, collection: str) -> list[dict]:
        """Get every record in a collection, in no particular order."""
        table = self._table(collection)
        async with aiosqlite.connect(self.db_path) as db:
            cursor = await db.execute(f"SELECT data FROM {table}")
            rows = await cursor.fetchall()
        return _decode_rows(collection, rows)

    async def get_by_id(self, collection: str, record_id: str) -> dict | None:
        """Get a record by id, or None if it does not exist."""
        table = self._table(collection)
        async with aiosqlite.connect(self.db_path) as db:
            cursor = await db.execute(
                f"SELECT data FROM {table} WHERE id = ?", (record_id,)
            )
            row = await cursor.fetchone()
        if row is None:
            return None
        return _decode(collection, row[0])

    async def update(self, collection: str, record: dict) -> None:
        """Replace a record by id.

        This is a raw overwrite: callers merge partial changes first.

        Raises:
            NotFound: If no record has this id
        """
        table = self._table(collection)
        record_id = self._record_id(record)
        async with aiosqlite.connect(self.db_path) as db:
            cursor = await db.execute(
                f"UPDATE {table} SET data = ? WHERE id = ?",
                (json.dumps(record), record_id),
            )
            if cursor.rowcount == 0:
                raise NotFound(collection, record_id)
            await db.commit()
        logger.debug("Updated %s/%s", collection, record_id)

    async def delete(self, collection: str, record_id: str) -> None:
        """Delete a record. Deleting a missing id is a no-op."""
        table = self._table(collection)
        async with aiosqlite.connect(self.db_path) as db:
            await db.execute(f"DELETE FROM {table} WHERE id = ?", (record_id,))
            await db.commit()
        logger.debug("Deleted %s/%s", collection, record_id)

    async def find_by_index(
        self, collection: str, index_name: str, value: str
    ) -> list[dict]:
        """Get all records whose indexed field equals ``value``.

        Raises:
            UnknownIndex: If the collection declares no such index
        """
        table = self._table(collection)
        if index_name not in INDEXES[table]:
            raise UnknownIndex(f"Collection {collection} has no index '{index_name}'")

        # Expression must match the index definition to use it
        async with aiosqlite.connect(self.db_path) as db:
            cursor = await db.execute(
                f"SELECT data FROM {table} WHERE json_extract(data, '$.{index_name}') = ?",
                (value,),
            )
            rows = await cursor.fetchall()
        return _decode_rows(collection, rows)

    async def count(self, collection: str) -> int:
        """Count the records in a collection."""
        table = self._table(collection)
        async with aiosqlite.connect(self.db_path) as db:
            cursor = await db.execute(f"SELECT COUNT(*) FROM {table}")
            row = await cursor.fetchone()
            return row[0]

    def _table(self, collection: str) -> str:
        if collection not in COLLECTIONS:
            raise UnknownCollection(f"Unknown collection '{collection}'")
        return collection

    def _record_id(self, record: dict) -> str:
        record_id = record.get("id")
        if not record_id:
            raise ValueError("Record must have an id")
        return record_id
