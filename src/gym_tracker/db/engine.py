"""Database engine setup and initialization."""

import logging
import os
from pathlib import Path

import aiosqlite

from ..errors import StorageUnavailable
from .migrations import migrate_workouts

logger = logging.getLogger(__name__)

DB_FILENAME = "gym_tracker.db"

# 1: flat sets/reps/weight workouts, 2: workouts carry a series list
DB_VERSION = 2

# Collection name -> fields with a secondary index
INDEXES: dict[str, tuple[str, ...]] = {
    "customers": ("name",),
    "machines": ("name", "type"),
    "workouts": ("customerId", "machineId", "date"),
}

COLLECTIONS = tuple(INDEXES)


def default_data_dir() -> Path:
    """Resolve the data directory, honouring GYM_TRACKER_DATA_DIR."""
    raw = os.getenv("GYM_TRACKER_DATA_DIR", "~/.local/share/gym-tracker")
    return Path(os.path.expandvars(raw)).expanduser().resolve()


def get_db_path(data_dir: Path | None = None) -> Path:
    """Get the database file path."""
    if data_dir is None:
        data_dir = default_data_dir()
    return Path(data_dir) / DB_FILENAME


async def get_schema_version(db: aiosqlite.Connection) -> int:
    cursor = await db.execute("PRAGMA user_version")
    row = await cursor.fetchone()
    return row[0] if row else 0


async def _run_migrations(db: aiosqlite.Connection) -> int:
    """Bring an existing database up to DB_VERSION.

    Returns:
        Number of records rewritten
    """
    version = await get_schema_version(db)
    if version > DB_VERSION:
        logger.warning(
            "Database schema version %d is newer than supported version %d",
            version,
            DB_VERSION,
        )
        return 0
    if version == DB_VERSION:
        return 0

    migrated = 0
    if version < 2:
        migrated += await migrate_workouts(db)

    # PRAGMA does not take bound parameters
    await db.execute(f"PRAGMA user_version = {DB_VERSION:d}")
    await db.commit()
    logger.info("Database schema upgraded from version %d to %d", version, DB_VERSION)
    return migrated


async def init_db(db_path: Path | None = None) -> int:
    """Initialize the database schema and upgrade old records.

    Safe to call on every start: tables and indexes are only created
    when missing, and the batch migration only runs on a version bump.

    Returns:
        Number of workout records migrated to the current shape

    Raises:
        StorageUnavailable: If the database cannot be created or opened
    """
    if db_path is None:
        db_path = get_db_path()

    try:
        db_path.parent.mkdir(parents=True, exist_ok=True)
        async with aiosqlite.connect(db_path) as db:
            for collection in COLLECTIONS:
                await db.execute(f"""
                    CREATE TABLE IF NOT EXISTS {collection} (
                        id TEXT PRIMARY KEY,
                        data TEXT NOT NULL
                    )
                """)

            for collection, fields in INDEXES.items():
                for field_name in fields:
                    await db.execute(f"""
                        CREATE INDEX IF NOT EXISTS idx_{collection}_{field_name.lower()}
                        ON {collection}(json_extract(data, '$.{field_name}'))
                    """)

            await db.commit()

            return await _run_migrations(db)
    except (aiosqlite.Error, OSError) as e:
        raise StorageUnavailable(f"Cannot open database at {db_path}: {e}") from e
