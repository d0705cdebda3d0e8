"""Database layer for gym-tracker."""

from .engine import COLLECTIONS, DB_VERSION, INDEXES, default_data_dir, get_db_path, init_db
from .migrations import decode_workout, is_legacy, migrate_record, migrate_workouts, upgrade
from .store import RecordStore

__all__ = [
    "COLLECTIONS",
    "DB_VERSION",
    "decode_workout",
    "default_data_dir",
    "get_db_path",
    "INDEXES",
    "init_db",
    "is_legacy",
    "migrate_record",
    "migrate_workouts",
    "RecordStore",
    "upgrade",
]
