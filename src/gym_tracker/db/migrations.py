"""Workout schema migration.

Workouts written before multi-series support carry flat ``sets``,
``reps`` and ``weight`` fields. They are upgraded to a one-entry
``series`` list in two places: a batch pass when the database schema
version is bumped, and again on every read so that a store left
half-migrated (for example after a crash mid-batch) heals itself.
"""

import json
import logging

import aiosqlite

from ..models.workout import LEGACY_FIELDS, LegacyWorkout, Series, Workout, is_number

logger = logging.getLogger(__name__)


def is_legacy(raw: dict) -> bool:
    """A record is legacy if it has no series but a numeric ``sets`` field."""
    return not raw.get("series") and is_number(raw.get("sets"))


def _decode_series(raw: dict) -> list[Series]:
    items = raw.get("series")
    if not isinstance(items, list):
        return []
    try:
        return [Series.from_dict(item) for item in items]
    except (KeyError, TypeError, ValueError):
        logger.warning("Workout %s has an unreadable series list", raw.get("id"))
        return []


def decode_workout(raw: dict) -> Workout | LegacyWorkout:
    """Decode a stored workout record into its current or legacy form."""
    if is_legacy(raw):
        return LegacyWorkout.from_dict(raw)

    current = {k: v for k, v in raw.items() if k not in ("series", *LEGACY_FIELDS)}
    workout = Workout.from_dict(current)
    workout.series = _decode_series(raw)
    return workout


def upgrade(legacy: LegacyWorkout) -> Workout:
    """Convert a legacy workout into the current shape."""
    return Workout(
        id=legacy.id,
        customer_id=legacy.customer_id,
        machine_id=legacy.machine_id,
        date=legacy.date,
        series=[Series(sets=legacy.sets, reps=legacy.reps, weight=legacy.weight)],
        notes=legacy.notes,
        created_at=legacy.created_at,
    )


def migrate_record(raw: dict) -> tuple[Workout, bool]:
    """Decode a stored record, upgrading it if needed.

    Returns:
        The workout in current shape, and whether the stored record
        must be rewritten
    """
    decoded = decode_workout(raw)
    if isinstance(decoded, LegacyWorkout):
        workout = upgrade(decoded)
        if not any(s.is_valid for s in workout.series):
            # Kept as stored; re-importing it from a backup will skip it
            logger.warning(
                "Legacy workout %s has no recordable series (sets=%s, reps=%s)",
                workout.id,
                decoded.sets,
                decoded.reps,
            )
        return workout, True
    stale = any(key in raw for key in LEGACY_FIELDS)
    return decoded, stale


async def migrate_workouts(db: aiosqlite.Connection) -> int:
    """Rewrite every legacy workout in place, one record at a time.

    Returns:
        Number of records rewritten
    """
    cursor = await db.execute("SELECT id, data FROM workouts")
    rows = await cursor.fetchall()

    migrated = 0
    for record_id, data in rows:
        try:
            raw = json.loads(data)
            if not isinstance(raw, dict) or not is_legacy(raw):
                continue
            workout, _ = migrate_record(raw)
        except (KeyError, TypeError, ValueError) as e:
            logger.warning("Skipping unreadable workout %s: %s", record_id, e)
            continue

        await db.execute(
            "UPDATE workouts SET data = ? WHERE id = ?",
            (json.dumps(workout.to_dict()), record_id),
        )
        await db.commit()
        migrated += 1

    if migrated:
        logger.info("Migrated %d legacy workout(s) to series format", migrated)
    return migrated
