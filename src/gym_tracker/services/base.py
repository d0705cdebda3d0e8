"""Shared plumbing for the entity services."""

import logging
from uuid import uuid4

import aiosqlite

from ..db.store import RecordStore
from ..errors import CascadeDeleteError, NotFound, StoreError, ValidationError

logger = logging.getLogger(__name__)


def new_id() -> str:
    """Generate a fresh record id."""
    return str(uuid4())


def require_name(name: str | None, entity: str) -> None:
    """Reject empty or blank display names."""
    if not isinstance(name, str) or not name.strip():
        raise ValidationError(f"{entity.capitalize()} name must not be empty")


class EntityService:
    """Base class for services that wrap one collection of the record store.

    Services hold no state of their own: every read goes to the store.
    """

    collection: str = ""
    entity: str = ""
    updatable_fields: tuple[str, ...] = ()

    def __init__(self, store: RecordStore):
        self.store = store

    async def _get_record(self, record_id: str) -> dict:
        record = await self.store.get_by_id(self.collection, record_id)
        if record is None:
            raise NotFound(self.collection, record_id)
        return record

    async def _exists(self, record_id: str | None) -> bool:
        if not record_id:
            return False
        return await self.store.get_by_id(self.collection, record_id) is not None

    def _check_fields(self, fields: dict) -> None:
        unknown = sorted(set(fields) - set(self.updatable_fields))
        if unknown:
            raise ValidationError(
                f"Cannot update {self.entity} field(s): {', '.join(unknown)}"
            )

    async def _delete_workouts(self, index_name: str, value: str) -> int:
        """Delete every workout whose ``index_name`` equals ``value``.

        Failures are logged and the remaining workouts are still deleted.

        Returns:
            Number of workouts deleted

        Raises:
            CascadeDeleteError: If any workout could not be deleted
        """
        records = await self.store.find_by_index("workouts", index_name, value)
        failed: list[str] = []
        for record in records:
            try:
                await self.store.delete("workouts", record["id"])
            except (StoreError, aiosqlite.Error) as e:
                logger.error(
                    "Failed to delete workout %s of %s %s: %s",
                    record["id"],
                    self.entity,
                    value,
                    e,
                )
                failed.append(record["id"])

        if failed:
            raise CascadeDeleteError(self.entity, value, failed)

        if records:
            logger.debug(
                "Deleted %d workout(s) of %s %s", len(records), self.entity, value
            )
        return len(records)
