"""Machine service."""

import logging
from datetime import datetime

from ..models.machine import Machine, MachineType
from ..utils.dates import utcnow
from .base import EntityService, new_id, require_name

logger = logging.getLogger(__name__)


def _type_tag(value: str | MachineType) -> str:
    if isinstance(value, MachineType):
        return value.value
    return value


class MachineService(EntityService):
    """CRUD operations for machines."""

    collection = "machines"
    entity = "machine"
    updatable_fields = ("name", "type")

    async def get_all(self) -> list[Machine]:
        records = await self.store.get_all(self.collection)
        return [Machine.from_dict(r) for r in records]

    async def get_by_id(self, machine_id: str) -> Machine | None:
        record = await self.store.get_by_id(self.collection, machine_id)
        if record is None:
            return None
        return Machine.from_dict(record)

    async def create(
        self,
        name: str,
        type: str,
        id: str | None = None,
        created_at: datetime | None = None,
    ) -> Machine:
        """Create a machine, or update it if ``id`` is already taken."""
        if await self._exists(id):
            return await self.update(id, name=name, type=type)

        require_name(name, self.entity)
        machine = Machine(
            id=id or new_id(),
            name=name,
            type=_type_tag(type),
            created_at=created_at or utcnow(),
        )
        await self.store.add(self.collection, machine.to_dict())
        logger.debug("Created machine %s", machine.id)
        return machine

    async def update(self, machine_id: str, **fields) -> Machine:
        """Update a machine's name and/or type.

        Raises:
            NotFound: If the machine does not exist
            ValidationError: On fields other than name/type or an empty name
        """
        self._check_fields(fields)
        if "name" in fields:
            require_name(fields["name"], self.entity)

        machine = Machine.from_dict(await self._get_record(machine_id))
        if "name" in fields:
            machine.name = fields["name"]
        if "type" in fields:
            machine.type = _type_tag(fields["type"])

        await self.store.update(self.collection, machine.to_dict())
        return machine

    async def delete(self, machine_id: str) -> None:
        """Delete a machine and every workout recorded on it."""
        await self._delete_workouts("machineId", machine_id)
        await self.store.delete(self.collection, machine_id)
        logger.debug("Deleted machine %s", machine_id)
