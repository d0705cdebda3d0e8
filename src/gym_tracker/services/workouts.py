"""Workout service."""

import logging
from datetime import date, datetime

from ..db.migrations import migrate_record
from ..db.store import RecordStore
from ..errors import ValidationError
from ..models.workout import Series, Workout, WorkoutWithDetails, clean_series
from ..utils.dates import parse_date, utcnow
from .base import EntityService, new_id
from .customers import CustomerService
from .machines import MachineService

logger = logging.getLogger(__name__)


def coerce_series(series: list[Series | dict]) -> list[Series]:
    """Accept Series objects or plain dicts and keep only valid blocks.

    Raises:
        ValidationError: If no valid block remains
    """
    try:
        items = [s if isinstance(s, Series) else Series.from_dict(s) for s in series or []]
    except (KeyError, TypeError, ValueError) as e:
        raise ValidationError(f"Invalid series entry: {e}") from e

    cleaned = clean_series(items)
    if not cleaned:
        raise ValidationError(
            "A workout needs at least one series with positive sets and reps"
        )
    return cleaned


class WorkoutService(EntityService):
    """CRUD operations for workouts.

    Every read path upgrades legacy-shaped records and writes them back,
    so callers always see the current series shape.
    """

    collection = "workouts"
    entity = "workout"
    updatable_fields = ("customer_id", "machine_id", "date", "series", "notes")

    def __init__(
        self,
        store: RecordStore,
        customers: CustomerService,
        machines: MachineService,
    ):
        super().__init__(store)
        self.customers = customers
        self.machines = machines

    async def _load(self, record: dict) -> Workout:
        """Decode a stored record, migrating it in place if needed."""
        workout, changed = migrate_record(record)
        if changed:
            await self.store.update(self.collection, workout.to_dict())
            logger.info("Migrated legacy workout %s on read", workout.id)
        return workout

    async def get_all(self) -> list[Workout]:
        records = await self.store.get_all(self.collection)
        return [await self._load(r) for r in records]

    async def get_by_id(self, workout_id: str) -> Workout | None:
        record = await self.store.get_by_id(self.collection, workout_id)
        if record is None:
            return None
        return await self._load(record)

    async def get_by_customer(
        self, customer_id: str, machine_id: str | None = None
    ) -> list[WorkoutWithDetails]:
        """Get a customer's workouts joined with customer and machine names.

        Workouts whose customer or machine no longer exists are left out.

        Args:
            customer_id: Customer to list workouts for
            machine_id: Optionally narrow to one machine

        Returns:
            Workouts sorted by date (newest first), then machine name
        """
        records = await self.store.find_by_index(
            self.collection, "customerId", customer_id
        )
        if machine_id:
            records = [r for r in records if r.get("machineId") == machine_id]

        customer = await self.customers.get_by_id(customer_id)
        if customer is None:
            return []

        machine_names: dict[str, str | None] = {}
        details = []
        for record in records:
            workout = await self._load(record)

            if workout.machine_id not in machine_names:
                machine = await self.machines.get_by_id(workout.machine_id)
                machine_names[workout.machine_id] = machine.name if machine else None
            machine_name = machine_names[workout.machine_id]
            if machine_name is None:
                continue

            details.append(
                WorkoutWithDetails.from_workout(workout, customer.name, machine_name)
            )

        details.sort(key=lambda w: w.machine_name.casefold())
        details.sort(key=lambda w: w.date, reverse=True)
        return details

    async def create(
        self,
        customer_id: str,
        machine_id: str,
        series: list[Series | dict],
        date: date | str | None = None,
        notes: str | None = None,
        id: str | None = None,
        created_at: datetime | None = None,
    ) -> Workout:
        """Record a workout.

        Series blocks with non-positive sets or reps are dropped; if none
        remain the workout is rejected. If ``id`` is already taken the
        existing workout is updated instead.

        Raises:
            ValidationError: If no valid series block is given
        """
        if await self._exists(id):
            return await self.update(
                id,
                customer_id=customer_id,
                machine_id=machine_id,
                series=series,
                date=date if date is not None else date_today(),
                notes=notes,
            )

        workout = Workout(
            id=id or new_id(),
            customer_id=customer_id,
            machine_id=machine_id,
            date=self._coerce_date(date) if date is not None else date_today(),
            series=coerce_series(series),
            notes=notes,
            created_at=created_at or utcnow(),
        )
        await self.store.add(self.collection, workout.to_dict())
        logger.debug("Created workout %s", workout.id)
        return workout

    async def update(self, workout_id: str, **fields) -> Workout:
        """Apply a partial update. A supplied ``series`` replaces the whole list.

        Raises:
            NotFound: If the workout does not exist
            ValidationError: On unknown fields or an empty series
        """
        self._check_fields(fields)

        record = await self._get_record(workout_id)
        workout, _ = migrate_record(record)

        if "series" in fields:
            workout.series = coerce_series(fields["series"])
        if "date" in fields:
            workout.date = self._coerce_date(fields["date"])
        for key in ("customer_id", "machine_id", "notes"):
            if key in fields:
                setattr(workout, key, fields[key])

        await self.store.update(self.collection, workout.to_dict())
        return workout

    async def delete(self, workout_id: str) -> None:
        await self.store.delete(self.collection, workout_id)

    async def delete_by_customer(self, customer_id: str) -> int:
        """Delete every workout of a customer. Returns the number deleted."""
        return await self._delete_workouts("customerId", customer_id)

    async def delete_by_machine(self, machine_id: str) -> int:
        """Delete every workout recorded on a machine."""
        return await self._delete_workouts("machineId", machine_id)

    def _coerce_date(self, value: date | str) -> date:
        try:
            return parse_date(value)
        except ValueError as e:
            raise ValidationError(f"Invalid workout date: {value!r}") from e


def date_today() -> date:
    """Today's calendar date in local time."""
    return date.today()
