"""Backup export and restore.

A backup is one JSON document holding every customer, machine and
workout. Restoring is a destructive replace: the document is validated
in full, then all existing data is deleted and every entity is recreated
with its original id and timestamps.
"""

import json
import logging
from dataclasses import dataclass
from datetime import date, datetime
from pathlib import Path

from ..db.migrations import upgrade
from ..errors import BackupReadError, ValidationError
from ..models.customer import Customer
from ..models.machine import Machine
from ..models.workout import LegacyWorkout, Series, Workout, is_number
from ..utils.dates import parse_date, parse_timestamp, utcnow
from .base import require_name
from .customers import CustomerService
from .machines import MachineService
from .workouts import WorkoutService

logger = logging.getLogger(__name__)

BACKUP_VERSION = "1.1.0"

FILENAME_TEMPLATE = "gym-tracker-backup-{date}.json"


@dataclass
class BackupDocument:
    """A validated backup, converted to typed entities."""

    version: str
    export_date: datetime
    customers: list[Customer]
    machines: list[Machine]
    workouts: list[Workout | LegacyWorkout]

    def to_dict(self) -> dict:
        workouts = [
            (upgrade(w) if isinstance(w, LegacyWorkout) else w).to_dict()
            for w in self.workouts
        ]
        return {
            "version": self.version,
            "exportDate": self.export_date.isoformat(),
            "customers": [c.to_dict() for c in self.customers],
            "machines": [m.to_dict() for m in self.machines],
            "workouts": workouts,
        }


@dataclass
class ImportResult:
    """Counts of entities recreated by an import."""

    customers: int = 0
    machines: int = 0
    workouts: int = 0
    skipped_workouts: int = 0

    @property
    def message(self) -> str:
        message = (
            f"Imported {self.customers} customers, {self.machines} machines "
            f"and {self.workouts} workouts"
        )
        if self.skipped_workouts:
            message += f" ({self.skipped_workouts} workouts skipped)"
        return message


def default_filename(today: date | None = None) -> str:
    """Backup file name for a given day, e.g. gym-tracker-backup-2024-01-31.json."""
    today = today or date.today()
    return FILENAME_TEMPLATE.format(date=today.isoformat())


class _DocumentValidator:
    """Field-by-field validation of an untrusted backup document."""

    def __init__(self, data):
        self.data = data

    def fail(self, message: str):
        raise ValidationError(f"Invalid backup format: {message}")

    def require_str(self, item: dict, key: str, where: str) -> str:
        value = item.get(key)
        if not isinstance(value, str) or not value:
            self.fail(f"{where} is missing '{key}'")
        return value

    def name(self, item: dict, where: str) -> str:
        value = self.require_str(item, "name", where)
        try:
            require_name(value, where)
        except ValidationError:
            self.fail(f"{where} has a blank 'name'")
        return value

    def optional_str(self, item: dict, key: str, where: str) -> str | None:
        value = item.get(key)
        if value is not None and not isinstance(value, str):
            self.fail(f"{where} has a non-text '{key}'")
        return value

    def timestamp(self, item: dict, key: str, where: str) -> datetime:
        value = self.require_str(item, key, where)
        try:
            return parse_timestamp(value)
        except ValueError:
            self.fail(f"{where} has an invalid '{key}' timestamp: {value!r}")

    def records(self, key: str) -> list[dict]:
        items = self.data.get(key)
        if not isinstance(items, list):
            self.fail(f"'{key}' must be a list")
        for index, item in enumerate(items):
            if not isinstance(item, dict):
                self.fail(f"{key}[{index}] must be an object")
        return items

    def validate(self) -> BackupDocument:
        if not isinstance(self.data, dict):
            self.fail("document must be a JSON object")

        version = self.require_str(self.data, "version", "document")
        export_date = self.timestamp(self.data, "exportDate", "document")

        customer_items = self.records("customers")
        machine_items = self.records("machines")
        workout_items = self.records("workouts")

        return BackupDocument(
            version=version,
            export_date=export_date,
            customers=[
                self.customer(item, f"customers[{i}]")
                for i, item in enumerate(customer_items)
            ],
            machines=[
                self.machine(item, f"machines[{i}]")
                for i, item in enumerate(machine_items)
            ],
            workouts=[
                self.workout(item, f"workouts[{i}]")
                for i, item in enumerate(workout_items)
            ],
        )

    def customer(self, item: dict, where: str) -> Customer:
        deactivated = item.get("deactivated")
        if deactivated is None:
            deactivated = False
        if not isinstance(deactivated, bool):
            self.fail(f"{where} has a non-boolean 'deactivated'")
        return Customer(
            id=self.require_str(item, "id", where),
            name=self.name(item, where),
            email=self.optional_str(item, "email", where),
            phone=self.optional_str(item, "phone", where),
            deactivated=deactivated,
            created_at=self.timestamp(item, "createdAt", where),
            updated_at=self.timestamp(item, "updatedAt", where),
        )

    def machine(self, item: dict, where: str) -> Machine:
        return Machine(
            id=self.require_str(item, "id", where),
            name=self.name(item, where),
            type=self.require_str(item, "type", where),
            created_at=self.timestamp(item, "createdAt", where),
        )

    def workout(self, item: dict, where: str) -> Workout | LegacyWorkout:
        workout_id = self.require_str(item, "id", where)
        customer_id = self.require_str(item, "customerId", where)
        machine_id = self.require_str(item, "machineId", where)
        raw_date = self.require_str(item, "date", where)
        try:
            workout_date = parse_date(raw_date)
        except ValueError:
            self.fail(f"{where} has an invalid 'date': {raw_date!r}")
        created_at = self.timestamp(item, "createdAt", where)
        notes = self.optional_str(item, "notes", where)

        series = item.get("series")
        if isinstance(series, list) and series:
            return Workout(
                id=workout_id,
                customer_id=customer_id,
                machine_id=machine_id,
                date=workout_date,
                series=[self.series(s, f"{where}.series[{i}]") for i, s in enumerate(series)],
                notes=notes,
                created_at=created_at,
            )

        if all(is_number(item.get(key)) for key in ("sets", "reps", "weight")):
            return LegacyWorkout(
                id=workout_id,
                customer_id=customer_id,
                machine_id=machine_id,
                date=workout_date,
                sets=int(item["sets"]),
                reps=int(item["reps"]),
                weight=float(item["weight"]),
                notes=notes,
                created_at=created_at,
            )

        self.fail(f"{where} has neither a series list nor sets/reps/weight")

    def series(self, entry, where: str) -> Series:
        if not isinstance(entry, dict) or not all(
            is_number(entry.get(key)) for key in ("sets", "reps", "weight")
        ):
            self.fail(f"{where} must have numeric sets, reps and weight")
        return Series(
            sets=int(entry["sets"]),
            reps=int(entry["reps"]),
            weight=float(entry["weight"]),
        )


class BackupService:
    """Export every collection to one document and restore from one."""

    def __init__(
        self,
        customers: CustomerService,
        machines: MachineService,
        workouts: WorkoutService,
    ):
        self.customers = customers
        self.machines = machines
        self.workouts = workouts

    async def export_all(self) -> BackupDocument:
        """Snapshot every customer, machine and workout."""
        return BackupDocument(
            version=BACKUP_VERSION,
            export_date=utcnow(),
            customers=await self.customers.get_all(),
            machines=await self.machines.get_all(),
            workouts=await self.workouts.get_all(),
        )

    async def write_backup(self, destination: Path | None = None) -> Path:
        """Write a pretty-printed backup file.

        Args:
            destination: Target file, or a directory to write the
                default-named file into (default: current directory)

        Returns:
            Path of the written file
        """
        document = await self.export_all()

        if destination is None:
            destination = Path.cwd()
        destination = Path(destination)
        if destination.is_dir():
            destination = destination / default_filename()

        content = json.dumps(document.to_dict(), indent=2, ensure_ascii=False)
        destination.write_text(content + "\n", encoding="utf-8")
        logger.info(
            "Exported %d customers, %d machines and %d workouts to %s",
            len(document.customers),
            len(document.machines),
            len(document.workouts),
            destination,
        )
        return destination

    def validate(self, data) -> BackupDocument:
        """Validate a parsed backup document.

        Raises:
            ValidationError: Describing the first problem found
        """
        return _DocumentValidator(data).validate()

    async def import_data(self, data) -> ImportResult:
        """Replace all existing data with the contents of a backup.

        The whole document is validated before anything is deleted, so
        an invalid document leaves existing data untouched.

        Raises:
            ValidationError: If the document is invalid
        """
        document = self.validate(data)

        await self.clear_all_data()

        result = ImportResult()
        for customer in document.customers:
            await self.customers.create(
                name=customer.name,
                email=customer.email,
                phone=customer.phone,
                deactivated=customer.deactivated,
                id=customer.id,
                created_at=customer.created_at,
                updated_at=customer.updated_at,
            )
            result.customers += 1

        for machine in document.machines:
            await self.machines.create(
                name=machine.name,
                type=machine.type,
                id=machine.id,
                created_at=machine.created_at,
            )
            result.machines += 1

        for workout in document.workouts:
            if isinstance(workout, LegacyWorkout):
                workout = upgrade(workout)
            try:
                await self.workouts.create(
                    customer_id=workout.customer_id,
                    machine_id=workout.machine_id,
                    series=workout.series,
                    date=workout.date,
                    notes=workout.notes,
                    id=workout.id,
                    created_at=workout.created_at,
                )
            except ValidationError as e:
                logger.warning("Skipping workout %s: %s", workout.id, e)
                result.skipped_workouts += 1
                continue
            result.workouts += 1

        logger.info(result.message)
        return result

    async def import_from_file(self, path: Path | str) -> ImportResult:
        """Read a backup file and import it.

        Raises:
            BackupReadError: If the file cannot be read or is not JSON
            ValidationError: If the document is invalid
        """
        path = Path(path)
        try:
            content = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise BackupReadError(f"Could not read backup file {path}: {e}") from e

        try:
            data = json.loads(content)
        except json.JSONDecodeError as e:
            raise BackupReadError(f"Backup file {path} is not valid JSON: {e}") from e

        return await self.import_data(data)

    async def clear_all_data(self) -> None:
        """Delete every workout, customer and machine."""
        workouts = await self.workouts.get_all()
        customers = await self.customers.get_all()
        machines = await self.machines.get_all()

        for workout in workouts:
            await self.workouts.delete(workout.id)
        for customer in customers:
            await self.customers.delete(customer.id)
        for machine in machines:
            await self.machines.delete(machine.id)

        logger.info(
            "Cleared %d customers, %d machines and %d workouts",
            len(customers),
            len(machines),
            len(workouts),
        )
