"""Wiring of the record store and the services built on top of it."""

from dataclasses import dataclass
from pathlib import Path

from ..db.store import RecordStore
from .backup import BackupService
from .customers import CustomerService
from .machines import MachineService
from .workouts import WorkoutService


@dataclass
class Services:
    """One record store shared by every service."""

    store: RecordStore
    customers: CustomerService
    machines: MachineService
    workouts: WorkoutService
    backup: BackupService

    @classmethod
    def from_store(cls, store: RecordStore) -> "Services":
        customers = CustomerService(store)
        machines = MachineService(store)
        workouts = WorkoutService(store, customers, machines)
        return cls(
            store=store,
            customers=customers,
            machines=machines,
            workouts=workouts,
            backup=BackupService(customers, machines, workouts),
        )


async def open_services(db_path: Path | None = None) -> Services:
    """Open (and if needed create or upgrade) the database and build the services.

    Raises:
        StorageUnavailable: If the database cannot be initialized
    """
    store = RecordStore(db_path)
    await store.init()
    return Services.from_store(store)
