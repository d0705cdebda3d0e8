"""Services layer for gym-tracker."""

from .backup import BACKUP_VERSION, BackupDocument, BackupService, ImportResult, default_filename
from .context import Services, open_services
from .customers import CustomerService
from .machines import MachineService
from .workouts import WorkoutService

__all__ = [
    "BACKUP_VERSION",
    "BackupDocument",
    "BackupService",
    "CustomerService",
    "default_filename",
    "ImportResult",
    "MachineService",
    "open_services",
    "Services",
    "WorkoutService",
]
