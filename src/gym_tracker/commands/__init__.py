"""CLI commands for gym-tracker."""

from .backup import clear, export, import_data
from .customers import customers
from .init import init, status
from .machines import machines
from .workouts import workouts

__all__ = [
    "clear",
    "customers",
    "export",
    "import_data",
    "init",
    "machines",
    "status",
    "workouts",
]
