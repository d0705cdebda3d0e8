"""Data models for gym-tracker."""

from .customer import Customer
from .machine import Machine, MachineType
from .workout import LegacyWorkout, Series, Workout, WorkoutWithDetails

__all__ = [
    "Customer",
    "LegacyWorkout",
    "Machine",
    "MachineType",
    "Series",
    "Workout",
    "WorkoutWithDetails",
]
