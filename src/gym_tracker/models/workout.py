"""Workout session data models."""

from dataclasses import dataclass, field
from datetime import date, datetime

from ..utils.dates import format_date, parse_date, parse_timestamp

# Scalar keys of the pre-series record shape
LEGACY_FIELDS = ("sets", "reps", "weight")


def is_number(value) -> bool:
    """True for int/float values (bool excluded)."""
    return isinstance(value, (int, float)) and not isinstance(value, bool)


@dataclass
class Series:
    """One repeated block of sets x reps at a given weight."""

    sets: int
    reps: int
    weight: float = 0.0

    @property
    def is_valid(self) -> bool:
        """Whether the block can be recorded (weight may be zero)."""
        return self.sets > 0 and self.reps > 0 and self.weight >= 0

    @property
    def volume(self) -> float:
        """Total load moved in this block."""
        return self.sets * self.reps * self.weight

    def to_dict(self) -> dict:
        return {"sets": self.sets, "reps": self.reps, "weight": self.weight}

    @classmethod
    def from_dict(cls, data: dict) -> "Series":
        return cls(
            sets=int(data["sets"]),
            reps=int(data["reps"]),
            weight=float(data.get("weight", 0)),
        )

    def __str__(self) -> str:
        weight = f"{self.weight:g}"
        return f"{self.sets}x{self.reps} @ {weight}"


def clean_series(series: list[Series]) -> list[Series]:
    """Drop blocks with non-positive sets/reps or negative weight."""
    return [s for s in series if s.is_valid]


@dataclass
class Workout:
    """A workout session of one customer on one machine.

    ``date`` is the calendar day the session took place, which is
    distinct from ``created_at`` (when the record was entered).
    """

    customer_id: str
    machine_id: str
    date: date
    series: list[Series] = field(default_factory=list)
    notes: str | None = None
    id: str | None = None
    created_at: datetime | None = None

    @property
    def total_sets(self) -> int:
        return sum(s.sets for s in self.series)

    @property
    def total_volume(self) -> float:
        return sum(s.volume for s in self.series)

    def to_dict(self) -> dict:
        """Convert to the stored/exported record shape."""
        data = {
            "id": self.id,
            "customerId": self.customer_id,
            "machineId": self.machine_id,
            "date": format_date(self.date),
            "series": [s.to_dict() for s in self.series],
        }
        if self.notes is not None:
            data["notes"] = self.notes
        data["createdAt"] = self.created_at.isoformat() if self.created_at else None
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "Workout":
        """Create from a current-shape record.

        A missing ``series`` key yields an empty list; use
        ``gym_tracker.db.migrations.decode_workout`` for records that may
        still be in the legacy shape.
        """
        return cls(
            id=data.get("id"),
            customer_id=data["customerId"],
            machine_id=data["machineId"],
            date=parse_date(data["date"]),
            series=[Series.from_dict(s) for s in data.get("series") or []],
            notes=data.get("notes"),
            created_at=parse_timestamp(data["createdAt"]) if data.get("createdAt") else None,
        )


@dataclass
class LegacyWorkout:
    """A workout stored before multi-series support.

    Carries one flat sets/reps/weight triple instead of a series list.
    """

    customer_id: str
    machine_id: str
    date: date
    sets: int
    reps: int
    weight: float
    notes: str | None = None
    id: str | None = None
    created_at: datetime | None = None

    @classmethod
    def from_dict(cls, data: dict) -> "LegacyWorkout":
        reps = data.get("reps")
        weight = data.get("weight")
        return cls(
            id=data.get("id"),
            customer_id=data["customerId"],
            machine_id=data["machineId"],
            date=parse_date(data["date"]),
            sets=int(data["sets"]),
            reps=int(reps) if is_number(reps) else 0,
            weight=float(weight) if is_number(weight) else 0.0,
            notes=data.get("notes"),
            created_at=parse_timestamp(data["createdAt"]) if data.get("createdAt") else None,
        )


@dataclass
class WorkoutWithDetails(Workout):
    """Workout joined with its customer and machine names (display only)."""

    customer_name: str = ""
    machine_name: str = ""

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["customerName"] = self.customer_name
        data["machineName"] = self.machine_name
        return data

    @classmethod
    def from_workout(
        cls, workout: Workout, customer_name: str, machine_name: str
    ) -> "WorkoutWithDetails":
        return cls(
            id=workout.id,
            customer_id=workout.customer_id,
            machine_id=workout.machine_id,
            date=workout.date,
            series=list(workout.series),
            notes=workout.notes,
            created_at=workout.created_at,
            customer_name=customer_name,
            machine_name=machine_name,
        )
