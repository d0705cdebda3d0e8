"""Machine (equipment) data model."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from ..utils.dates import parse_timestamp


class MachineType(str, Enum):
    """Machine categories offered when registering equipment.

    The store keeps ``Machine.type`` as a plain string, so values outside
    this set are accepted.
    """

    CARDIO = "Cardio"
    STRENGTH = "Strength"
    FUNCTIONAL = "Functional"
    FREE_WEIGHTS = "Free Weights"


@dataclass
class Machine:
    """A piece of gym equipment."""

    name: str
    type: str
    id: str | None = None
    created_at: datetime | None = None

    def to_dict(self) -> dict:
        """Convert to the stored/exported record shape."""
        return {
            "id": self.id,
            "name": self.name,
            "type": self.type,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Machine":
        """Create from a stored/exported record."""
        return cls(
            id=data.get("id"),
            name=data["name"],
            type=data.get("type", ""),
            created_at=parse_timestamp(data["createdAt"]) if data.get("createdAt") else None,
        )
