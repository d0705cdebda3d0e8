"""Customer data model."""

from dataclasses import dataclass
from datetime import datetime

from ..utils.dates import parse_timestamp


@dataclass
class Customer:
    """A gym customer.

    Deactivated customers stay in the store so their workout history is
    kept, but they are hidden from active-selection lists.
    """

    name: str
    email: str | None = None
    phone: str | None = None
    deactivated: bool = False
    id: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def to_dict(self) -> dict:
        """Convert to the stored/exported record shape."""
        data = {"id": self.id, "name": self.name}
        if self.email is not None:
            data["email"] = self.email
        if self.phone is not None:
            data["phone"] = self.phone
        data["deactivated"] = self.deactivated
        data["createdAt"] = self.created_at.isoformat() if self.created_at else None
        data["updatedAt"] = self.updated_at.isoformat() if self.updated_at else None
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "Customer":
        """Create from a stored/exported record."""
        return cls(
            id=data.get("id"),
            name=data["name"],
            email=data.get("email"),
            phone=data.get("phone"),
            deactivated=bool(data.get("deactivated", False)),
            created_at=parse_timestamp(data["createdAt"]) if data.get("createdAt") else None,
            updated_at=parse_timestamp(data["updatedAt"]) if data.get("updatedAt") else None,
        )
