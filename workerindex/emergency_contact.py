"""Emergency contacts for a worker."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

from workerindex.common import Address, ContactPoint


@dataclass
class EmergencyContact:
    """A person to contact in an emergency."""

    name: str
    relationship: str
    telecom: list[ContactPoint] = field(default_factory=list)
    address: Address | None = None
    is_primary: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "relationship": self.relationship,
            "telecom": [contact.to_dict() for contact in self.telecom],
            "address": self.address.to_dict() if self.address is not None else None,
            "is_primary": self.is_primary,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> EmergencyContact:
        address = data.get("address")
        return cls(
            name=data["name"],
            relationship=data["relationship"],
            telecom=[ContactPoint.from_dict(item) for item in data["telecom"]],
            address=Address.from_dict(address) if address is not None else None,
            is_primary=bool(data["is_primary"]),
        )