"""Identifiers attached to workers and organisations."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping

SSN_SYSTEM = "http://hl7.org/fhir/sid/us-ssn"


class IdentifierUse(str, Enum):
    """How an identifier is meant to be used."""

    USUAL = "usual"
    OFFICIAL = "official"
    TEMP = "temp"
    SECONDARY = "secondary"
    OLD = "old"


class IdentifierType(str, Enum):
    """Kind of identifier; unknown codes read as OTHER."""

    MRN = "MRN"
    SSN = "SSN"
    DL = "DL"
    NPI = "NPI"
    PPN = "PPN"
    TAX = "TAX"
    ODS = "ODS"
    OTHER = "OTHER"

    @classmethod
    def _missing_(cls, value: object) -> IdentifierType | None:
        if isinstance(value, str):
            return cls.OTHER
        return None

    def __str__(self) -> str:
        return self.value


@dataclass
class Identifier:
    """A worker or organisation identifier (MRN, SSN, NPI and so on)."""

    identifier_type: IdentifierType
    system: str
    value: str
    use_type: IdentifierUse | None = None
    assigner: str | None = None

    @classmethod
    def mrn(cls, facility: str, value: str) -> Identifier:
        """A medical record number issued by the given facility."""
        return cls(IdentifierType.MRN, f"urn:oid:facility:{facility}", value)

    @classmethod
    def ssn(cls, value: str) -> Identifier:
        """A social security number."""
        return cls(IdentifierType.SSN, SSN_SYSTEM, value)

    def to_dict(self) -> dict[str, Any]:
        return {
            "use_type": self.use_type.value if self.use_type is not None else None,
            "identifier_type": self.identifier_type.value,
            "system": self.system,
            "value": self.value,
            "assigner": self.assigner,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Identifier:
        use_type = data.get("use_type")
        return cls(
            identifier_type=IdentifierType(data["identifier_type"]),
            system=data["system"],
            value=data["value"],
            use_type=IdentifierUse(use_type) if use_type is not None else None,
            assigner=data.get("assigner"),
        )