"""Identity documents held for a worker."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Any, Mapping


class DocumentType(str, Enum):
    """Kind of identity document; unknown codes read as OTHER."""

    PASSPORT = "PASSPORT"
    BIRTH_CERTIFICATE = "BIRTH_CERTIFICATE"
    NATIONAL_ID = "NATIONAL_ID"
    DRIVERS_LICENSE = "DRIVERS_LICENSE"
    VOTER_ID = "VOTER_ID"
    MILITARY_ID = "MILITARY_ID"
    RESIDENCE_PERMIT = "RESIDENCE_PERMIT"
    WORK_PERMIT = "WORK_PERMIT"
    OTHER = "OTHER"

    @classmethod
    def _missing_(cls, value: object) -> DocumentType | None:
        if isinstance(value, str):
            return cls.OTHER
        return None

    def __str__(self) -> str:
        return self.value


def _date_or_none(value: str | None) -> date | None:
    return date.fromisoformat(value) if value is not None else None


@dataclass
class IdentityDocument:
    """An identity document associated with a worker."""

    document_type: DocumentType
    number: str
    issuing_country: str | None = None
    issuing_authority: str | None = None
    issue_date: date | None = None
    expiry_date: date | None = None
    verified: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "document_type": self.document_type.value,
            "number": self.number,
            "issuing_country": self.issuing_country,
            "issuing_authority": self.issuing_authority,
            "issue_date": self.issue_date.isoformat() if self.issue_date else None,
            "expiry_date": self.expiry_date.isoformat() if self.expiry_date else None,
            "verified": self.verified,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> IdentityDocument:
        return cls(
            document_type=DocumentType(data["document_type"]),
            number=data["number"],
            issuing_country=data.get("issuing_country"),
            issuing_authority=data.get("issuing_authority"),
            issue_date=_date_or_none(data.get("issue_date")),
            expiry_date=_date_or_none(data.get("expiry_date")),
            verified=bool(data["verified"]),
        )