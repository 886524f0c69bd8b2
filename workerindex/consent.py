"""Consent records held for a worker."""

from __future__ import annotations

import re
import uuid
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from enum import Enum
from typing import Any, Mapping

_FRACTION = re.compile(r"\.(\d+)")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _format_datetime(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


def _parse_datetime(text: str) -> datetime:
    text = _FRACTION.sub(lambda m: "." + m.group(1)[:6].ljust(6, "0"), text, count=1)
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def _date_or_none(value: str | None) -> date | None:
    return date.fromisoformat(value) if value is not None else None


def _iso_or_none(value: date | None) -> str | None:
    return value.isoformat() if value is not None else None


class ConsentType(str, Enum):
    """What a consent covers."""

    DATA_PROCESSING = "dataprocessing"
    DATA_SHARING = "datasharing"
    MARKETING = "marketing"
    RESEARCH = "research"
    EMERGENCY_ACCESS = "emergencyaccess"


class ConsentStatus(str, Enum):
    """Current state of a consent record."""

    ACTIVE = "active"
    REVOKED = "revoked"
    EXPIRED = "expired"


@dataclass(kw_only=True)
class Consent:
    """A consent granted (or revoked) by a worker."""

    id: uuid.UUID = field(default_factory=uuid.uuid4)
    worker_id: uuid.UUID
    consent_type: ConsentType
    status: ConsentStatus
    granted_date: date
    expiry_date: date | None = None
    revoked_date: date | None = None
    purpose: str | None = None
    method: str | None = None
    created_at: datetime = field(default_factory=_utcnow)
    updated_at: datetime | None = None

    def __post_init__(self) -> None:
        if self.updated_at is None:
            self.updated_at = self.created_at

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": str(self.id),
            "worker_id": str(self.worker_id),
            "consent_type": self.consent_type.value,
            "status": self.status.value,
            "granted_date": self.granted_date.isoformat(),
            "expiry_date": _iso_or_none(self.expiry_date),
            "revoked_date": _iso_or_none(self.revoked_date),
            "purpose": self.purpose,
            "method": self.method,
            "created_at": _format_datetime(self.created_at),
            "updated_at": _format_datetime(self.updated_at),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Consent:
        return cls(
            id=uuid.UUID(data["id"]),
            worker_id=uuid.UUID(data["worker_id"]),
            consent_type=ConsentType(data["consent_type"]),
            status=ConsentStatus(data["status"]),
            granted_date=date.fromisoformat(data["granted_date"]),
            expiry_date=_date_or_none(data.get("expiry_date")),
            revoked_date=_date_or_none(data.get("revoked_date")),
            purpose=data.get("purpose"),
            method=data.get("method"),
            created_at=_parse_datetime(data["created_at"]),
            updated_at=_parse_datetime(data["updated_at"]),
        )