"""Organisations such as trusts, GP practices and sites, with ODS data."""

from __future__ import annotations

import re
import uuid
from dataclasses import KW_ONLY, dataclass, field
from datetime import date, datetime, timezone
from typing import Any, Mapping

from workerindex.common import Address, ContactPoint
from workerindex.identifier import Identifier
from workerindex.ods import (
    DatePeriod,
    OdsStatus,
    OrganizationRelationship,
    OrganizationRole,
    OrganizationSuccession,
    RecordClass,
    RecordUseType,
    SuccessionType,
)

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


def _enum_value(member: Any) -> Any:
    return member.value if member is not None else None


@dataclass
class Organization:
    """An organisation or site, aligned with the ODS data model."""

    name: str
    _: KW_ONLY
    id: uuid.UUID = field(default_factory=uuid.uuid4)
    identifiers: list[Identifier] = field(default_factory=list)
    active: bool = True
    ods_code: str | None = None
    ods_status: OdsStatus | None = None
    record_class: RecordClass | None = None
    record_use_type: RecordUseType | None = None
    assigning_authority: str | None = None
    org_type: list[str] = field(default_factory=list)
    alias: list[str] = field(default_factory=list)
    telecom: list[ContactPoint] = field(default_factory=list)
    addresses: list[Address] = field(default_factory=list)
    part_of: uuid.UUID | None = None
    periods: list[DatePeriod] = field(default_factory=list)
    last_change_date: date | None = None
    roles: list[OrganizationRole] = field(default_factory=list)
    relationships: list[OrganizationRelationship] = field(default_factory=list)
    successions: list[OrganizationSuccession] = field(default_factory=list)
    created_at: datetime = field(default_factory=_utcnow)
    updated_at: datetime | None = None

    def __post_init__(self) -> None:
        if self.updated_at is None:
            self.updated_at = self.created_at

    def primary_role(self) -> OrganizationRole | None:
        """The first role marked primary, if any."""
        return next((role for role in self.roles if role.is_primary), None)

    def active_relationships(self) -> list[OrganizationRelationship]:
        """Relationships whose status is active."""
        return [rel for rel in self.relationships if rel.status == OdsStatus.ACTIVE]

    def predecessors(self) -> list[OrganizationSuccession]:
        """Succession records pointing to predecessor organisations."""
        return [
            s for s in self.successions
            if s.succession_type == SuccessionType.PREDECESSOR
        ]

    def successors(self) -> list[OrganizationSuccession]:
        """Succession records pointing to successor organisations."""
        return [
            s for s in self.successions
            if s.succession_type == SuccessionType.SUCCESSOR
        ]

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": str(self.id),
            "identifiers": [item.to_dict() for item in self.identifiers],
            "active": self.active,
            "ods_code": self.ods_code,
            "ods_status": _enum_value(self.ods_status),
            "record_class": _enum_value(self.record_class),
            "record_use_type": _enum_value(self.record_use_type),
            "assigning_authority": self.assigning_authority,
            "org_type": list(self.org_type),
            "name": self.name,
            "alias": list(self.alias),
            "telecom": [item.to_dict() for item in self.telecom],
            "addresses": [item.to_dict() for item in self.addresses],
            "part_of": str(self.part_of) if self.part_of is not None else None,
            "periods": [item.to_dict() for item in self.periods],
            "last_change_date": (
                self.last_change_date.isoformat()
                if self.last_change_date is not None
                else None
            ),
            "roles": [item.to_dict() for item in self.roles],
            "relationships": [item.to_dict() for item in self.relationships],
            "successions": [item.to_dict() for item in self.successions],
            "created_at": _format_datetime(self.created_at),
            "updated_at": _format_datetime(self.updated_at),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Organization:
        ods_status = data.get("ods_status")
        record_class = data.get("record_class")
        record_use_type = data.get("record_use_type")
        part_of = data.get("part_of")
        last_change = data.get("last_change_date")
        return cls(
            data["name"],
            id=uuid.UUID(data["id"]),
            identifiers=[Identifier.from_dict(item) for item in data["identifiers"]],
            active=bool(data["active"]),
            ods_code=data.get("ods_code"),
            ods_status=OdsStatus(ods_status) if ods_status is not None else None,
            record_class=RecordClass(record_class) if record_class is not None else None,
            record_use_type=(
                RecordUseType(record_use_type) if record_use_type is not None else None
            ),
            assigning_authority=data.get("assigning_authority"),
            org_type=list(data["org_type"]),
            alias=list(data["alias"]),
            telecom=[ContactPoint.from_dict(item) for item in data["telecom"]],
            addresses=[Address.from_dict(item) for item in data["addresses"]],
            part_of=uuid.UUID(part_of) if part_of is not None else None,
            periods=[DatePeriod.from_dict(item) for item in data.get("periods", [])],
            last_change_date=(
                date.fromisoformat(last_change) if last_change is not None else None
            ),
            roles=[OrganizationRole.from_dict(item) for item in data.get("roles", [])],
            relationships=[
                OrganizationRelationship.from_dict(item)
                for item in data.get("relationships", [])
            ],
            successions=[
                OrganizationSuccession.from_dict(item)
                for item in data.get("successions", [])
            ],
            created_at=_parse_datetime(data["created_at"]),
            updated_at=_parse_datetime(data["updated_at"]),
        )