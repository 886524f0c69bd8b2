"""Organisation Data Service types: roles, relationships, succession and periods."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any, Mapping


def _date_or_none(value: str | None) -> date | None:
    return date.fromisoformat(value) if value is not None else None


def _iso_or_none(value: date | None) -> str | None:
    return value.isoformat() if value is not None else None


class OdsStatus(str, Enum):
    """Whether an ODS record is active."""

    ACTIVE = "active"
    INACTIVE = "inactive"


class RecordClass(str, Enum):
    """Whether a record is an organisation (RC1) or a site (RC2)."""

    ORGANISATION = "organisation"
    SITE = "site"


class RecordUseType(str, Enum):
    """Whether a record is complete or kept only for referential integrity."""

    FULL = "full"
    REF_ONLY = "ref_only"


class PeriodType(str, Enum):
    """Whether a date range is a legal or an operational period."""

    LEGAL = "legal"
    OPERATIONAL = "operational"


class SuccessionType(str, Enum):
    """Whether the target of a succession record came before or after."""

    PREDECESSOR = "predecessor"
    SUCCESSOR = "successor"


@dataclass
class DatePeriod:
    """A typed date range with optional start and end."""

    period_type: PeriodType
    start_date: date | None = None
    end_date: date | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "period_type": self.period_type.value,
            "start_date": _iso_or_none(self.start_date),
            "end_date": _iso_or_none(self.end_date),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> DatePeriod:
        return cls(
            period_type=PeriodType(data["period_type"]),
            start_date=_date_or_none(data.get("start_date")),
            end_date=_date_or_none(data.get("end_date")),
        )


@dataclass(kw_only=True)
class OrganizationRole:
    """A role assigned to an organisation or site, such as RO197 (NHS Trust)."""

    unique_role_id: int
    role_code: str
    role_name: str | None = None
    is_primary: bool
    status: OdsStatus
    periods: list[DatePeriod] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "unique_role_id": self.unique_role_id,
            "role_code": self.role_code,
            "role_name": self.role_name,
            "is_primary": self.is_primary,
            "status": self.status.value,
            "periods": [period.to_dict() for period in self.periods],
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> OrganizationRole:
        return cls(
            unique_role_id=int(data["unique_role_id"]),
            role_code=data["role_code"],
            role_name=data.get("role_name"),
            is_primary=bool(data["is_primary"]),
            status=OdsStatus(data["status"]),
            periods=[DatePeriod.from_dict(item) for item in data["periods"]],
        )


@dataclass(kw_only=True)
class OrganizationRelationship:
    """A directional relationship held on a source organisation, pointing to a target."""

    unique_rel_id: int
    relationship_type_code: str
    relationship_type_name: str | None = None
    status: OdsStatus
    target_ods_code: str
    target_primary_role_id: str | None = None
    periods: list[DatePeriod] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "unique_rel_id": self.unique_rel_id,
            "relationship_type_code": self.relationship_type_code,
            "relationship_type_name": self.relationship_type_name,
            "status": self.status.value,
            "target_ods_code": self.target_ods_code,
            "target_primary_role_id": self.target_primary_role_id,
            "periods": [period.to_dict() for period in self.periods],
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> OrganizationRelationship:
        return cls(
            unique_rel_id=int(data["unique_rel_id"]),
            relationship_type_code=data["relationship_type_code"],
            relationship_type_name=data.get("relationship_type_name"),
            status=OdsStatus(data["status"]),
            target_ods_code=data["target_ods_code"],
            target_primary_role_id=data.get("target_primary_role_id"),
            periods=[DatePeriod.from_dict(item) for item in data["periods"]],
        )


@dataclass(kw_only=True)
class OrganizationSuccession:
    """An immediate predecessor or successor link between organisations."""

    unique_succ_id: int
    succession_type: SuccessionType
    target_ods_code: str
    target_primary_role_id: str | None = None
    legal_start_date: date | None = None
    has_forward_succession: bool

    def to_dict(self) -> dict[str, Any]:
        return {
            "unique_succ_id": self.unique_succ_id,
            "succession_type": self.succession_type.value,
            "target_ods_code": self.target_ods_code,
            "target_primary_role_id": self.target_primary_role_id,
            "legal_start_date": _iso_or_none(self.legal_start_date),
            "has_forward_succession": self.has_forward_succession,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> OrganizationSuccession:
        return cls(
            unique_succ_id=int(data["unique_succ_id"]),
            succession_type=SuccessionType(data["succession_type"]),
            target_ods_code=data["target_ods_code"],
            target_primary_role_id=data.get("target_primary_role_id"),
            legal_start_date=_date_or_none(data.get("legal_start_date")),
            has_forward_succession=bool(data["has_forward_succession"]),
        )