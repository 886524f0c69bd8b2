"""ODS CodeSystem reference data: roles, relationships, record classes and names."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Mapping


@dataclass
class OdsRoleReference:
    """A primary or non-primary organisation role code."""

    role_id: str
    role_name: str
    is_primary_role_type: bool

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> OdsRoleReference:
        return cls(
            role_id=data["role_id"],
            role_name=data["role_name"],
            is_primary_role_type=bool(data["is_primary_role_type"]),
        )


@dataclass
class OdsRelationshipReference:
    """A relationship type code such as RE4."""

    relationship_id: str
    relationship_name: str

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> OdsRelationshipReference:
        return cls(
            relationship_id=data["relationship_id"],
            relationship_name=data["relationship_name"],
        )


@dataclass
class OdsRecordClassReference:
    """A record class code such as RC1 (organisation) or RC2 (site)."""

    code: str
    name: str

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> OdsRecordClassReference:
        return cls(code=data["code"], name=data["name"])


@dataclass
class OdsRecordUseTypeReference:
    """A record use type: full record or reference-only."""

    code: str
    name: str

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> OdsRecordUseTypeReference:
        return cls(code=data["code"], name=data["name"])


@dataclass
class PractitionerRoleReference:
    """A practitioner role type, such as a prescriber or consultant."""

    role_code: str
    role_name: str
    role_category: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> PractitionerRoleReference:
        return cls(
            role_code=data["role_code"],
            role_name=data["role_name"],
            role_category=data.get("role_category"),
        )


@dataclass
class GeographyNameReference:
    """The name of an ONS geography code."""

    ons_code: str
    name: str
    geography_type: str

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> GeographyNameReference:
        return cls(
            ons_code=data["ons_code"],
            name=data["name"],
            geography_type=data["geography_type"],
        )