"""Worker records: names, worker types, links and the worker resource itself."""

from __future__ import annotations

import re
import uuid
from dataclasses import KW_ONLY, dataclass, field
from datetime import date, datetime, timezone
from enum import Enum
from typing import Any, Mapping

from workerindex.common import Address, ContactPoint, Gender
from workerindex.document import IdentityDocument
from workerindex.emergency_contact import EmergencyContact
from workerindex.identifier import Identifier, IdentifierType

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


class NameUse(str, Enum):
    """Purpose of a name."""

    USUAL = "usual"
    OFFICIAL = "official"
    TEMP = "temp"
    NICKNAME = "nickname"
    ANONYMOUS = "anonymous"
    OLD = "old"
    MAIDEN = "maiden"


@dataclass
class HumanName:
    """A person's name: family name, given names, prefixes and suffixes."""

    family: str
    given: list[str] = field(default_factory=list)
    prefix: list[str] = field(default_factory=list)
    suffix: list[str] = field(default_factory=list)
    use_type: NameUse | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "use_type": self.use_type.value if self.use_type is not None else None,
            "family": self.family,
            "given": list(self.given),
            "prefix": list(self.prefix),
            "suffix": list(self.suffix),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> HumanName:
        use_type = data.get("use_type")
        return cls(
            family=data["family"],
            given=list(data["given"]),
            prefix=list(data["prefix"]),
            suffix=list(data["suffix"]),
            use_type=NameUse(use_type) if use_type is not None else None,
        )


class WorkerType(str, Enum):
    """The role a worker holds within the care system."""

    DOCTOR = "doctor"
    NURSE = "nurse"
    CARER = "carer"
    STAFF = "staff"
    EMPLOYEE = "employee"
    MANAGER = "manager"
    SUPERVISOR = "supervisor"
    CONSULTANT = "consultant"
    OTHER = "other"

    def __str__(self) -> str:
        return self.value


class LinkType(str, Enum):
    """How one worker record relates to another."""

    REPLACED_BY = "replacedby"
    REPLACES = "replaces"
    REFER = "refer"
    SEEALSO = "seealso"


@dataclass
class WorkerLink:
    """A link from one worker record to another."""

    other_worker_id: uuid.UUID
    link_type: LinkType

    def to_dict(self) -> dict[str, Any]:
        return {
            "other_worker_id": str(self.other_worker_id),
            "link_type": self.link_type.value,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> WorkerLink:
        return cls(
            other_worker_id=uuid.UUID(data["other_worker_id"]),
            link_type=LinkType(data["link_type"]),
        )


@dataclass
class Worker:
    """A worker: a care provider such as a doctor, nurse or carer."""

    name: HumanName
    gender: Gender
    _: KW_ONLY
    id: uuid.UUID = field(default_factory=uuid.uuid4)
    identifiers: list[Identifier] = field(default_factory=list)
    active: bool = True
    additional_names: list[HumanName] = field(default_factory=list)
    telecom: list[ContactPoint] = field(default_factory=list)
    worker_type: WorkerType | None = None
    birth_date: date | None = None
    tax_id: str | None = None
    documents: list[IdentityDocument] = field(default_factory=list)
    emergency_contacts: list[EmergencyContact] = field(default_factory=list)
    deceased: bool = False
    deceased_datetime: datetime | None = None
    addresses: list[Address] = field(default_factory=list)
    marital_status: str | None = None
    multiple_birth: bool | None = None
    photo: list[str] = field(default_factory=list)
    managing_organization: uuid.UUID | None = None
    links: list[WorkerLink] = field(default_factory=list)
    created_at: datetime = field(default_factory=_utcnow)
    updated_at: datetime | None = None

    def __post_init__(self) -> None:
        if self.updated_at is None:
            self.updated_at = self.created_at

    def full_name(self) -> str:
        """Given names followed by the family name."""
        return f"{' '.join(self.name.given)} {self.name.family}"

    def effective_tax_id(self) -> str | None:
        """The tax ID, falling back to the first TAX-type identifier."""
        if self.tax_id is not None:
            return self.tax_id
        return next(
            (
                ident.value
                for ident in self.identifiers
                if ident.identifier_type == IdentifierType.TAX
            ),
            None,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": str(self.id),
            "identifiers": [item.to_dict() for item in self.identifiers],
            "active": self.active,
            "name": self.name.to_dict(),
            "additional_names": [item.to_dict() for item in self.additional_names],
            "telecom": [item.to_dict() for item in self.telecom],
            "gender": self.gender.value,
            "worker_type": (
                self.worker_type.value if self.worker_type is not None else None
            ),
            "birth_date": (
                self.birth_date.isoformat() if self.birth_date is not None else None
            ),
            "tax_id": self.tax_id,
            "documents": [item.to_dict() for item in self.documents],
            "emergency_contacts": [item.to_dict() for item in self.emergency_contacts],
            "deceased": self.deceased,
            "deceased_datetime": (
                _format_datetime(self.deceased_datetime)
                if self.deceased_datetime is not None
                else None
            ),
            "addresses": [item.to_dict() for item in self.addresses],
            "marital_status": self.marital_status,
            "multiple_birth": self.multiple_birth,
            "photo": list(self.photo),
            "managing_organization": (
                str(self.managing_organization)
                if self.managing_organization is not None
                else None
            ),
            "links": [item.to_dict() for item in self.links],
            "created_at": _format_datetime(self.created_at),
            "updated_at": _format_datetime(self.updated_at),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Worker:
        worker_type = data.get("worker_type")
        birth_date = data.get("birth_date")
        deceased_at = data.get("deceased_datetime")
        managing = data.get("managing_organization")
        multiple_birth = data.get("multiple_birth")
        return cls(
            HumanName.from_dict(data["name"]),
            Gender(data["gender"]),
            id=uuid.UUID(data["id"]),
            identifiers=[Identifier.from_dict(item) for item in data["identifiers"]],
            active=bool(data["active"]),
            additional_names=[
                HumanName.from_dict(item) for item in data["additional_names"]
            ],
            telecom=[ContactPoint.from_dict(item) for item in data["telecom"]],
            worker_type=WorkerType(worker_type) if worker_type is not None else None,
            birth_date=date.fromisoformat(birth_date) if birth_date is not None else None,
            tax_id=data.get("tax_id"),
            documents=[
                IdentityDocument.from_dict(item) for item in data.get("documents", [])
            ],
            emergency_contacts=[
                EmergencyContact.from_dict(item)
                for item in data.get("emergency_contacts", [])
            ],
            deceased=bool(data["deceased"]),
            deceased_datetime=(
                _parse_datetime(deceased_at) if deceased_at is not None else None
            ),
            addresses=[Address.from_dict(item) for item in data["addresses"]],
            marital_status=data.get("marital_status"),
            multiple_birth=bool(multiple_birth) if multiple_birth is not None else None,
            photo=list(data["photo"]),
            managing_organization=uuid.UUID(managing) if managing is not None else None,
            links=[WorkerLink.from_dict(item) for item in data["links"]],
            created_at=_parse_datetime(data["created_at"]),
            updated_at=_parse_datetime(data["updated_at"]),
        )