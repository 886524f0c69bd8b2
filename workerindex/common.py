"""Shared value types: gender, addresses and contact points."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping


class Gender(str, Enum):
    """Administrative gender."""

    MALE = "male"
    FEMALE = "female"
    OTHER = "other"
    UNKNOWN = "unknown"


class AddressUse(str, Enum):
    """Purpose of an address."""

    HOME = "home"
    WORK = "work"
    TEMP = "temp"
    OLD = "old"
    BILLING = "billing"


@dataclass
class Address:
    """A postal address."""

    use_type: AddressUse | None = None
    line1: str | None = None
    line2: str | None = None
    city: str | None = None
    state: str | None = None
    postal_code: str | None = None
    country: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "use_type": self.use_type.value if self.use_type is not None else None,
            "line1": self.line1,
            "line2": self.line2,
            "city": self.city,
            "state": self.state,
            "postal_code": self.postal_code,
            "country": self.country,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Address:
        use_type = data.get("use_type")
        return cls(
            use_type=AddressUse(use_type) if use_type is not None else None,
            line1=data.get("line1"),
            line2=data.get("line2"),
            city=data.get("city"),
            state=data.get("state"),
            postal_code=data.get("postal_code"),
            country=data.get("country"),
        )


class ContactPointSystem(str, Enum):
    """Kind of telecom channel."""

    PHONE = "phone"
    FAX = "fax"
    EMAIL = "email"
    PAGER = "pager"
    URL = "url"
    SMS = "sms"
    OTHER = "other"


class ContactPointUse(str, Enum):
    """Purpose of a contact point."""

    HOME = "home"
    WORK = "work"
    TEMP = "temp"
    OLD = "old"
    MOBILE = "mobile"


@dataclass
class ContactPoint:
    """A phone number, e-mail address or other telecom contact."""

    system: ContactPointSystem
    value: str
    use_type: ContactPointUse | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "system": self.system.value,
            "value": self.value,
            "use_type": self.use_type.value if self.use_type is not None else None,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ContactPoint:
        use_type = data.get("use_type")
        return cls(
            system=ContactPointSystem(data["system"]),
            value=data["value"],
            use_type=ContactPointUse(use_type) if use_type is not None else None,
        )