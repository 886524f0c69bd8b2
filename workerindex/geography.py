"""Health and social care boundaries a postcode falls within."""

from __future__ import annotations

from dataclasses import asdict, dataclass, fields
from typing import Any, Mapping


@dataclass
class PostcodeGeography:
    """Geographic boundary codes and names for one postcode."""

    postcode: str
    lsoa11: str | None = None
    local_authority: str | None = None
    local_authority_name: str | None = None
    icb: str | None = None
    icb_name: str | None = None
    nhs_england_region: str | None = None
    nhs_england_region_name: str | None = None
    parliamentary_constituency: str | None = None
    parliamentary_constituency_name: str | None = None
    government_office_region: str | None = None
    cancer_alliance: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> PostcodeGeography:
        optional = {
            f.name: data.get(f.name) for f in fields(cls) if f.name != "postcode"
        }
        return cls(postcode=data["postcode"], **optional)