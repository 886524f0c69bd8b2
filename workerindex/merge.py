"""Records of merging duplicate worker records."""

from __future__ import annotations

import re
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Mapping

from workerindex.worker import Worker

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


class MergeStatus(str, Enum):
    """State of a merge operation."""

    COMPLETED = "completed"
    REVERSED = "reversed"


@dataclass(kw_only=True)
class MergeRecord:
    """A completed or reversed merge of a duplicate into a master record."""

    id: uuid.UUID = field(default_factory=uuid.uuid4)
    master_worker_id: uuid.UUID
    duplicate_worker_id: uuid.UUID
    status: MergeStatus = MergeStatus.COMPLETED
    merged_by: str | None = None
    merge_reason: str | None = None
    match_score: float | None = None
    transferred_data: Any = None
    merged_at: datetime = field(default_factory=_utcnow)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": str(self.id),
            "master_worker_id": str(self.master_worker_id),
            "duplicate_worker_id": str(self.duplicate_worker_id),
            "status": self.status.value,
            "merged_by": self.merged_by,
            "merge_reason": self.merge_reason,
            "match_score": self.match_score,
            "transferred_data": self.transferred_data,
            "merged_at": _format_datetime(self.merged_at),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> MergeRecord:
        score = data.get("match_score")
        return cls(
            id=uuid.UUID(data["id"]),
            master_worker_id=uuid.UUID(data["master_worker_id"]),
            duplicate_worker_id=uuid.UUID(data["duplicate_worker_id"]),
            status=MergeStatus(data["status"]),
            merged_by=data.get("merged_by"),
            merge_reason=data.get("merge_reason"),
            match_score=float(score) if score is not None else None,
            transferred_data=data.get("transferred_data"),
            merged_at=_parse_datetime(data["merged_at"]),
        )


@dataclass(kw_only=True)
class MergeRequest:
    """A request to merge a duplicate worker into a master worker."""

    master_worker_id: uuid.UUID
    duplicate_worker_id: uuid.UUID
    merge_reason: str | None = None
    merged_by: str | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> MergeRequest:
        return cls(
            master_worker_id=uuid.UUID(data["master_worker_id"]),
            duplicate_worker_id=uuid.UUID(data["duplicate_worker_id"]),
            merge_reason=data.get("merge_reason"),
            merged_by=data.get("merged_by"),
        )


@dataclass
class MergeResponse:
    """The merge record and the updated master worker."""

    merge_record: MergeRecord
    master_worker: Worker

    def to_dict(self) -> dict[str, Any]:
        return {
            "merge_record": self.merge_record.to_dict(),
            "master_worker": self.master_worker.to_dict(),
        }