"""Deduplication review queue and batch deduplication requests."""

from __future__ import annotations

import re
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Mapping

DEFAULT_THRESHOLD = 0.7
DEFAULT_MAX_CANDIDATES = 50
DEFAULT_AUTO_MERGE_THRESHOLD = 0.95

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


class ReviewStatus(str, Enum):
    """Where a potential duplicate pair stands in review."""

    PENDING = "pending"
    CONFIRMED = "confirmed"
    REJECTED = "rejected"
    AUTO_MERGED = "automerged"


@dataclass(kw_only=True)
class ReviewQueueItem:
    """A potential duplicate pair awaiting or having had review."""

    id: uuid.UUID = field(default_factory=uuid.uuid4)
    worker_id_a: uuid.UUID
    worker_id_b: uuid.UUID
    match_score: float
    match_quality: str
    detection_method: str
    score_breakdown: Any = None
    status: ReviewStatus = ReviewStatus.PENDING
    reviewed_by: str | None = None
    created_at: datetime = field(default_factory=_utcnow)
    reviewed_at: datetime | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": str(self.id),
            "worker_id_a": str(self.worker_id_a),
            "worker_id_b": str(self.worker_id_b),
            "match_score": self.match_score,
            "match_quality": self.match_quality,
            "detection_method": self.detection_method,
            "score_breakdown": self.score_breakdown,
            "status": self.status.value,
            "reviewed_by": self.reviewed_by,
            "created_at": _format_datetime(self.created_at),
            "reviewed_at": (
                _format_datetime(self.reviewed_at) if self.reviewed_at is not None else None
            ),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ReviewQueueItem:
        reviewed_at = data.get("reviewed_at")
        return cls(
            id=uuid.UUID(data["id"]),
            worker_id_a=uuid.UUID(data["worker_id_a"]),
            worker_id_b=uuid.UUID(data["worker_id_b"]),
            match_score=float(data["match_score"]),
            match_quality=data["match_quality"],
            detection_method=data["detection_method"],
            score_breakdown=data.get("score_breakdown"),
            status=ReviewStatus(data["status"]),
            reviewed_by=data.get("reviewed_by"),
            created_at=_parse_datetime(data["created_at"]),
            reviewed_at=_parse_datetime(reviewed_at) if reviewed_at is not None else None,
        )


@dataclass
class BatchDeduplicationRequest:
    """Parameters for a batch deduplication run."""

    threshold: float = DEFAULT_THRESHOLD
    max_candidates: int = DEFAULT_MAX_CANDIDATES
    auto_merge_threshold: float = DEFAULT_AUTO_MERGE_THRESHOLD

    def __post_init__(self) -> None:
        if isinstance(self.max_candidates, bool) or not isinstance(self.max_candidates, int):
            raise TypeError("max_candidates must be an integer")
        if self.max_candidates < 0:
            raise ValueError("max_candidates must not be negative")

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> BatchDeduplicationRequest:
        return cls(
            threshold=float(data.get("threshold", DEFAULT_THRESHOLD)),
            max_candidates=data.get("max_candidates", DEFAULT_MAX_CANDIDATES),
            auto_merge_threshold=float(
                data.get("auto_merge_threshold", DEFAULT_AUTO_MERGE_THRESHOLD)
            ),
        )


@dataclass
class BatchDeduplicationResponse:
    """Outcome of a batch deduplication run."""

    workers_scanned: int
    duplicates_found: int
    auto_merged: int
    queued_for_review: int
    review_items: list[ReviewQueueItem] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "workers_scanned": self.workers_scanned,
            "duplicates_found": self.duplicates_found,
            "auto_merged": self.auto_merged,
            "queued_for_review": self.queued_for_review,
            "review_items": [item.to_dict() for item in self.review_items],
        }