"""Worker change events and publishers for them."""

from __future__ import annotations

import logging
import re
import threading
import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass, field, fields
from datetime import datetime, timezone
from typing import Any, ClassVar, Mapping

from workerindex.worker import Worker

logger = logging.getLogger(__name__)

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


def _encode(value: Any) -> Any:
    if isinstance(value, Worker):
        return value.to_dict()
    if isinstance(value, datetime):
        return _format_datetime(value)
    if isinstance(value, uuid.UUID):
        return str(value)
    return value


class WorkerEvent(ABC):
    """A change to worker records, tagged by ``event_type`` when serialised."""

    event_type: ClassVar[str]
    timestamp: datetime

    @property
    @abstractmethod
    def worker_id(self) -> uuid.UUID:
        """The worker the event is about."""

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"event_type": self.event_type}
        for item in fields(self):  # type: ignore[arg-type]
            data[item.name] = _encode(getattr(self, item.name))
        return data


@dataclass
class WorkerCreated(WorkerEvent):
    """A worker record was created."""

    event_type: ClassVar[str] = "Created"
    worker: Worker
    timestamp: datetime = field(default_factory=_utcnow)

    @property
    def worker_id(self) -> uuid.UUID:
        return self.worker.id


@dataclass
class WorkerUpdated(WorkerEvent):
    """A worker record was updated."""

    event_type: ClassVar[str] = "Updated"
    worker: Worker
    timestamp: datetime = field(default_factory=_utcnow)

    @property
    def worker_id(self) -> uuid.UUID:
        return self.worker.id


@dataclass
class WorkerDeleted(WorkerEvent):
    """A worker record was deleted."""

    event_type: ClassVar[str] = "Deleted"
    deleted_id: uuid.UUID
    timestamp: datetime = field(default_factory=_utcnow)

    @property
    def worker_id(self) -> uuid.UUID:
        return self.deleted_id

    def to_dict(self) -> dict[str, Any]:
        return {
            "event_type": self.event_type,
            "worker_id": str(self.deleted_id),
            "timestamp": _format_datetime(self.timestamp),
        }


@dataclass
class WorkersMerged(WorkerEvent):
    """A source worker record was merged into a target."""

    event_type: ClassVar[str] = "Merged"
    source_id: uuid.UUID
    target_id: uuid.UUID
    timestamp: datetime = field(default_factory=_utcnow)

    @property
    def worker_id(self) -> uuid.UUID:
        return self.source_id


@dataclass
class WorkersLinked(WorkerEvent):
    """Two worker records were linked."""

    event_type: ClassVar[str] = "Linked"
    linking_id: uuid.UUID
    linked_id: uuid.UUID
    timestamp: datetime = field(default_factory=_utcnow)

    @property
    def worker_id(self) -> uuid.UUID:
        return self.linking_id

    def to_dict(self) -> dict[str, Any]:
        return {
            "event_type": self.event_type,
            "worker_id": str(self.linking_id),
            "linked_id": str(self.linked_id),
            "timestamp": _format_datetime(self.timestamp),
        }


@dataclass
class WorkersUnlinked(WorkerEvent):
    """A link between two worker records was removed."""

    event_type: ClassVar[str] = "Unlinked"
    unlinking_id: uuid.UUID
    unlinked_id: uuid.UUID
    timestamp: datetime = field(default_factory=_utcnow)

    @property
    def worker_id(self) -> uuid.UUID:
        return self.unlinking_id

    def to_dict(self) -> dict[str, Any]:
        return {
            "event_type": self.event_type,
            "worker_id": str(self.unlinking_id),
            "unlinked_id": str(self.unlinked_id),
            "timestamp": _format_datetime(self.timestamp),
        }


def event_from_dict(data: Mapping[str, Any]) -> WorkerEvent:
    """Rebuild an event from its tagged dictionary form."""
    event_type = data.get("event_type")
    timestamp = _parse_datetime(data["timestamp"])
    if event_type == "Created":
        return WorkerCreated(Worker.from_dict(data["worker"]), timestamp)
    if event_type == "Updated":
        return WorkerUpdated(Worker.from_dict(data["worker"]), timestamp)
    if event_type == "Deleted":
        return WorkerDeleted(uuid.UUID(data["worker_id"]), timestamp)
    if event_type == "Merged":
        return WorkersMerged(
            uuid.UUID(data["source_id"]), uuid.UUID(data["target_id"]), timestamp
        )
    if event_type == "Linked":
        return WorkersLinked(
            uuid.UUID(data["worker_id"]), uuid.UUID(data["linked_id"]), timestamp
        )
    if event_type == "Unlinked":
        return WorkersUnlinked(
            uuid.UUID(data["worker_id"]), uuid.UUID(data["unlinked_id"]), timestamp
        )
    raise ValueError(f"unknown worker event type: {event_type!r}")


class EventProducer(ABC):
    """Something that worker events can be published to."""

    @abstractmethod
    def publish(self, event: WorkerEvent) -> None:
        """Publish one worker event."""


class InMemoryEventPublisher(EventProducer):
    """Keeps published events in memory, in publication order; safe across threads."""

    def __init__(self) -> None:
        self._events: list[WorkerEvent] = []
        self._lock = threading.Lock()

    def publish(self, event: WorkerEvent) -> None:
        logger.info(
            "Publishing event: %s for worker %s", event.event_type, event.worker_id
        )
        with self._lock:
            self._events.append(event)

    def events(self) -> list[WorkerEvent]:
        """A snapshot of all events published so far."""
        with self._lock:
            return list(self._events)

    def clear(self) -> None:
        """Forget every published event."""
        with self._lock:
            self._events.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._events)