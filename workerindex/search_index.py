"""On-disk full-text index of worker records, with term, fuzzy and boolean queries."""

from __future__ import annotations

import json
import os
import re
import threading
import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Iterator, Mapping, Sequence, Union

META_FILE = "meta.json"
_SEGMENT_SUFFIX = ".segment.json"
_MAX_TERM_BYTES = 40
_MAX_FUZZY_DISTANCE = 2

_WORD_PATTERN = re.compile(r"[^\W_]+")
_FIELD_PREFIX = re.compile(r"([A-Za-z_][A-Za-z0-9_]*):(?=\S)")
_BARE_WORD = re.compile(r'[^\s"]+')


class SearchError(Exception):
    """Raised when the index cannot be created, read, written or queried."""


class FieldKind(str, Enum):
    """How a field's text is indexed."""

    TEXT = "text"  # split into lower-cased alphanumeric terms
    STRING = "string"  # indexed as one raw term


_WORKER_FIELDS = (
    ("id", FieldKind.STRING, True),
    ("family_name", FieldKind.TEXT, True),
    ("given_names", FieldKind.TEXT, True),
    ("full_name", FieldKind.TEXT, True),
    ("birth_date", FieldKind.STRING, True),
    ("gender", FieldKind.STRING, True),
    ("postal_code", FieldKind.STRING, True),
    ("city", FieldKind.TEXT, True),
    ("state", FieldKind.STRING, True),
    ("identifiers", FieldKind.TEXT, True),
    ("worker_type", FieldKind.STRING, True),
    ("active", FieldKind.STRING, False),
)


class WorkerIndexSchema:
    """The fields of the worker index: how each is indexed and whether it is stored."""

    def __init__(self) -> None:
        self.fields: dict[str, FieldKind] = {
            name: kind for name, kind, _ in _WORKER_FIELDS
        }
        self.stored: frozenset[str] = frozenset(
            name for name, _, stored in _WORKER_FIELDS if stored
        )

    def _kind(self, field: str) -> FieldKind:
        try:
            return self.fields[field]
        except KeyError:
            raise SearchError(f"Field does not exist: {field!r}") from None

    def tokens(self, field: str, text: str) -> list[str]:
        """The terms the given text is indexed as in the given field."""
        if self._kind(field) is FieldKind.STRING:
            return [text]
        return [
            term
            for term in (match.lower() for match in _WORD_PATTERN.findall(text))
            if len(term.encode("utf-8")) < _MAX_TERM_BYTES
        ]

    def _validate(self, document: Mapping[str, Any]) -> dict[str, str]:
        if not isinstance(document, Mapping):
            raise SearchError("A document must be a mapping of field names to text")
        checked: dict[str, str] = {}
        for name, value in document.items():
            self._kind(name)
            if not isinstance(value, str):
                raise SearchError(f"Value of field {name!r} must be text")
            checked[name] = value
        return checked

    def _stored(self, document: Mapping[str, str]) -> dict[str, str]:
        return {name: value for name, value in document.items() if name in self.stored}


class _Query(ABC):
    @abstractmethod
    def score(self, document: Mapping[str, str], schema: WorkerIndexSchema) -> float | None:
        """The document's score, or None when it does not match."""


@dataclass(frozen=True)
class TermQuery(_Query):
    """Matches documents whose field holds the exact term."""

    field: str
    text: str

    def score(self, document: Mapping[str, str], schema: WorkerIndexSchema) -> float | None:
        schema._kind(self.field)
        value = document.get(self.field)
        if value is None:
            return None
        count = schema.tokens(self.field, value).count(self.text)
        return float(count) if count else None


def _edit_distance(left: str, right: str, transpositions: bool, limit: int) -> int:
    if abs(len(left) - len(right)) > limit:
        return limit + 1
    before: list[int] | None = None
    previous = list(range(len(right) + 1))
    for i, left_char in enumerate(left, 1):
        current = [i] + [0] * len(right)
        for j, right_char in enumerate(right, 1):
            current[j] = min(
                previous[j] + 1,
                current[j - 1] + 1,
                previous[j - 1] + (left_char != right_char),
            )
            if (
                transpositions
                and before is not None
                and j > 1
                and left_char == right[j - 2]
                and left[i - 2] == right_char
            ):
                current[j] = min(current[j], before[j - 2] + 1)
        before, previous = previous, current
    return previous[-1]


@dataclass(frozen=True)
class FuzzyTermQuery(_Query):
    """Matches documents holding a term within an edit distance of the given text."""

    field: str
    text: str
    distance: int = 2
    transpositions: bool = True

    def __post_init__(self) -> None:
        if not 0 <= self.distance <= _MAX_FUZZY_DISTANCE:
            raise ValueError(
                f"Levenshtein distance of {self.distance} is not allowed"
            )

    def score(self, document: Mapping[str, str], schema: WorkerIndexSchema) -> float | None:
        schema._kind(self.field)
        value = document.get(self.field)
        if value is None:
            return None
        matched = any(
            _edit_distance(self.text, term, self.transpositions, self.distance)
            <= self.distance
            for term in schema.tokens(self.field, value)
        )
        return 1.0 if matched else None


@dataclass(frozen=True)
class _PhraseQuery(_Query):
    field: str
    terms: tuple[str, ...]

    def score(self, document: Mapping[str, str], schema: WorkerIndexSchema) -> float | None:
        schema._kind(self.field)
        value = document.get(self.field)
        if value is None:
            return None
        terms = schema.tokens(self.field, value)
        width = len(self.terms)
        count = sum(
            1
            for start in range(len(terms) - width + 1)
            if tuple(terms[start:start + width]) == self.terms
        )
        return float(count) if count else None


class Occur(Enum):
    """How a clause of a boolean query takes part in matching."""

    MUST = "must"
    SHOULD = "should"
    MUST_NOT = "must_not"


@dataclass(frozen=True)
class BooleanQuery(_Query):
    """Combines clauses: all MUST match, no MUST_NOT matches, SHOULD adds score."""

    clauses: tuple[tuple[Occur, _Query], ...]

    def __post_init__(self) -> None:
        clauses = tuple((Occur(occur), query) for occur, query in self.clauses)
        object.__setattr__(self, "clauses", clauses)

    @classmethod
    def intersection(cls, queries: Sequence[_Query]) -> BooleanQuery:
        """A query matching only documents that every given query matches."""
        return cls(tuple((Occur.MUST, query) for query in queries))

    def score(self, document: Mapping[str, str], schema: WorkerIndexSchema) -> float | None:
        total = 0.0
        required = False
        optional_hit = False
        for occur, query in self.clauses:
            result = query.score(document, schema)
            if occur is Occur.MUST_NOT:
                if result is not None:
                    return None
            elif occur is Occur.MUST:
                if result is None:
                    return None
                required = True
                total += result
            elif result is not None:
                optional_hit = True
                total += result
        if not required and not optional_hit:
            return None
        return total


Query = Union[TermQuery, FuzzyTermQuery, BooleanQuery, _PhraseQuery]

_DEFAULT_SCHEMA = WorkerIndexSchema()


def _scan(text: str) -> Iterator[tuple[Occur, str | None, str]]:
    pos = 0
    end = len(text)
    while pos < end:
        if text[pos].isspace():
            pos += 1
            continue
        occur = Occur.SHOULD
        if text[pos] in "+-":
            occur = Occur.MUST if text[pos] == "+" else Occur.MUST_NOT
            pos += 1
        field_name = None
        prefix = _FIELD_PREFIX.match(text, pos)
        if prefix:
            field_name = prefix.group(1)
            pos = prefix.end()
        if pos < end and text[pos] == '"':
            closing = text.find('"', pos + 1)
            if closing < 0:
                raise SearchError("Failed to parse query: unterminated quoted phrase")
            yield occur, field_name, text[pos + 1:closing]
            pos = closing + 1
            continue
        word = _BARE_WORD.match(text, pos)
        if word is None:
            raise SearchError(f"Failed to parse query: unexpected input at {pos}")
        yield occur, field_name, word.group()
        pos = word.end()


def _field_query(field: str, body: str) -> _Query | None:
    if _DEFAULT_SCHEMA._kind(field) is FieldKind.STRING:
        return TermQuery(field, body)
    terms = _DEFAULT_SCHEMA.tokens(field, body)
    if not terms:
        return None
    if len(terms) == 1:
        return TermQuery(field, terms[0])
    return _PhraseQuery(field, tuple(terms))


def parse_query(text: str, fields: Sequence[str]) -> BooleanQuery:
    """Parse a user query: words, "phrases", field:word, +required and -excluded."""
    default_fields = list(fields)
    for name in default_fields:
        _DEFAULT_SCHEMA._kind(name)
    clauses: list[tuple[Occur, _Query]] = []
    for occur, field_name, body in _scan(text):
        targets = [field_name] if field_name else default_fields
        if not targets:
            raise SearchError("Failed to parse query: no default field declared")
        options = [q for q in (_field_query(t, body) for t in targets) if q is not None]
        if not options:
            continue
        if len(options) == 1:
            clauses.append((occur, options[0]))
        else:
            clauses.append(
                (occur, BooleanQuery(tuple((Occur.SHOULD, q) for q in options)))
            )
    if clauses and all(occur is Occur.MUST_NOT for occur, _ in clauses):
        raise SearchError("Failed to parse query: only excluding terms given")
    return BooleanQuery(tuple(clauses))


@dataclass(frozen=True)
class IndexStats:
    """Number of live documents and of segments in the index."""

    num_docs: int
    num_segments: int


@dataclass(frozen=True)
class _Delete:
    field: str
    value: str


class IndexWriter:
    """Collects additions and deletions; nothing is visible until commit."""

    def __init__(self, index: WorkerIndex) -> None:
        self._index = index
        self._operations: list[dict[str, str] | _Delete] = []

    def add_document(self, document: Mapping[str, str]) -> None:
        """Queue a document for addition."""
        self._operations.append(self._index.schema._validate(document))

    def delete_term(self, field: str, value: str) -> None:
        """Queue deletion of every document, added before this call, holding the term."""
        self._index.schema._kind(field)
        self._operations.append(_Delete(field, value))

    def commit(self) -> int:
        """Apply the queued operations to the index and return the new opstamp."""
        operations, self._operations = self._operations, []
        return self._index._apply(operations)

    def _rollback(self) -> None:
        self._operations.clear()

    def __enter__(self) -> IndexWriter:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self._rollback()


class WorkerIndex:
    """A worker search index kept as segment files in a directory."""

    def __init__(self, path: Path) -> None:
        self.path = path
        self.schema = WorkerIndexSchema()
        self._lock = threading.RLock()
        self._segments: list[list[dict[str, str]]] = []

    @classmethod
    def create(cls, index_path: str | os.PathLike[str]) -> WorkerIndex:
        """Create a new, empty index in the directory."""
        path = Path(index_path)
        try:
            path.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise SearchError(f"Failed to create index: {exc}") from exc
        if (path / META_FILE).exists():
            raise SearchError(f"Failed to create index: an index already exists in {path}")
        index = cls(path)
        index._write_meta([], 0)
        index.reload()
        return index

    @classmethod
    def open(cls, index_path: str | os.PathLike[str]) -> WorkerIndex:
        """Open an index that already exists in the directory."""
        path = Path(index_path)
        if not (path / META_FILE).is_file():
            raise SearchError(f"Failed to open index: no index found in {path}")
        index = cls(path)
        expected = {name: kind.value for name, kind in index.schema.fields.items()}
        if index._read_meta().get("schema") != expected:
            raise SearchError("Failed to open index: schema does not match")
        index.reload()
        return index

    @classmethod
    def create_or_open(cls, index_path: str | os.PathLike[str]) -> WorkerIndex:
        """Open the index in the directory, creating it first if there is none."""
        if (Path(index_path) / META_FILE).exists():
            return cls.open(index_path)
        return cls.create(index_path)

    def writer(self) -> IndexWriter:
        """A writer for adding and deleting documents."""
        return IndexWriter(self)

    def reload(self) -> None:
        """Refresh the searchable view from what is committed on disk."""
        with self._lock:
            meta = self._read_meta()
            self._segments = [self._load_segment(name) for name in meta["segments"]]

    def stats(self) -> IndexStats:
        """Document and segment counts of the searchable view."""
        with self._lock:
            return IndexStats(
                num_docs=sum(len(segment) for segment in self._segments),
                num_segments=len(self._segments),
            )

    def optimize(self) -> None:
        """Merge all committed segments into one."""
        with self._lock:
            meta = self._read_meta()
            names = list(meta["segments"])
            if len(names) > 1:
                merged = [doc for name in names for doc in self._load_segment(name)]
                self._write_meta([self._write_segment(merged)], meta["opstamp"] + 1)
                for name in names:
                    self._remove_segment(name)
            self.reload()

    def search(self, query: _Query, limit: int) -> list[tuple[float, dict[str, str]]]:
        """The best-scoring documents, highest first, with their stored fields."""
        if limit < 1:
            raise ValueError("limit must be at least 1")
        with self._lock:
            documents = [doc for segment in self._segments for doc in segment]
        hits = [
            (score, doc)
            for doc in documents
            if (score := query.score(doc, self.schema)) is not None
        ]
        hits.sort(key=lambda hit: -hit[0])
        return [(score, self.schema._stored(doc)) for score, doc in hits[:limit]]

    def _apply(self, operations: Sequence[dict[str, str] | _Delete]) -> int:
        with self._lock:
            meta = self._read_meta()
            order = list(meta["segments"])
            segments = {name: self._load_segment(name) for name in order}
            changed: set[str] = set()
            added: list[dict[str, str]] = []
            for operation in operations:
                if isinstance(operation, _Delete):
                    query = TermQuery(operation.field, operation.value)
                    for name in order:
                        kept = [d for d in segments[name] if query.score(d, self.schema) is None]
                        if len(kept) != len(segments[name]):
                            segments[name] = kept
                            changed.add(name)
                    added = [d for d in added if query.score(d, self.schema) is None]
                else:
                    added.append(operation)
            new_order: list[str] = []
            for name in order:
                if name not in changed:
                    new_order.append(name)
                elif segments[name]:
                    new_order.append(self._write_segment(segments[name]))
            if added:
                new_order.append(self._write_segment(added))
            opstamp = meta["opstamp"] + 1
            self._write_meta(new_order, opstamp)
            for name in changed:
                self._remove_segment(name)
            self.reload()
            return opstamp

    def _read_meta(self) -> dict[str, Any]:
        try:
            meta = json.loads((self.path / META_FILE).read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            raise SearchError(f"Failed to read index metadata: {exc}") from exc
        if (
            not isinstance(meta, dict)
            or not isinstance(meta.get("segments"), list)
            or not isinstance(meta.get("opstamp"), int)
        ):
            raise SearchError("Failed to read index metadata: malformed metadata")
        return meta

    def _write_meta(self, segments: list[str], opstamp: int) -> None:
        meta = {
            "schema": {name: kind.value for name, kind in self.schema.fields.items()},
            "segments": segments,
            "opstamp": opstamp,
        }
        self._atomic_write(self.path / META_FILE, meta)

    def _load_segment(self, name: str) -> list[dict[str, str]]:
        try:
            data = json.loads((self.path / name).read_text(encoding="utf-8"))
            return [dict(doc) for doc in data["documents"]]
        except (OSError, ValueError, KeyError, TypeError) as exc:
            raise SearchError(f"Failed to read segment {name}: {exc}") from exc

    def _write_segment(self, documents: list[dict[str, str]]) -> str:
        name = uuid.uuid4().hex + _SEGMENT_SUFFIX
        self._atomic_write(self.path / name, {"documents": documents})
        return name

    def _remove_segment(self, name: str) -> None:
        try:
            (self.path / name).unlink()
        except FileNotFoundError:
            pass
        except OSError as exc:
            raise SearchError(f"Failed to remove segment {name}: {exc}") from exc

    @staticmethod
    def _atomic_write(target: Path, payload: Any) -> None:
        temporary = target.with_name(f"{target.name}.{uuid.uuid4().hex}.tmp")
        try:
            temporary.write_text(json.dumps(payload), encoding="utf-8")
            os.replace(temporary, target)
        except OSError as exc:
            raise SearchError(f"Failed to write {target.name}: {exc}") from exc