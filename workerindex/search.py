"""Worker search: indexing worker records and finding them by name, identifier or birth year."""

from __future__ import annotations

import os
import uuid
from typing import Iterable

from workerindex.search_index import (
    BooleanQuery,
    FuzzyTermQuery,
    IndexStats,
    Occur,
    SearchError,
    WorkerIndex,
    parse_query,
)
from workerindex.worker import Worker

_QUERY_FIELDS = ("full_name", "family_name", "given_names", "identifiers")
_FUZZY_DISTANCE = 2


def worker_document(worker: Worker) -> dict[str, str]:
    """The index document for a worker, one text value per schema field."""
    identifiers = " ".join(
        f"{ident.identifier_type}:{ident.value}" for ident in worker.identifiers
    )
    primary = worker.addresses[0] if worker.addresses else None
    return {
        "id": str(worker.id),
        "family_name": worker.name.family,
        "given_names": " ".join(worker.name.given),
        "full_name": worker.full_name(),
        "birth_date": (
            worker.birth_date.isoformat() if worker.birth_date is not None else ""
        ),
        "gender": worker.gender.name.lower(),
        "postal_code": (primary.postal_code or "") if primary is not None else "",
        "city": (primary.city or "") if primary is not None else "",
        "state": (primary.state or "") if primary is not None else "",
        "identifiers": identifiers,
        "worker_type": str(worker.worker_type) if worker.worker_type is not None else "",
        "active": "true" if worker.active else "false",
    }


class SearchEngine:
    """Search engine over worker records, backed by an on-disk index."""

    def __init__(self, index_path: str | os.PathLike[str]) -> None:
        self._index = WorkerIndex.create_or_open(index_path)

    def index_worker(self, worker: Worker) -> None:
        """Add one worker to the index and commit."""
        self.index_workers([worker])

    def index_workers(self, workers: Iterable[Worker]) -> None:
        """Add many workers to the index in a single commit."""
        with self._index.writer() as writer:
            for worker in workers:
                writer.add_document(worker_document(worker))
            writer.commit()

    def search(self, query: str, limit: int) -> list[str]:
        """Worker IDs matching a query over names and identifiers, best first."""
        parsed = parse_query(query, _QUERY_FIELDS)
        return self._ids(parsed, limit)

    def fuzzy_search(self, query: str, limit: int) -> list[str]:
        """Worker IDs whose family name is within two edits of the query."""
        fuzzy = FuzzyTermQuery("family_name", query, _FUZZY_DISTANCE, True)
        return self._ids(fuzzy, limit)

    def search_by_name_and_year(
        self, family_name: str, birth_year: int | None, limit: int
    ) -> list[str]:
        """Worker IDs with a family name close to the given one; the birth year raises the score."""
        name_query = FuzzyTermQuery("family_name", family_name, _FUZZY_DISTANCE, True)
        final_query = name_query
        if birth_year is not None:
            try:
                year_query = parse_query(str(birth_year), ["birth_date"])
            except SearchError:
                year_query = None
            if year_query is not None:
                final_query = BooleanQuery(
                    ((Occur.MUST, name_query), (Occur.SHOULD, year_query))
                )
        return self._ids(final_query, limit)

    def delete_worker(self, worker_id: str | uuid.UUID) -> None:
        """Remove a worker from the index and commit."""
        with self._index.writer() as writer:
            writer.delete_term("id", str(worker_id))
            writer.commit()

    def stats(self) -> IndexStats:
        """Document and segment counts."""
        return self._index.stats()

    def optimize(self) -> None:
        """Merge the index segments."""
        self._index.optimize()

    def reload(self) -> None:
        """Refresh the searchable view from what is committed."""
        self._index.reload()

    def _ids(self, query, limit: int) -> list[str]:
        return [
            document["id"]
            for _score, document in self._index.search(query, limit)
            if "id" in document
        ]