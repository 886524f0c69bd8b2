# workerindex

A library for keeping records of healthcare workers and the organisations
they work for. It provides record models with dictionary round trips,
data-quality checks, masking of sensitive fields, consent checks, worker
change events and a small on-disk full-text index with fuzzy name search.
It uses only the standard library.

## Installation

```
pip install .
```

The tests use pytest, available through the `test` extra:

```
pip install .[test]
pytest
```

## Modules

- `workerindex.common`: `Gender`, `Address`, `AddressUse`, `ContactPoint`,
  `ContactPointSystem`, `ContactPointUse`.
- `workerindex.identifier`: `Identifier` (with `Identifier.mrn` and
  `Identifier.ssn`), `IdentifierType` (unknown codes read as `OTHER`),
  `IdentifierUse`.
- `workerindex.document`: `IdentityDocument` and `DocumentType`.
- `workerindex.emergency_contact`: `EmergencyContact`.
- `workerindex.worker`: `Worker`, `HumanName`, `NameUse`, `WorkerType`,
  `WorkerLink`, `LinkType`. `Worker.full_name()` gives the given names
  followed by the family name; `Worker.effective_tax_id()` falls back to the
  first `TAX` identifier when `tax_id` is unset.
- `workerindex.ods`: ODS types — `OdsStatus`, `RecordClass`,
  `RecordUseType`, `PeriodType`, `DatePeriod`, `OrganizationRole`,
  `OrganizationRelationship`, `SuccessionType`, `OrganizationSuccession`.
- `workerindex.organization`: `Organization`, with `primary_role()`,
  `active_relationships()`, `predecessors()` and `successors()`.
  `from_dict` accepts data without the ODS fields.
- `workerindex.codesystem`: ODS reference data — `OdsRoleReference`,
  `OdsRelationshipReference`, `OdsRecordClassReference`,
  `OdsRecordUseTypeReference`, `PractitionerRoleReference`,
  `GeographyNameReference`.
- `workerindex.geography`: `PostcodeGeography`, the boundaries a postcode
  falls within.
- `workerindex.consent`: `Consent`, `ConsentType`, `ConsentStatus`.
- `workerindex.merge`: `MergeRecord`, `MergeStatus`, `MergeRequest`,
  `MergeResponse`.
- `workerindex.review_queue`: `ReviewQueueItem`, `ReviewStatus`,
  `BatchDeduplicationRequest` (defaults: threshold 0.7, 50 candidates,
  auto-merge threshold 0.95) and `BatchDeduplicationResponse`.
- `workerindex.validation`: `validate_worker` returns a list of
  `ValidationIssue` values (field path and message; empty when the record
  passes). Also `validate_contact_point`, `validate_address`,
  `validate_document`, `normalize_phone` and `standardize_address`.
- `workerindex.privacy`: `mask_value`, `mask_worker` (tax ID, SSN/TAX/PPN/DL
  identifiers, document numbers and phone/SMS/fax numbers keep only their
  last four characters), `has_active_consent` and `export_worker_data`.
- `workerindex.streaming`: the events `WorkerCreated`, `WorkerUpdated`,
  `WorkerDeleted`, `WorkersMerged`, `WorkersLinked`, `WorkersUnlinked`
  (each with `worker_id`, `timestamp` and `to_dict()`), `event_from_dict`,
  the `EventProducer` base class and `InMemoryEventPublisher`, which keeps
  events in order and offers `events()`, `clear()` and `len()`.
- `workerindex.search_index`: `WorkerIndex`, a directory of JSON segment
  files with a `meta.json`. `WorkerIndex.create`, `open` and
  `create_or_open`; `writer()` returns an `IndexWriter` whose additions and
  deletions become visible on `commit()`; `search(query, limit)` returns
  `(score, stored fields)` pairs. Queries are `TermQuery`,
  `FuzzyTermQuery` (edit distance up to 2), `BooleanQuery` with `Occur`
  clauses, or `parse_query(text, fields)`, which understands words,
  `"phrases"`, `field:word`, `+required` and `-excluded`. Errors raise
  `SearchError`.
- `workerindex.search`: `SearchEngine(index_path)` with `index_worker`,
  `index_workers`, `search`, `fuzzy_search`, `search_by_name_and_year`,
  `delete_worker`, `stats`, `optimize` and `reload`; each search returns
  worker IDs, best first. `worker_document` builds the index document for a
  worker.
- `workerindex.observability`: `init_telemetry(service_name, log_level)`
  sends root logging to standard output as JSON lines via
  `JsonLogFormatter`; the environment variable `WORKERINDEX_LOG_LEVEL`, when
  it holds a valid level, takes precedence. `shutdown_telemetry()` removes
  the handler again.

Every model has `to_dict()` and, where it is read from input,
`from_dict()`, for JSON-ready dictionaries.

## Example

```python
import tempfile

from workerindex.common import Gender
from workerindex.privacy import mask_value
from workerindex.search import SearchEngine
from workerindex.validation import validate_worker
from workerindex.worker import HumanName, Worker, WorkerType

worker = Worker(HumanName(family="Smith", given=["John"]), Gender.MALE)
worker.worker_type = WorkerType.DOCTOR

assert validate_worker(worker) == []
assert worker.full_name() == "John Smith"
assert mask_value("AB12345", 4) == "***2345"

with tempfile.TemporaryDirectory() as index_dir:
    engine = SearchEngine(index_dir)
    engine.index_worker(worker)
    assert engine.fuzzy_search("Smyth", 10) == [str(worker.id)]
```

## What it does not do

- There is no command, web API or server; everything is used from Python.
- Worker and organisation records are not stored anywhere: there is no
  database layer, only the models and their dictionary forms. The search
  index keeps only the indexed document fields.
- There is no duplicate matching or merging logic; `merge` and
  `review_queue` hold the records such a process would produce.
- Events are published only to `InMemoryEventPublisher`; there is no
  publisher for a message broker and no event consumer.
- `observability` configures JSON logging only; it exports no metrics or
  traces.