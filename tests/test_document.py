import json
from datetime import date

import pytest

from workerindex.document import DocumentType, IdentityDocument


def _read_type(wire):
    return IdentityDocument.from_dict(
        {"document_type": wire, "number": "X1", "verified": False}
    ).document_type


def test_document_type_variants():
    for doc_type in DocumentType:
        assert _read_type(str(doc_type)) is doc_type
        assert str(doc_type) != ""
    assert str(_read_type("PASSPORT")) == "PASSPORT"
    assert str(_read_type("DRIVERS_LICENSE")) == "DRIVERS_LICENSE"
    assert str(_read_type("OTHER")) == "OTHER"


def test_document_serialization():
    doc = IdentityDocument(
        document_type=DocumentType.PASSPORT,
        number="AB1234567",
        issuing_country="US",
        issuing_authority="State Dept",
        issue_date=date(2020, 1, 15),
        expiry_date=date(2030, 1, 15),
        verified=True,
    )
    text = json.dumps(doc.to_dict())
    deser = IdentityDocument.from_dict(json.loads(text))

    assert deser.document_type is DocumentType.PASSPORT
    assert deser.number == "AB1234567"
    assert deser.issuing_country == "US"
    assert deser.verified
    assert deser.issue_date == doc.issue_date
    assert deser.expiry_date == doc.expiry_date


def test_dates_serialize_as_iso():
    doc = IdentityDocument(DocumentType.VOTER_ID, "V1", issue_date=date(2020, 1, 15))
    data = doc.to_dict()
    assert data["issue_date"] == "2020-01-15"
    assert data["expiry_date"] is None


def test_unknown_document_type_reads_as_other():
    doc = IdentityDocument.from_dict(
        {"document_type": "LIBRARY_CARD", "number": "L1", "verified": False}
    )
    assert doc.document_type is DocumentType.OTHER


def test_verified_is_required():
    with pytest.raises(KeyError):
        IdentityDocument.from_dict({"document_type": "PASSPORT", "number": "X"})