from datetime import date

import pytest

from workerindex.common import Address, ContactPoint, ContactPointSystem, Gender
from workerindex.document import DocumentType, IdentityDocument
from workerindex.emergency_contact import EmergencyContact
from workerindex.validation import (
    ValidationIssue,
    normalize_phone,
    standardize_address,
    validate_address,
    validate_contact_point,
    validate_document,
    validate_worker,
)
from workerindex.worker import HumanName, Worker


def make_worker(family="Smith", given=("John",)):
    return Worker(HumanName(family=family, given=list(given)), Gender.MALE)


def test_validate_missing_family_name():
    issues = validate_worker(make_worker(family=""))
    assert any(issue.field == "name.family" for issue in issues)


def test_validate_missing_given_names():
    issues = validate_worker(make_worker(given=("  ",)))
    assert [issue.field for issue in issues] == ["name.given"]


def test_validate_valid_worker():
    assert validate_worker(make_worker()) == []


def test_validate_future_birth_date():
    worker = make_worker()
    worker.birth_date = date(2099, 1, 1)
    issues = validate_worker(worker)
    assert any(issue.field == "birth_date" for issue in issues)


def test_validate_invalid_email():
    worker = make_worker()
    worker.telecom.append(ContactPoint(ContactPointSystem.EMAIL, "not-an-email"))
    issues = validate_worker(worker)
    assert any("telecom" in i.field and "email" in i.message for i in issues)


def test_valid_email_passes():
    contact = ContactPoint(ContactPointSystem.EMAIL, "jane@example.com")
    assert validate_contact_point(contact, "telecom[0]") == []


def test_validate_invalid_phone():
    worker = make_worker()
    worker.telecom.append(ContactPoint(ContactPointSystem.PHONE, "123"))
    issues = validate_worker(worker)
    assert any("telecom" in i.field and "7 digits" in i.message for i in issues)


def test_empty_contact_value():
    contact = ContactPoint(ContactPointSystem.PHONE, "   ")
    assert validate_contact_point(contact, "telecom[2]") == [
        ValidationIssue("telecom[2].value", "Contact value is required")
    ]


def test_validate_tax_id_format():
    worker = make_worker()
    worker.tax_id = "---"
    issues = validate_worker(worker)
    assert any(issue.field == "tax_id" for issue in issues)


def test_validate_document_missing_number():
    worker = make_worker()
    worker.documents.append(
        IdentityDocument(DocumentType.PASSPORT, "", issuing_country="US")
    )
    issues = validate_worker(worker)
    assert any("number" in issue.field for issue in issues)


def test_validate_document_expired():
    worker = make_worker()
    worker.documents.append(
        IdentityDocument(
            DocumentType.PASSPORT,
            "X12345678",
            issuing_country="US",
            expiry_date=date(2020, 1, 1),
        )
    )
    issues = validate_worker(worker)
    assert any("expired" in issue.message for issue in issues)


def test_document_issue_after_expiry():
    document = IdentityDocument(
        DocumentType.PASSPORT,
        "X12345678",
        issue_date=date(2099, 1, 2),
        expiry_date=date(2099, 1, 1),
    )
    issues = validate_document(document, "documents[0]")
    assert [issue.field for issue in issues] == ["documents[0].issue_date"]


def test_validate_emergency_contact_missing_name():
    worker = make_worker()
    worker.emergency_contacts.append(
        EmergencyContact(name="", relationship="spouse", is_primary=True)
    )
    issues = validate_worker(worker)
    assert any(
        "emergency_contacts" in i.field and "name" in i.message for i in issues
    )


def test_validate_address_incomplete():
    worker = make_worker()
    worker.addresses.append(Address(line1="123 Main St"))
    issues = validate_worker(worker)
    assert any("addresses" in i.field and "city" in i.message for i in issues)


def test_address_with_country_only_is_valid():
    assert validate_address(Address(country="GB"), "addresses[0]") == []


def test_normalize_phone_empty():
    assert normalize_phone("no digits", "1") == ""


def test_normalize_phone_ten_digits_gets_country_code():
    digits = "".join(str(i) for i in range(10))
    assert normalize_phone(digits, "1") == "+1" + digits


def test_normalize_phone_international():
    digits = "44" + "1" * 9
    assert normalize_phone(digits, "44") == "+" + digits


def test_normalize_phone_plus_kept():
    assert normalize_phone("+12345", "44") == "+12345"


def test_normalize_phone_short_gets_country_code():
    assert normalize_phone("12345", "1") == "+112345"


def test_normalize_phone_with_extensions():
    result = normalize_phone("555 ext. 100", "1")
    assert result.startswith("+")
    assert result[1:].isdigit()


def test_standardize_address():
    addr = Address(
        line1="123 main st.",
        city="new york",
        state="ny",
        postal_code="10001",
        country="us",
    )
    std = standardize_address(addr)
    assert std.city == "New York"
    assert std.state == "NY"
    assert std.country == "US"
    assert std.postal_code == "10001"


def test_standardize_address_abbreviations():
    addr = Address(line1="100 Oak Ave.", city="los angeles", state="ca", country="us")
    assert standardize_address(addr).line1 == "100 Oak Avenue"


@pytest.mark.parametrize(
    "line, expected",
    [
        ("12 Main St Apt", "12 Main Street Apt"),
        ("  9 Elm Rd. ", "9 Elm Road"),
        ("4 Park Dr.", "4 Park Drive"),
    ],
)
def test_standardize_street_lines(line, expected):
    assert standardize_address(Address(line1=line)).line1 == expected


def test_standardize_address_case():
    addr = Address(city="SAN FRANCISCO", state="california", country="united states")
    std = standardize_address(addr)
    assert std.city == "San Francisco"
    assert std.state == "CALIFORNIA"
    assert std.country == "UNITED STATES"
    assert std.line1 is None