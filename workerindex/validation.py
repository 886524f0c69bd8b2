"""Data quality checks and standardisation for worker records."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone

from workerindex.common import Address, ContactPoint, ContactPointSystem
from workerindex.document import IdentityDocument
from workerindex.worker import Worker

_PHONE_SYSTEMS = frozenset(
    {ContactPointSystem.PHONE, ContactPointSystem.SMS, ContactPointSystem.FAX}
)
_MIN_PHONE_DIGITS = 7

_STREET_ABBREVIATIONS = (
    ("St.", "Street"),
    ("St ", "Street "),
    ("Ave.", "Avenue"),
    ("Ave ", "Avenue "),
    ("Rd.", "Road"),
    ("Rd ", "Road "),
    ("Dr.", "Drive"),
    ("Blvd.", "Boulevard"),
    ("Ln.", "Lane"),
    ("Ct.", "Court"),
)


@dataclass(frozen=True)
class ValidationIssue:
    """A problem found in a record: the field path and what is wrong with it."""

    field: str
    message: str


def _today():
    return datetime.now(timezone.utc).date()


def _blank(text: str | None) -> bool:
    return text is None or not text.strip()


def validate_worker(worker: Worker) -> list[ValidationIssue]:
    """Every validation issue found in a worker record, in field order."""
    issues: list[ValidationIssue] = []

    if _blank(worker.name.family):
        issues.append(ValidationIssue("name.family", "Family name is required"))

    if not any(given.strip() for given in worker.name.given):
        issues.append(
            ValidationIssue("name.given", "At least one given name is required")
        )

    if worker.birth_date is not None and worker.birth_date > _today():
        issues.append(
            ValidationIssue("birth_date", "Birth date cannot be in the future")
        )

    if worker.tax_id is not None and not any(
        ch.isascii() and ch.isalnum() for ch in worker.tax_id
    ):
        issues.append(
            ValidationIssue(
                "tax_id", "Tax ID must contain at least one alphanumeric character"
            )
        )

    for i, contact in enumerate(worker.telecom):
        issues.extend(validate_contact_point(contact, f"telecom[{i}]"))

    for i, address in enumerate(worker.addresses):
        issues.extend(validate_address(address, f"addresses[{i}]"))

    for i, document in enumerate(worker.documents):
        issues.extend(validate_document(document, f"documents[{i}]"))

    for i, contact in enumerate(worker.emergency_contacts):
        if _blank(contact.name):
            issues.append(
                ValidationIssue(
                    f"emergency_contacts[{i}].name",
                    "Emergency contact name is required",
                )
            )
        if _blank(contact.relationship):
            issues.append(
                ValidationIssue(
                    f"emergency_contacts[{i}].relationship",
                    "Emergency contact relationship is required",
                )
            )

    return issues


def validate_contact_point(contact: ContactPoint, prefix: str) -> list[ValidationIssue]:
    """Issues with one contact point; ``prefix`` is its path in the record."""
    field_path = f"{prefix}.value"
    if _blank(contact.value):
        return [ValidationIssue(field_path, "Contact value is required")]

    if contact.system == ContactPointSystem.EMAIL:
        if "@" not in contact.value or "." not in contact.value:
            return [ValidationIssue(field_path, "Invalid email format")]
    elif contact.system in _PHONE_SYSTEMS:
        digits = sum(1 for ch in contact.value if ch.isascii() and ch.isdigit())
        if digits < _MIN_PHONE_DIGITS:
            return [
                ValidationIssue(
                    field_path, "Phone number must have at least 7 digits"
                )
            ]
    return []


def validate_address(address: Address, prefix: str) -> list[ValidationIssue]:
    """Issues with one address: it needs a city, postal code or country."""
    if _blank(address.city) and _blank(address.postal_code) and _blank(address.country):
        return [
            ValidationIssue(
                prefix, "Address must have at least a city, postal code, or country"
            )
        ]
    return []


def validate_document(document: IdentityDocument, prefix: str) -> list[ValidationIssue]:
    """Issues with one identity document: number, expiry and date order."""
    issues: list[ValidationIssue] = []

    if _blank(document.number):
        issues.append(
            ValidationIssue(f"{prefix}.number", "Document number is required")
        )

    if document.expiry_date is not None and document.expiry_date < _today():
        issues.append(
            ValidationIssue(f"{prefix}.expiry_date", "Document has expired")
        )

    if (
        document.issue_date is not None
        and document.expiry_date is not None
        and document.issue_date > document.expiry_date
    ):
        issues.append(
            ValidationIssue(
                f"{prefix}.issue_date", "Issue date cannot be after expiry date"
            )
        )

    return issues


def normalize_phone(phone: str, default_country_code: str) -> str:
    """A phone number reduced to digits and written with a leading '+' and country code."""
    digits = "".join(ch for ch in phone if ch.isascii() and ch.isdigit())
    if not digits:
        return ""
    if len(digits) >= 10 and digits.startswith(default_country_code):
        return f"+{digits}"
    if len(digits) == 10:
        return f"+{default_country_code}{digits}"
    if phone.startswith("+"):
        return f"+{digits}"
    return f"+{default_country_code}{digits}"


def _normalize_street(street: str) -> str:
    result = street.strip()
    for short, full in _STREET_ABBREVIATIONS:
        result = result.replace(short, full)
    return result


def _title_case(text: str) -> str:
    return " ".join(word[0].upper() + word[1:].lower() for word in text.split())


def standardize_address(address: Address) -> Address:
    """A copy of the address trimmed, re-cased and with street abbreviations expanded."""
    return Address(
        use_type=address.use_type,
        line1=_normalize_street(address.line1) if address.line1 is not None else None,
        line2=address.line2.strip() if address.line2 is not None else None,
        city=_title_case(address.city.strip()) if address.city is not None else None,
        state=address.state.strip().upper() if address.state is not None else None,
        postal_code=(
            address.postal_code.strip() if address.postal_code is not None else None
        ),
        country=address.country.strip().upper() if address.country is not None else None,
    )