"""Masking of sensitive fields, consent checks and personal data export."""

from __future__ import annotations

import copy
from datetime import datetime, timezone
from typing import Any, Iterable

from workerindex.common import ContactPointSystem
from workerindex.consent import Consent, ConsentStatus, ConsentType
from workerindex.identifier import IdentifierType
from workerindex.worker import Worker

_MASKED_IDENTIFIERS = frozenset(
    {IdentifierType.SSN, IdentifierType.TAX, IdentifierType.PPN, IdentifierType.DL}
)
_MASKED_TELECOM = frozenset(
    {ContactPointSystem.PHONE, ContactPointSystem.SMS, ContactPointSystem.FAX}
)
_VISIBLE = 4


def mask_value(value: str, visible_chars: int) -> str:
    """Replace alphanumerics with '*' except in the last ``visible_chars`` characters."""
    if len(value) <= visible_chars:
        return value
    split = len(value) - visible_chars
    hidden = "".join("*" if ch.isalnum() else ch for ch in value[:split])
    return hidden + value[split:]


def mask_worker(worker: Worker) -> Worker:
    """A copy of the worker with tax IDs, identifiers, documents and phones masked."""
    masked = copy.deepcopy(worker)
    if masked.tax_id is not None:
        masked.tax_id = mask_value(masked.tax_id, _VISIBLE)
    for ident in masked.identifiers:
        if ident.identifier_type in _MASKED_IDENTIFIERS:
            ident.value = mask_value(ident.value, _VISIBLE)
    for document in masked.documents:
        document.number = mask_value(document.number, _VISIBLE)
    for contact in masked.telecom:
        if contact.system in _MASKED_TELECOM:
            contact.value = mask_value(contact.value, _VISIBLE)
    return masked


def has_active_consent(consents: Iterable[Consent], consent_type: ConsentType) -> bool:
    """Whether any consent of this type is active and not past its expiry date."""
    today = datetime.now(timezone.utc).date()
    return any(
        c.consent_type == consent_type
        and c.status == ConsentStatus.ACTIVE
        and (c.expiry_date is None or c.expiry_date >= today)
        for c in consents
    )


def export_worker_data(worker: Worker) -> dict[str, Any]:
    """Everything stored about a worker, as JSON-ready data."""
    return worker.to_dict()