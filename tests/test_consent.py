import json
import uuid
from datetime import date, datetime, timezone

import pytest

from workerindex.consent import Consent, ConsentStatus, ConsentType


def _consent(**overrides):
    values = dict(
        worker_id=uuid.uuid4(),
        consent_type=ConsentType.DATA_PROCESSING,
        status=ConsentStatus.ACTIVE,
        granted_date=date(2024, 1, 1),
        expiry_date=date(2099, 12, 31),
        purpose="General data processing",
        method="electronic",
    )
    values.update(overrides)
    return Consent(**values)


def test_round_trip_through_json():
    consent = _consent()
    restored = Consent.from_dict(json.loads(json.dumps(consent.to_dict())))
    assert restored == consent


def test_consent_type_wire_value():
    data = _consent().to_dict()
    assert data["consent_type"] == "dataprocessing"
    assert data["status"] == "active"


@pytest.mark.parametrize("member", list(ConsentType))
def test_every_consent_type_round_trips(member):
    consent = _consent(consent_type=member)
    assert Consent.from_dict(consent.to_dict()).consent_type is member


def test_new_consent_timestamps_match():
    consent = _consent()
    assert consent.updated_at == consent.created_at
    assert consent.created_at.tzinfo is not None


def test_from_dict_parses_utc_suffix():
    data = _consent().to_dict()
    data["created_at"] = "2024-01-01T00:00:00Z"
    data["updated_at"] = "2024-01-01T00:00:00.123456789Z"
    restored = Consent.from_dict(data)
    assert restored.created_at == datetime(2024, 1, 1, tzinfo=timezone.utc)
    assert restored.updated_at.microsecond == 123456


def test_optional_dates_absent():
    data = _consent(expiry_date=None).to_dict()
    del data["revoked_date"]
    restored = Consent.from_dict(data)
    assert restored.expiry_date is None
    assert restored.revoked_date is None


def test_unknown_consent_type_rejected():
    data = _consent().to_dict()
    data["consent_type"] = "telepathy"
    with pytest.raises(ValueError):
        Consent.from_dict(data)