import json

import pytest

from workerindex.identifier import Identifier, IdentifierType, IdentifierUse


def test_mrn_builds_facility_system():
    ident = Identifier.mrn("north", "12345")
    assert ident.identifier_type is IdentifierType.MRN
    assert ident.system == "urn:oid:facility:north"
    assert ident.value == "12345"
    assert ident.use_type is None
    assert ident.assigner is None


def test_ssn_uses_standard_system():
    ident = Identifier.ssn("[national-id]")
    assert ident.identifier_type is IdentifierType.SSN
    assert ident.system == "http://hl7.org/fhir/sid/us-ssn"
    assert ident.value == "[national-id]"


@pytest.mark.parametrize("kind", list(IdentifierType))
def test_identifier_type_str_is_wire_value(kind):
    assert str(kind) == kind.value
    assert IdentifierType(str(kind)) is kind


def test_other_displays_as_other():
    assert str(IdentifierType("OTHER")) == "OTHER"


def test_unknown_type_reads_as_other():
    ident = Identifier.from_dict(
        {"identifier_type": "XYZ", "system": "s", "value": "v"}
    )
    assert ident.identifier_type is IdentifierType.OTHER


def test_round_trip():
    ident = Identifier(
        IdentifierType.NPI, "npi-system", "998877",
        use_type=IdentifierUse.OFFICIAL, assigner="Registry",
    )
    restored = Identifier.from_dict(json.loads(json.dumps(ident.to_dict())))
    assert restored == ident


def test_invalid_use_rejected():
    with pytest.raises(ValueError):
        Identifier.from_dict(
            {"identifier_type": "MRN", "system": "s", "value": "v", "use_type": "bogus"}
        )


def test_missing_value_rejected():
    with pytest.raises(KeyError):
        Identifier.from_dict({"identifier_type": "MRN", "system": "s"})