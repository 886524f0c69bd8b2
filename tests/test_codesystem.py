import json

import pytest

from workerindex.codesystem import (
    GeographyNameReference,
    OdsRecordClassReference,
    OdsRecordUseTypeReference,
    OdsRelationshipReference,
    OdsRoleReference,
    PractitionerRoleReference,
)


def test_ods_role_reference():
    role = OdsRoleReference(role_id="RO197", role_name="NHS Trust", is_primary_role_type=True)
    assert role.to_dict()["is_primary_role_type"] is True


def test_ods_relationship_reference():
    rel = OdsRelationshipReference(relationship_id="RE4", relationship_name="IS COMMISSIONED BY")
    restored = OdsRelationshipReference.from_dict(rel.to_dict())
    assert restored.relationship_id == "RE4"


def test_practitioner_role_reference():
    role = PractitionerRoleReference(
        role_code="PGP", role_name="General Practitioner", role_category="Prescriber"
    )
    restored = PractitionerRoleReference.from_dict(json.loads(json.dumps(role.to_dict())))
    assert restored.role_code == "PGP"
    assert restored.role_category == "Prescriber"


def test_practitioner_role_category_optional():
    role = PractitionerRoleReference.from_dict({"role_code": "PGP", "role_name": "General Practitioner"})
    assert role.role_category is None


def test_geography_name_reference():
    geo = GeographyNameReference(
        ons_code="E09000033", name="Westminster", geography_type="Local Authority"
    )
    restored = GeographyNameReference.from_dict(geo.to_dict())
    assert restored.geography_type == "Local Authority"


def test_ods_record_class_reference():
    rc = OdsRecordClassReference(code="RC1", name="Organisation")
    assert OdsRecordClassReference.from_dict(rc.to_dict()).code == "RC1"


def test_ods_record_use_type_reference_round_trip():
    ref = OdsRecordUseTypeReference(code="RefOnly", name="Reference only")
    assert OdsRecordUseTypeReference.from_dict(json.loads(json.dumps(ref.to_dict()))) == ref


def test_ods_role_reference_serialization():
    role = OdsRoleReference(role_id="RO76", role_name="GP Practice", is_primary_role_type=True)
    deser = OdsRoleReference.from_dict(json.loads(json.dumps(role.to_dict())))
    assert deser.role_id == "RO76"
    assert deser.is_primary_role_type


def test_missing_required_field_rejected():
    with pytest.raises(KeyError):
        OdsRoleReference.from_dict({"role_id": "RO76", "role_name": "GP Practice"})