import json
import uuid
from datetime import date

import pytest

from workerindex.common import Gender
from workerindex.identifier import Identifier, IdentifierType
from workerindex.worker import (
    HumanName,
    LinkType,
    NameUse,
    Worker,
    WorkerLink,
    WorkerType,
)


def _roundtrip(worker: Worker) -> Worker:
    return Worker.from_dict(json.loads(json.dumps(worker.to_dict())))


def test_worker_new_defaults():
    worker = Worker(HumanName("Doe", ["Jane"]), Gender.FEMALE)
    assert worker.active
    assert not worker.deceased
    assert worker.gender == Gender.FEMALE
    assert worker.name.family == "Doe"
    assert worker.name.given == ["Jane"]
    assert worker.identifiers == []
    assert worker.addresses == []
    assert worker.telecom == []
    assert worker.documents == []
    assert worker.emergency_contacts == []
    assert worker.links == []
    assert worker.worker_type is None
    assert worker.birth_date is None
    assert worker.tax_id is None
    assert worker.marital_status is None
    assert worker.managing_organization is None
    assert worker.updated_at == worker.created_at


def test_worker_serialization_roundtrip():
    name = HumanName(
        "Smith",
        ["John", "Michael"],
        prefix=["Dr."],
        suffix=["Jr."],
        use_type=NameUse.OFFICIAL,
    )
    worker = Worker(name, Gender.MALE)
    worker.birth_date = date(1985, 3, 20)
    worker.tax_id = "TAX-PLACEHOLDER"

    restored = _roundtrip(worker)
    assert restored.name.family == "Smith"
    assert len(restored.name.given) == 2
    assert restored.name.use_type == NameUse.OFFICIAL
    assert restored.gender == Gender.MALE
    assert restored.tax_id == "TAX-PLACEHOLDER"
    assert restored.birth_date == worker.birth_date
    assert restored.id == worker.id
    assert restored.created_at == worker.created_at


def test_human_name_display():
    worker = Worker(HumanName("Garcia", ["Maria", "Elena"]), Gender.FEMALE)
    assert worker.full_name() == "Maria Elena Garcia"


@pytest.mark.parametrize("worker_type", list(WorkerType))
def test_worker_type_variants(worker_type):
    assert WorkerType(json.loads(json.dumps(worker_type.value))) == worker_type


def test_worker_with_worker_type():
    worker = Worker(HumanName("Chen", ["Wei"], prefix=["Dr."]), Gender.MALE)
    worker.worker_type = WorkerType.DOCTOR
    assert worker.worker_type == WorkerType.DOCTOR
    assert str(worker.worker_type) == "doctor"
    assert _roundtrip(worker).worker_type == WorkerType.DOCTOR


@pytest.mark.parametrize("gender", list(Gender))
def test_gender_variants(gender):
    worker = Worker(HumanName("Doe", ["Alex"]), gender)
    assert _roundtrip(worker).gender == gender


def test_effective_tax_id_prefers_field():
    worker = Worker(HumanName("Doe", ["Jane"]), Gender.FEMALE)
    worker.tax_id = "FIELD-ID"
    worker.identifiers.append(Identifier(IdentifierType.TAX, "urn:tax", "IDENT-ID"))
    assert worker.effective_tax_id() == "FIELD-ID"


def test_effective_tax_id_falls_back_to_identifier():
    worker = Worker(HumanName("Doe", ["Jane"]), Gender.FEMALE)
    worker.identifiers.append(Identifier.mrn("north", "MRN-1"))
    worker.identifiers.append(Identifier(IdentifierType.TAX, "urn:tax", "IDENT-ID"))
    assert worker.effective_tax_id() == "IDENT-ID"


def test_effective_tax_id_absent():
    worker = Worker(HumanName("Doe", ["Jane"]), Gender.FEMALE)
    worker.identifiers.append(Identifier.mrn("north", "MRN-1"))
    assert worker.effective_tax_id() is None


def test_worker_links_roundtrip():
    other = uuid.uuid4()
    worker = Worker(HumanName("Doe", ["Jane"]), Gender.FEMALE)
    worker.links.append(WorkerLink(other, LinkType.REPLACED_BY))
    restored = _roundtrip(worker)
    assert restored.links[0].other_worker_id == other
    assert restored.links[0].link_type == LinkType.REPLACED_BY


def test_worker_from_dict_without_optional_lists():
    data = Worker(HumanName("Doe", ["Jane"]), Gender.FEMALE).to_dict()
    for key in ("documents", "emergency_contacts", "worker_type", "tax_id"):
        del data[key]
    restored = Worker.from_dict(data)
    assert restored.documents == []
    assert restored.emergency_contacts == []
    assert restored.tax_id is None


def test_worker_from_dict_rejects_unknown_gender():
    data = Worker(HumanName("Doe", ["Jane"]), Gender.FEMALE).to_dict()
    data["gender"] = "robot"
    with pytest.raises(ValueError):
        Worker.from_dict(data)