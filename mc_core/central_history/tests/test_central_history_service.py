import datetime

import pytest
from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import IntegrityError
from rest_framework.exceptions import NotFound, ValidationError

from mc_core.central_history import services as central_services
from mc_core.central_history.models import CentralPatient, VisitEntry
from mc_core.central_history.services import CentralHistoryService
from mc_core.common.api.exceptions import RecordAccessDenied
from mc_core.facilities.authenticator import FacilityAuthenticator

pytestmark = pytest.mark.django_db


def _demographics(**overrides):
    data = {
        "first_name": "Abel",
        "last_name": "Girma",
        "date_of_birth": datetime.date(1990, 5, 17),
        "gender": "Male",
        "blood_group": "",
    }
    data.update(overrides)
    return data


def _visit(diagnosis="Malaria", **overrides):
    data = {
        "doctor_notes": {"diagnosis": diagnosis, "treatment_plan": "Artemether", "prescriptions": []},
        "lab_results": [{"testName": "Blood smear", "result": "positive", "date": "2026-01-02"}],
        "prescriptions": [{"medicationName": "Coartem", "dosage": "4 tabs", "frequency": "2x", "duration": "3 days"}],
    }
    data.update(overrides)
    return data


@pytest.fixture
def facility_a(facility, approved_key):
    return FacilityAuthenticator.resolve(approved_key)


@pytest.fixture
def facility_b(other_facility, other_approved_key):
    return FacilityAuthenticator.resolve(other_approved_key)


def test_two_facilities_build_one_longitudinal_record(facility_a, facility_b):
    first = CentralHistoryService.submit_visit(
        facility=facility_a, national_id="ET-001", demographics=_demographics(), visit=_visit("Malaria")
    )
    assert first.created is True
    assert first.visit.sequence == 1

    second = CentralHistoryService.submit_visit(
        facility=facility_b, national_id="ET-001", demographics=_demographics(), visit=_visit("Typhoid")
    )
    assert second.created is False
    assert second.patient.id == first.patient.id
    assert second.visit.sequence == 2

    history = CentralHistoryService.fetch_history(national_id="ET-001")
    assert history["totalRecords"] == 2
    assert [r["doctorNotes"]["diagnosis"] for r in history["records"]] == ["Typhoid", "Malaria"]
    assert history["records"][0]["facilityCode"] == "other"
    assert history["records"][1]["facilityCode"] == "main"
    assert history["fullName"] == "Abel Girma"


def test_blood_group_is_last_write_wins(facility_a, facility_b):
    CentralHistoryService.submit_visit(
        facility=facility_a, national_id="ET-002", demographics=_demographics(blood_group="A+"), visit=_visit()
    )
    CentralHistoryService.submit_visit(
        facility=facility_b, national_id="ET-002", demographics=_demographics(blood_group="O-"), visit=_visit()
    )

    assert CentralPatient.objects.get(national_id="ET-002").blood_group == "O-"


def test_demographics_other_than_blood_group_are_kept_from_first_submission(facility_a, facility_b):
    CentralHistoryService.submit_visit(facility=facility_a, national_id="ET-003", demographics=_demographics(), visit=_visit())
    CentralHistoryService.submit_visit(
        facility=facility_b, national_id="ET-003", demographics=_demographics(first_name="Changed"), visit=_visit()
    )

    assert CentralPatient.objects.get(national_id="ET-003").first_name == "Abel"


def test_duplicate_resubmission_appends_again(facility_a):
    for _ in range(2):
        CentralHistoryService.submit_visit(facility=facility_a, national_id="ET-004", demographics=_demographics(), visit=_visit())

    assert CentralHistoryService.fetch_history(national_id="ET-004")["totalRecords"] == 2


def test_missing_fields_are_all_reported(facility_a):
    with pytest.raises(ValidationError) as exc:
        CentralHistoryService.submit_visit(
            facility=facility_a,
            national_id="ET-005",
            demographics={"first_name": "", "last_name": "Girma", "date_of_birth": None, "gender": "Male"},
            visit={},
        )

    assert set(exc.value.detail) == {"first_name", "date_of_birth", "doctor_notes"}
    assert not CentralPatient.objects.filter(national_id="ET-005").exists()


def test_fetch_unknown_national_id_is_not_found():
    with pytest.raises(NotFound):
        CentralHistoryService.fetch_history(national_id="NOPE-404")


def test_lost_creation_race_retries_as_append(facility_a, facility_b, monkeypatch):
    CentralHistoryService.submit_visit(facility=facility_a, national_id="ET-006", demographics=_demographics(), visit=_visit())

    real = central_services._find_or_append
    calls = []

    def flaky(**kwargs):
        calls.append(kwargs["national_id"])
        if len(calls) == 1:
            raise IntegrityError("duplicate key value violates unique constraint")
        return real(**kwargs)

    monkeypatch.setattr(central_services, "_find_or_append", flaky)

    result = CentralHistoryService.submit_visit(
        facility=facility_b, national_id="ET-006", demographics=_demographics(), visit=_visit()
    )

    assert calls == ["ET-006", "ET-006"]
    assert result.created is False
    assert result.visit.sequence == 2


def test_visit_entries_are_append_only(facility_a):
    result = CentralHistoryService.submit_visit(
        facility=facility_a, national_id="ET-007", demographics=_demographics(), visit=_visit()
    )
    entry = VisitEntry.objects.get(id=result.visit.id)

    entry.lab_results = []
    with pytest.raises(DjangoValidationError):
        entry.save()
    with pytest.raises(DjangoValidationError):
        entry.delete()


def test_prescription_back_reference_only_from_originating_facility(facility_a, facility_b):
    result = CentralHistoryService.submit_visit(
        facility=facility_a, national_id="ET-008", demographics=_demographics(), visit=_visit()
    )

    entry = CentralHistoryService.attach_prescription_reference(
        facility=facility_a, national_id="ET-008", visit_id=result.visit.id, prescription_ref="RX-1"
    )
    assert entry.doctor_notes["prescriptions"] == ["RX-1"]

    # Set semantics
    entry = CentralHistoryService.attach_prescription_reference(
        facility=facility_a, national_id="ET-008", visit_id=result.visit.id, prescription_ref="RX-1"
    )
    assert entry.doctor_notes["prescriptions"] == ["RX-1"]

    with pytest.raises(RecordAccessDenied):
        CentralHistoryService.attach_prescription_reference(
            facility=facility_b, national_id="ET-008", visit_id=result.visit.id, prescription_ref="RX-2"
        )

    assert VisitEntry.objects.get(id=result.visit.id).doctor_notes["prescriptions"] == ["RX-1"]
