import uuid
from datetime import timedelta

import pytest
from django.utils import timezone

from mc_core.common.api.exceptions import RECORD_ACCESS_DENIED_MSG, RecordAccessDenied
from mc_core.encounters.access import AccessControlGuard
from mc_core.encounters.models import Encounter

pytestmark = pytest.mark.django_db


def test_assigned_doctor_can_open_encounter(make_encounter, patient, doctor, principal_for):
    enc = make_encounter(patient, status="Assigned", doctor=doctor)

    assert AccessControlGuard.authorize_encounter(principal=principal_for(doctor), encounter_id=enc.id).id == enc.id


def test_denials_are_indistinguishable(make_encounter, patient, doctor, other_doctor, principal_for):
    enc = make_encounter(patient, status="Assigned", doctor=doctor)
    outsider = principal_for(other_doctor)

    messages = set()
    for encounter_id in (enc.id, uuid.uuid4(), "garbage"):
        with pytest.raises(RecordAccessDenied) as exc:
            AccessControlGuard.authorize_encounter(principal=outsider, encounter_id=encounter_id)
        messages.add(str(exc.value.detail))

    for patient_id in (patient.id, uuid.uuid4(), "garbage"):
        with pytest.raises(RecordAccessDenied) as exc:
            AccessControlGuard.authorize_patient(principal=outsider, patient_id=patient_id)
        messages.add(str(exc.value.detail))

    assert messages == {RECORD_ACCESS_DENIED_MSG}


def test_admin_role_does_not_grant_record_access(make_encounter, make_staff, patient, doctor, facility, principal_for):
    admin = make_staff("admin_user", "ADMIN", facility)
    enc = make_encounter(patient, status="Assigned", doctor=doctor)

    with pytest.raises(RecordAccessDenied):
        AccessControlGuard.authorize_encounter(principal=principal_for(admin), encounter_id=enc.id)


def test_patient_access_survives_completion(make_encounter, patient, doctor, principal_for):
    make_encounter(patient, status="Completed", doctor=doctor)

    got = AccessControlGuard.authorize_patient(principal=principal_for(doctor), patient_id=patient.id)
    assert got.id == patient.id


def test_assigned_encounters_only_active_and_own(make_encounter, make_patient, doctor, other_doctor, principal_for):
    assigned = make_encounter(make_patient(), status="Assigned", doctor=doctor)
    treating = make_encounter(make_patient(), status="InTreatment", doctor=doctor)
    make_encounter(make_patient(), status="Completed", doctor=doctor)
    make_encounter(make_patient(), status="Pending")
    make_encounter(make_patient(), status="Assigned", doctor=other_doctor)

    Encounter.objects.filter(id=assigned.id).update(created_at=timezone.now() - timedelta(hours=1))

    got = list(AccessControlGuard.assigned_encounters(principal=principal_for(doctor)))

    assert [e.id for e in got] == [treating.id, assigned.id]


def test_search_only_narrows(make_encounter, make_patient, doctor, other_doctor, principal_for):
    mine = make_encounter(make_patient(first_name="Tigist", last_name="Haile"), status="Assigned", doctor=doctor)
    make_encounter(make_patient(first_name="Yonas", last_name="Haile"), status="Assigned", doctor=doctor)
    make_encounter(make_patient(first_name="Tigist", last_name="Other"), status="Assigned", doctor=other_doctor)

    principal = principal_for(doctor)

    by_name = list(AccessControlGuard.assigned_encounters(principal=principal, search="tigist"))
    assert [e.id for e in by_name] == [mine.id]

    by_national_id = list(AccessControlGuard.assigned_encounters(principal=principal, search=mine.patient.national_id))
    assert [e.id for e in by_national_id] == [mine.id]

    assert len(AccessControlGuard.assigned_encounters(principal=principal, search="haile")) == 2
    assert list(AccessControlGuard.assigned_encounters(principal=principal, search="Other")) == []


def test_search_matches_full_name_across_fields(make_encounter, make_patient, doctor, other_doctor, principal_for):
    mine = make_encounter(make_patient(first_name="Tigist", last_name="Haile"), status="Assigned", doctor=doctor)
    make_encounter(make_patient(first_name="Yonas", last_name="Haile"), status="Assigned", doctor=doctor)
    make_encounter(make_patient(first_name="Tigist", last_name="Haile"), status="Assigned", doctor=other_doctor)

    principal = principal_for(doctor)

    for term in ("Tigist Haile", "haile  tigist"):
        got = list(AccessControlGuard.assigned_encounters(principal=principal, search=term))
        assert [e.id for e in got] == [mine.id]

    assert list(AccessControlGuard.assigned_encounters(principal=principal, search="Tigist Bekele")) == []
