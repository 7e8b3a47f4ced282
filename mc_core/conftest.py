# mc_core/conftest.py
import itertools

import pytest
from django.contrib.auth import get_user_model
from django.contrib.auth.models import Group
from rest_framework.test import APIClient

from mc_core.common.permissions import ALL_ROLES, ROLE_DOCTOR, ROLE_NURSE, ROLE_RECEPTION
from mc_core.facilities.models import Facility
from mc_core.facilities.services import FacilityCredentialService
from mc_core.iam.models import StaffMembership
from mc_core.iam.scope import StaffPrincipal
from mc_core.patients.models import Patient

_national_ids = itertools.count(1000)


@pytest.fixture
def facility(db):
    return Facility.objects.create(code="main", name="Main Hospital")


@pytest.fixture
def other_facility(db):
    return Facility.objects.create(code="other", name="Other Clinic")


@pytest.fixture
def groups(db):
    return {name: Group.objects.get_or_create(name=name)[0] for name in ALL_ROLES}


@pytest.fixture
def make_staff(db, groups):
    """
    make_staff("dr_a", ROLE_DOCTOR, facility) -> user with that group and an
    active membership at facility.
    """
    User = get_user_model()

    def _make(username: str, role: str, facility, **extra):
        user = User.objects.create_user(username=username, password="pass12345", is_active=True, **extra)
        user.groups.add(groups[role])
        StaffMembership.objects.create(user=user, facility=facility, is_active=True)
        return user

    return _make


@pytest.fixture
def doctor(make_staff, facility):
    return make_staff("dr_abebe", ROLE_DOCTOR, facility, first_name="Abebe", last_name="Kebede")


@pytest.fixture
def other_doctor(make_staff, facility):
    return make_staff("dr_sara", ROLE_DOCTOR, facility, first_name="Sara", last_name="Tesfaye")


@pytest.fixture
def nurse(make_staff, facility):
    return make_staff("nurse_hana", ROLE_NURSE, facility)


@pytest.fixture
def reception(make_staff, facility):
    return make_staff("front_desk", ROLE_RECEPTION, facility)


@pytest.fixture
def principal_for(facility):
    def _principal(user, facility_obj=None):
        return StaffPrincipal(
            user_id=user.id,
            facility_id=(facility_obj or facility).id,
            roles=frozenset(user.groups.values_list("name", flat=True)),
        )

    return _principal


@pytest.fixture
def client_for(facility):
    """Staff APIClient, authenticated and scoped to a facility via X-Facility-Id."""
    def _client(user, facility_obj=None):
        c = APIClient()
        c.force_authenticate(user=user)
        c.credentials(HTTP_X_FACILITY_ID=str((facility_obj or facility).id))
        return c

    return _client


@pytest.fixture
def make_patient(db, facility):
    def _make(facility_obj=None, **overrides):
        data = {
            "national_id": f"FAN-{next(_national_ids)}",
            "first_name": "Almaz",
            "last_name": "Bekele",
            "gender": "Female",
        }
        data.update(overrides)
        return Patient.objects.create(facility_id=(facility_obj or facility).id, **data)

    return _make


@pytest.fixture
def patient(make_patient):
    return make_patient(national_id="FAN-0001", first_name="Almaz", last_name="Bekele")


@pytest.fixture
def make_encounter(principal_for, nurse):
    """
    Drives an encounter through the real services up to the requested status:
    "Pending", "Assigned", "InTreatment" or "Completed".
    """
    from mc_core.encounters.services import EncounterService

    def _make(patient, status="Pending", doctor=None):
        desk = principal_for(nurse)
        enc = EncounterService.create(principal=desk, patient_id=patient.id, chief_complaint="Headache")
        if status == "Pending":
            return enc

        enc = EncounterService.assign_doctor(principal=desk, encounter_id=enc.id, doctor_id=doctor.id)
        if status == "Assigned":
            return enc

        enc = EncounterService.start_treatment(principal=principal_for(doctor), encounter_id=enc.id)
        if status == "InTreatment":
            return enc

        return EncounterService.complete(
            principal=principal_for(doctor),
            encounter_id=enc.id,
            diagnosis="Tension headache",
            treatment_plan="Rest and fluids",
        )

    return _make


@pytest.fixture
def approved_key(facility):
    _, raw_key = FacilityCredentialService.issue(facility_id=facility.id, approved=True)
    return raw_key


@pytest.fixture
def other_approved_key(other_facility):
    _, raw_key = FacilityCredentialService.issue(facility_id=other_facility.id, approved=True)
    return raw_key


@pytest.fixture
def unapproved_key(facility):
    _, raw_key = FacilityCredentialService.issue(facility_id=facility.id, approved=False)
    return raw_key
