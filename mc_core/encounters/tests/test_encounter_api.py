import pytest

from mc_core.common.api.exceptions import INVALID_TRANSITION_MSG, RECORD_ACCESS_DENIED_MSG

pytestmark = pytest.mark.django_db


def test_intake_triage_assign_treat_complete(client_for, reception, nurse, doctor, patient):
    desk = client_for(reception)

    created = desk.post("/api/v1/encounters/", {"patient_id": str(patient.id), "chief_complaint": "Fever"}, format="json")
    assert created.status_code == 201, created.data
    assert created.data["status"] == "Pending"
    enc_id = created.data["id"]

    triaged = client_for(nurse).post(
        f"/api/v1/encounters/{enc_id}/triage/",
        {"vitals": {"temp": 38.5}, "chief_complaint": "Fever", "urgency": "High"},
        format="json",
    )
    assert triaged.status_code == 200, triaged.data
    assert triaged.data["urgency"] == "High"

    assigned = desk.post(f"/api/v1/encounters/{enc_id}/assign/", {"doctor_id": doctor.id}, format="json")
    assert assigned.status_code == 200, assigned.data
    assert assigned.data["status"] == "Assigned"

    dr = client_for(doctor)
    started = dr.post(f"/api/v1/encounters/{enc_id}/start-treatment/", format="json")
    assert started.status_code == 200, started.data
    assert started.data["status"] == "InTreatment"

    incomplete = dr.post(f"/api/v1/encounters/{enc_id}/complete/", {"diagnosis": "Malaria"}, format="json")
    assert incomplete.status_code == 400
    assert incomplete.data["error"]["code"] == "validation_error"
    assert "treatment_plan" in incomplete.data["error"]["details"]

    done = dr.post(
        f"/api/v1/encounters/{enc_id}/complete/",
        {"diagnosis": "Malaria", "treatment_plan": "Coartem", "vitals": {"temp": 37.1}},
        format="json",
    )
    assert done.status_code == 200, done.data
    assert done.data["status"] == "Completed"
    assert done.data["vitals"] == {"temp": 37.1}

    again = dr.post(
        f"/api/v1/encounters/{enc_id}/complete/",
        {"diagnosis": "Malaria", "treatment_plan": "Coartem"},
        format="json",
    )
    assert again.status_code == 409
    assert again.data["error"]["code"] == "invalid_transition"
    assert again.data["error"]["message"] == INVALID_TRANSITION_MSG


def test_duplicate_active_encounter_is_400(client_for, reception, patient):
    desk = client_for(reception)
    first = desk.post("/api/v1/encounters/", {"patient_id": str(patient.id)}, format="json")
    assert first.status_code == 201

    second = desk.post("/api/v1/encounters/", {"patient_id": str(patient.id)}, format="json")
    assert second.status_code == 400
    assert second.data["error"]["code"] == "validation_error"


def test_doctor_cannot_do_intake(client_for, doctor, patient):
    r = client_for(doctor).post("/api/v1/encounters/", {"patient_id": str(patient.id)}, format="json")
    assert r.status_code == 403


def test_nurse_cannot_start_treatment(client_for, make_encounter, patient, doctor, nurse):
    enc = make_encounter(patient, status="Assigned", doctor=doctor)

    r = client_for(nurse).post(f"/api/v1/encounters/{enc.id}/start-treatment/", format="json")
    assert r.status_code == 403


def test_encounter_detail_only_for_assigned_doctor(client_for, make_encounter, patient, doctor, other_doctor):
    enc = make_encounter(patient, status="Assigned", doctor=doctor)

    mine = client_for(doctor).get(f"/api/v1/encounters/{enc.id}/")
    assert mine.status_code == 200
    assert mine.data["recordId"] == str(enc.id)

    theirs = client_for(other_doctor).get(f"/api/v1/encounters/{enc.id}/")
    missing = client_for(other_doctor).get("/api/v1/encounters/00000000-0000-0000-0000-000000000000/")

    assert theirs.status_code == missing.status_code == 403
    assert theirs.data["error"]["message"] == missing.data["error"]["message"] == RECORD_ACCESS_DENIED_MSG


def test_start_treatment_by_other_doctor_is_409(client_for, make_encounter, patient, doctor, other_doctor):
    enc = make_encounter(patient, status="Assigned", doctor=doctor)

    r = client_for(other_doctor).post(f"/api/v1/encounters/{enc.id}/start-treatment/", format="json")

    assert r.status_code == 409
    assert r.data["error"]["code"] == "invalid_transition"


def test_staff_outside_facility_is_forbidden(client_for, nurse, other_facility, patient):
    r = client_for(nurse, other_facility).post("/api/v1/encounters/", {"patient_id": str(patient.id)}, format="json")
    assert r.status_code == 403


def test_encounter_detail_is_populated(client_for, make_encounter, patient, doctor, nurse):
    enc = make_encounter(patient, status="Assigned", doctor=doctor)
    client_for(nurse).post(
        f"/api/v1/encounters/{enc.id}/triage/",
        {"vitals": {"bp": "120/80"}, "chief_complaint": "Headache", "urgency": "Low"},
        format="json",
    )
    dr = client_for(doctor)
    dr.post(f"/api/v1/encounters/{enc.id}/start-treatment/", format="json")
    dr.post(
        f"/api/v1/encounters/{enc.id}/prescriptions/",
        {"medicines": [{"name": "Paracetamol", "dosage": "500mg", "frequency": "3x daily", "duration": "5 days"}]},
        format="json",
    )

    r = dr.get(f"/api/v1/encounters/{enc.id}/")

    assert r.status_code == 200, r.data
    assert r.data["status"] == "InTreatment"
    assert r.data["patient"]["id"] == str(patient.id)
    assert r.data["patient"]["nationalID"] == "FAN-0001"
    assert r.data["patient"]["name"] == "Almaz Bekele"
    assert r.data["doctor"] == {"id": doctor.id, "firstName": doctor.first_name, "lastName": doctor.last_name}
    assert r.data["triage"]["triagedBy"]["id"] == nurse.id
    assert r.data["triage"]["vitals"] == {"bp": "120/80"}
    assert r.data["triage"]["completedAt"] is not None
    assert r.data["completedAt"] is None
    rx = r.data["doctorNotes"]["prescriptions"]
    assert [m["name"] for m in rx[0]["medicines"]] == ["Paracetamol"]
