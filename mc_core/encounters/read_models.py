# mc_core/encounters/read_models.py
from __future__ import annotations

from datetime import date

from django.utils import timezone

from mc_core.encounters.models import Encounter
from mc_core.encounters.selectors import EncounterSelectors
from mc_core.patients.models import Patient

NOT_DOCUMENTED = "Not documented"


def age_in_years(date_of_birth: date | None, today: date | None = None) -> int | None:
    """
    Whole years elapsed; the year only counts once the birthday has passed.
    """
    if date_of_birth is None:
        return None
    today = today or timezone.localdate()
    before_birthday = (today.month, today.day) < (date_of_birth.month, date_of_birth.day)
    return today.year - date_of_birth.year - int(before_birthday)


def _person(user) -> dict | None:
    if user is None:
        return None
    return {
        "id": user.id,
        "firstName": user.first_name,
        "lastName": user.last_name,
    }


def _triage(enc: Encounter) -> dict | None:
    if not enc.has_triage:
        return None
    return {
        "vitals": enc.vitals or {},
        "chiefComplaint": enc.chief_complaint,
        "urgency": enc.urgency,
        "triagedBy": _person(enc.triaged_by),
        "completedAt": enc.triage_completed_at,
    }


def _prescriptions(enc: Encounter) -> list[dict]:
    return [
        {
            "id": str(rx.id),
            "medicines": [
                {
                    "name": item.name,
                    "dosage": item.dosage,
                    "frequency": item.frequency,
                    "duration": item.duration,
                }
                for item in rx.items.all()
            ],
            "instructions": rx.instructions,
            "isFilled": rx.is_filled,
            "createdAt": rx.created_at,
        }
        for rx in enc.prescriptions.all()
    ]


def _lab_requests(enc: Encounter) -> list[dict]:
    return [
        {
            "id": str(lab.id),
            "testType": lab.test_type,
            "urgency": lab.urgency,
            "status": lab.status,
            "instructions": lab.instructions,
            "createdAt": lab.created_at,
        }
        for lab in enc.lab_requests.all()
    ]


def history_item(enc: Encounter) -> dict:
    return {
        "recordId": str(enc.id),
        "status": enc.status,
        "date": enc.created_at,
        "doctor": _person(enc.assigned_doctor),
        "triage": _triage(enc),
        "diagnosis": enc.diagnosis or NOT_DOCUMENTED,
        "treatment": enc.treatment_plan or NOT_DOCUMENTED,
        "prescriptions": _prescriptions(enc),
        "labRequests": _lab_requests(enc),
    }


def current_visit_item(enc: Encounter | None) -> dict | None:
    if enc is None:
        return None
    return {
        "recordId": str(enc.id),
        "status": enc.status,
        "createdAt": enc.created_at,
        "updatedAt": enc.updated_at,
        "doctor": _person(enc.assigned_doctor),
        "triage": _triage(enc),
        "doctorNotes": {
            "diagnosis": enc.diagnosis,
            "treatmentPlan": enc.treatment_plan,
            "prescriptions": _prescriptions(enc),
        },
        "labRequests": _lab_requests(enc),
    }


def _patient_summary(patient: Patient, today: date | None = None) -> dict:
    return {
        "nationalID": patient.national_id,
        "name": patient.full_name,
        "age": age_in_years(patient.date_of_birth, today),
        "gender": patient.gender,
        "bloodGroup": patient.blood_group,
    }


def encounter_detail(enc: Encounter, today: date | None = None) -> dict:
    """
    One encounter as the assigned doctor sees it: patient summary plus the
    populated triage, notes and artifacts.
    """
    detail = current_visit_item(enc)
    detail["patient"] = {"id": str(enc.patient_id), **_patient_summary(enc.patient, today)}
    detail["completedAt"] = enc.completed_at
    return detail


def build_patient_profile(patient: Patient, today: date | None = None) -> dict:
    """
    Full profile for a doctor's patient view. No authorization here;
    callers go through AccessControlGuard first.
    """
    history = [history_item(e) for e in EncounterSelectors.patient_history(patient_id=patient.id)]
    current = EncounterSelectors.current_visit(patient_id=patient.id)

    return {
        "patient": {
            "basicInfo": {
                "nationalID": patient.national_id,
                "firstName": patient.first_name,
                "lastName": patient.last_name,
                "fullName": patient.full_name,
                "dateOfBirth": patient.date_of_birth,
                "age": age_in_years(patient.date_of_birth, today),
                "gender": patient.gender,
                "bloodGroup": patient.blood_group,
                "contactNumber": patient.phone,
                "address": patient.address,
            },
        },
        "currentVisit": current_visit_item(current),
        "medicalHistory": history,
    }


def build_medical_history(patient: Patient, today: date | None = None) -> dict:
    history = [history_item(e) for e in EncounterSelectors.patient_history(patient_id=patient.id)]
    return {
        "patient": _patient_summary(patient, today),
        "medicalHistory": history,
        "count": len(history),
    }
