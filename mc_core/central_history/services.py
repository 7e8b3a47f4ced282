# mc_core/central_history/services.py
from __future__ import annotations

import logging
from dataclasses import dataclass

from django.db import IntegrityError, transaction
from django.db.models import Max
from rest_framework.exceptions import NotFound, ValidationError

from mc_core.central_history.models import CentralPatient, VisitEntry
from mc_core.common.api.exceptions import RecordAccessDenied
from mc_core.common.ids import coerce_uuid
from mc_core.facilities.authenticator import FacilityContext

logger = logging.getLogger(__name__)

PATIENT_NOT_FOUND_MSG = "Patient history not found."

REQUIRED_DEMOGRAPHICS = ("first_name", "last_name", "date_of_birth", "gender")


@dataclass(frozen=True)
class SubmitResult:
    patient: CentralPatient
    visit: VisitEntry
    created: bool


def _blank(value) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _validate_submission(*, national_id, demographics: dict, visit: dict) -> None:
    errors: dict[str, str] = {}
    if _blank(national_id):
        errors["national_id"] = "This field is required."
    for field in REQUIRED_DEMOGRAPHICS:
        if _blank(demographics.get(field)):
            errors[field] = "This field is required."
    if not isinstance(visit.get("doctor_notes"), dict):
        errors["doctor_notes"] = "This field is required."
    if errors:
        raise ValidationError(errors)


def _normalize_notes(notes: dict) -> dict:
    return {
        "diagnosis": notes.get("diagnosis") or "",
        "treatmentPlan": notes.get("treatment_plan") or notes.get("treatmentPlan") or "",
        "prescriptions": [str(ref) for ref in (notes.get("prescriptions") or [])],
    }


def _find_or_append(*, facility: FacilityContext, national_id: str, demographics: dict, visit: dict) -> SubmitResult:
    with transaction.atomic():
        patient = CentralPatient.objects.select_for_update().filter(national_id=national_id).first()
        created = patient is None

        if created:
            patient = CentralPatient.objects.create(
                national_id=national_id,
                first_name=demographics["first_name"],
                last_name=demographics["last_name"],
                date_of_birth=demographics["date_of_birth"],
                gender=demographics["gender"],
                blood_group=demographics.get("blood_group") or "",
            )
        else:
            blood_group = demographics.get("blood_group")
            if blood_group and blood_group != patient.blood_group:
                patient.blood_group = blood_group
                patient.save(update_fields=["blood_group", "updated_at"])

        last = patient.visits.aggregate(last=Max("sequence"))["last"] or 0
        entry = VisitEntry.objects.create(
            patient=patient,
            facility_id=facility.facility_id,
            sequence=last + 1,
            doctor_notes=_normalize_notes(visit["doctor_notes"]),
            lab_results=list(visit.get("lab_results") or []),
            prescriptions=list(visit.get("prescriptions") or []),
        )

    return SubmitResult(patient=patient, visit=entry, created=created)


def _visit_payload(entry: VisitEntry) -> dict:
    return {
        "id": str(entry.id),
        "sequence": entry.sequence,
        "facilityID": str(entry.facility_id),
        "facilityCode": entry.facility.code,
        "facilityName": entry.facility.name,
        "doctorNotes": entry.doctor_notes,
        "labResults": entry.lab_results,
        "prescription": entry.prescriptions,
        "recordedAt": entry.recorded_at,
    }


class CentralHistoryService:
    """
    Longitudinal record shared by every facility.

    Writes come from authenticated facilities and only ever append.
    Reads are by national ID and are not facility-scoped.
    """

    @staticmethod
    def submit_visit(
        *,
        facility: FacilityContext,
        national_id: str,
        demographics: dict,
        visit: dict,
    ) -> SubmitResult:
        _validate_submission(national_id=national_id, demographics=demographics, visit=visit)
        national_id = national_id.strip()

        try:
            result = _find_or_append(facility=facility, national_id=national_id, demographics=demographics, visit=visit)
        except IntegrityError:
            # Lost the race to create the record; the winner's row is visible now
            logger.info("Concurrent first submission for %s, retrying as append", national_id)
            result = _find_or_append(facility=facility, national_id=national_id, demographics=demographics, visit=visit)

        logger.info(
            "Central history %s for %s by facility %s (visit #%d)",
            "created" if result.created else "updated",
            national_id,
            facility.facility_code,
            result.visit.sequence,
        )
        return result

    @staticmethod
    def fetch_history(*, national_id: str) -> dict:
        patient = CentralPatient.objects.filter(national_id=(national_id or "").strip()).first()
        if patient is None:
            raise NotFound(PATIENT_NOT_FOUND_MSG)

        visits = list(patient.visits.select_related("facility").order_by("-sequence"))
        return {
            "nationalID": patient.national_id,
            "fullName": patient.full_name,
            "firstName": patient.first_name,
            "lastName": patient.last_name,
            "dateOfBirth": patient.date_of_birth,
            "gender": patient.gender,
            "bloodGroup": patient.blood_group,
            "totalRecords": len(visits),
            "records": [_visit_payload(v) for v in visits],
        }

    @staticmethod
    @transaction.atomic
    def attach_prescription_reference(
        *,
        facility: FacilityContext,
        national_id: str,
        visit_id,
        prescription_ref: str,
    ) -> VisitEntry:
        """
        Append a prescription back-reference to a visit's doctor notes.
        Only the facility that submitted the visit may do this.
        """
        vid = coerce_uuid(visit_id)
        entry = None
        if vid is not None:
            entry = (
                VisitEntry.objects.select_for_update()
                .select_related("facility")
                .filter(id=vid, patient__national_id=national_id)
                .first()
            )
        if entry is None:
            raise NotFound(PATIENT_NOT_FOUND_MSG)

        if entry.facility_id != facility.facility_id:
            raise RecordAccessDenied()

        ref = str(prescription_ref).strip()
        if not ref:
            raise ValidationError({"prescription_ref": "This field is required."})

        notes = dict(entry.doctor_notes or {})
        refs = list(notes.get("prescriptions") or [])
        if ref not in refs:
            refs.append(ref)
            notes["prescriptions"] = refs
            entry.doctor_notes = notes
            entry.save(update_fields=["doctor_notes"])
            logger.info("Visit %s gained prescription reference %s", entry.id, ref)

        return entry
