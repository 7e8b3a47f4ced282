# mc_core/clinical/services.py
from __future__ import annotations

import logging

from django.db import transaction
from django.db.models import QuerySet
from rest_framework.exceptions import ValidationError

from mc_core.clinical.models import LabRequest, LabRequestStatus, LabUrgency, Prescription, PrescriptionItem
from mc_core.common.api.exceptions import NotInTreatment
from mc_core.common.ids import coerce_uuid
from mc_core.encounters.access import AccessControlGuard
from mc_core.encounters.models import Encounter, EncounterStatus
from mc_core.iam.scope import StaffPrincipal

logger = logging.getLogger(__name__)

MEDICINE_FIELDS = ("name", "dosage", "frequency", "duration")


def _clean(value) -> str:
    return str(value).strip() if value is not None else ""


def split_medicines(medicines) -> tuple[list[dict], list[dict]]:
    """
    Partition line items into (valid, rejected).

    A line item is valid when all of name/dosage/frequency/duration are
    non-blank. Each rejected entry carries its index and the missing fields.
    """
    valid: list[dict] = []
    rejected: list[dict] = []

    for index, raw in enumerate(medicines or []):
        item = raw if isinstance(raw, dict) else {}
        cleaned = {f: _clean(item.get(f)) for f in MEDICINE_FIELDS}
        missing = [f for f in MEDICINE_FIELDS if not cleaned[f]]
        if missing:
            rejected.append({"index": index, "missing": missing})
        else:
            valid.append(cleaned)

    return valid, rejected


def _lock_treatable_encounter(*, principal: StaffPrincipal, encounter_id) -> Encounter:
    """
    Encounter must exist in the principal's facility, be assigned to the
    principal, and be exactly InTreatment. All failures look the same.
    """
    enc_id = coerce_uuid(encounter_id)
    if enc_id is None:
        raise NotInTreatment()

    enc = (
        Encounter.objects.select_for_update()
        .filter(
            id=enc_id,
            facility_id=principal.facility_id,
            assigned_doctor_id=principal.user_id,
            status=EncounterStatus.IN_TREATMENT,
        )
        .first()
    )
    if enc is None:
        raise NotInTreatment()
    return enc


class ClinicalArtifactService:
    @staticmethod
    @transaction.atomic
    def create_lab_request(
        *,
        principal: StaffPrincipal,
        encounter_id,
        test_type: str,
        urgency: str | None = None,
        instructions: str = "",
    ) -> LabRequest:
        enc = _lock_treatable_encounter(principal=principal, encounter_id=encounter_id)

        test_type = _clean(test_type)
        if not test_type:
            raise ValidationError({"test_type": "This field is required."})

        lab = LabRequest.objects.create(
            facility_id=enc.facility_id,
            patient_id=enc.patient_id,
            ordering_doctor_id=principal.user_id,
            test_type=test_type,
            urgency=urgency or LabUrgency.NORMAL,
            status=LabRequestStatus.PENDING,
            instructions=instructions or "",
        )
        enc.lab_requests.add(lab)

        logger.info("Lab request %s (%s) linked to encounter %s", lab.id, test_type, enc.id)
        return lab

    @staticmethod
    @transaction.atomic
    def create_prescription(
        *,
        principal: StaffPrincipal,
        encounter_id,
        medicines: list,
        instructions: str = "",
    ) -> tuple[Prescription, list[dict]]:
        """
        Returns (prescription, rejected_items).

        Line items missing any mandatory field are dropped rather than failing
        the whole batch; at least one valid item is required.
        """
        enc = _lock_treatable_encounter(principal=principal, encounter_id=encounter_id)

        valid, rejected = split_medicines(medicines)
        if not valid:
            raise ValidationError(
                {
                    "medicines": "At least one medicine with name, dosage, frequency and duration is required.",
                    "invalid_items": rejected,
                }
            )

        rx = Prescription.objects.create(
            facility_id=enc.facility_id,
            patient_id=enc.patient_id,
            prescribing_doctor_id=principal.user_id,
            instructions=instructions or "",
            is_filled=False,
        )
        PrescriptionItem.objects.bulk_create(
            [PrescriptionItem(prescription=rx, position=pos, **item) for pos, item in enumerate(valid)]
        )
        enc.prescriptions.add(rx)

        if rejected:
            logger.warning(
                "Prescription %s on encounter %s dropped %d invalid line item(s): %s",
                rx.id,
                enc.id,
                len(rejected),
                rejected,
            )
        logger.info("Prescription %s (%d item(s)) linked to encounter %s", rx.id, len(valid), enc.id)
        return rx, rejected

    # ---------------------------------------------------------------------
    # Reads
    # ---------------------------------------------------------------------
    @staticmethod
    def list_lab_requests(*, principal: StaffPrincipal, encounter_id) -> QuerySet[LabRequest]:
        enc = AccessControlGuard.authorize_encounter(principal=principal, encounter_id=encounter_id)
        return (
            LabRequest.objects.filter(patient_id=enc.patient_id, facility_id=enc.facility_id)
            .select_related("ordering_doctor")
            .order_by("-created_at")
        )

    @staticmethod
    def list_prescriptions(*, principal: StaffPrincipal, encounter_id) -> QuerySet[Prescription]:
        enc = AccessControlGuard.authorize_encounter(principal=principal, encounter_id=encounter_id)
        return (
            Prescription.objects.filter(patient_id=enc.patient_id, facility_id=enc.facility_id)
            .select_related("prescribing_doctor")
            .prefetch_related("items")
            .order_by("-created_at")
        )
