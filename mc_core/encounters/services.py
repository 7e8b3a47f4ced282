# mc_core/encounters/services.py
from __future__ import annotations

import logging
from uuid import UUID

from django.db import IntegrityError, transaction
from django.utils import timezone
from rest_framework.exceptions import ValidationError

from mc_core.common.api.exceptions import InvalidTransition
from mc_core.common.ids import coerce_uuid
from mc_core.encounters.lifecycle import EncounterAction, apply_transition
from mc_core.encounters.models import Encounter, EncounterStatus
from mc_core.iam.scope import StaffPrincipal
from mc_core.iam.services.membership import is_active_doctor_of_facility
from mc_core.patients.models import Patient

logger = logging.getLogger(__name__)

TRIAGE_OPEN_STATUSES = (EncounterStatus.PENDING, EncounterStatus.ASSIGNED)


class EncounterService:
    # ---------------------------------------------------------------------
    # Intake / triage / assignment (front desk + nursing)
    # ---------------------------------------------------------------------
    @staticmethod
    def create(
        *,
        principal: StaffPrincipal,
        patient_id: UUID,
        chief_complaint: str = "",
    ) -> Encounter:
        patient = Patient.objects.filter(id=patient_id, facility_id=principal.facility_id).first()
        if patient is None:
            raise ValidationError({"patient_id": "Patient not found in this facility."})

        try:
            with transaction.atomic():
                enc = Encounter.objects.create(
                    facility_id=principal.facility_id,
                    patient=patient,
                    status=EncounterStatus.PENDING,
                    chief_complaint=chief_complaint or "",
                    created_by_id=principal.user_id,
                )
        except IntegrityError:
            raise ValidationError({"detail": "Active encounter already exists for this patient in this facility."})

        logger.info("Encounter %s created for patient %s", enc.id, patient.id)
        return enc

    @staticmethod
    @transaction.atomic
    def record_triage(
        *,
        principal: StaffPrincipal,
        encounter_id,
        vitals: dict,
        chief_complaint: str,
        urgency: str,
    ) -> Encounter:
        """
        Stamp the triage sub-record. Only while the encounter is still
        Pending or Assigned; treatment in progress freezes triage.
        """
        enc_id = coerce_uuid(encounter_id)
        if enc_id is None:
            raise InvalidTransition()

        now = timezone.now()
        updated = Encounter.objects.filter(
            id=enc_id,
            facility_id=principal.facility_id,
            status__in=TRIAGE_OPEN_STATUSES,
        ).update(
            vitals=dict(vitals or {}),
            chief_complaint=chief_complaint,
            urgency=urgency,
            triaged_by_id=principal.user_id,
            triage_completed_at=now,
            updated_at=now,
        )
        if updated != 1:
            raise InvalidTransition()

        return Encounter.objects.get(id=enc_id)

    @staticmethod
    @transaction.atomic
    def assign_doctor(
        *,
        principal: StaffPrincipal,
        encounter_id,
        doctor_id: int,
    ) -> Encounter:
        if not is_active_doctor_of_facility(user_id=doctor_id, facility_id=principal.facility_id):
            raise ValidationError({"doctor_id": "Not an active doctor at this facility."})

        return apply_transition(
            facility_id=principal.facility_id,
            encounter_id=encounter_id,
            action=EncounterAction.ASSIGN,
            changes={"assigned_doctor_id": doctor_id},
        )

    # ---------------------------------------------------------------------
    # Doctor transitions
    # ---------------------------------------------------------------------
    @staticmethod
    @transaction.atomic
    def start_treatment(*, principal: StaffPrincipal, encounter_id) -> Encounter:
        """
        Assigned -> InTreatment, assigned doctor only.
        """
        return apply_transition(
            facility_id=principal.facility_id,
            encounter_id=encounter_id,
            action=EncounterAction.START_TREATMENT,
            doctor_id=principal.user_id,
        )

    @staticmethod
    @transaction.atomic
    def complete(
        *,
        principal: StaffPrincipal,
        encounter_id,
        diagnosis: str,
        treatment_plan: str,
        vitals: dict | None = None,
    ) -> Encounter:
        """
        InTreatment -> Completed. Requires diagnosis + treatment plan,
        merges any vitals update into the triage vitals, then freezes the record.
        """
        missing = {}
        if not (diagnosis or "").strip():
            missing["diagnosis"] = "This field is required."
        if not (treatment_plan or "").strip():
            missing["treatment_plan"] = "This field is required."
        if missing:
            raise ValidationError(missing)

        enc_id = coerce_uuid(encounter_id)
        if enc_id is None:
            raise InvalidTransition()

        current = (
            Encounter.objects.select_for_update()
            .filter(
                id=enc_id,
                facility_id=principal.facility_id,
                assigned_doctor_id=principal.user_id,
                status=EncounterStatus.IN_TREATMENT,
            )
            .first()
        )
        if current is None:
            raise InvalidTransition()

        merged_vitals = dict(current.vitals or {})
        merged_vitals.update(vitals or {})

        return apply_transition(
            facility_id=principal.facility_id,
            encounter_id=enc_id,
            action=EncounterAction.COMPLETE,
            doctor_id=principal.user_id,
            changes={
                "diagnosis": diagnosis.strip(),
                "treatment_plan": treatment_plan.strip(),
                "vitals": merged_vitals,
            },
        )
