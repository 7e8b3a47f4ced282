# mc_core/encounters/access.py
from __future__ import annotations

from django.db.models import QuerySet

from mc_core.common.api.exceptions import RecordAccessDenied
from mc_core.common.ids import coerce_uuid
from mc_core.encounters.filters import AssignedEncounterFilter
from mc_core.encounters.models import Encounter
from mc_core.encounters.selectors import EncounterSelectors
from mc_core.iam.scope import StaffPrincipal
from mc_core.patients.models import Patient


class AccessControlGuard:
    """
    Record-level gate for doctor reads and writes.

    A doctor may touch an encounter only while assigned to it, and a patient
    only through some encounter assigned to them. Every refusal is the same
    RecordAccessDenied so callers cannot tell which records exist.
    Roles never widen this; ADMIN included.
    """

    @staticmethod
    def authorize_encounter(*, principal: StaffPrincipal, encounter_id) -> Encounter:
        enc_id = coerce_uuid(encounter_id)
        if enc_id is None:
            raise RecordAccessDenied()

        enc = (
            Encounter.objects.select_related("patient", "assigned_doctor", "triaged_by")
            .filter(
                id=enc_id,
                facility_id=principal.facility_id,
                assigned_doctor_id=principal.user_id,
            )
            .first()
        )
        if enc is None:
            raise RecordAccessDenied()
        return enc

    @staticmethod
    def authorize_patient(*, principal: StaffPrincipal, patient_id) -> Patient:
        pid = coerce_uuid(patient_id)
        if pid is None:
            raise RecordAccessDenied()

        linked = Encounter.objects.filter(
            patient_id=pid,
            facility_id=principal.facility_id,
            assigned_doctor_id=principal.user_id,
        ).exists()
        if not linked:
            raise RecordAccessDenied()

        return Patient.objects.get(id=pid)

    @staticmethod
    def assigned_encounters(*, principal: StaffPrincipal, search: str | None = None) -> QuerySet[Encounter]:
        qs = EncounterSelectors.for_doctor(facility_id=principal.facility_id, doctor_id=principal.user_id)
        if not search:
            return qs
        return AssignedEncounterFilter(data={"search": search}, queryset=qs).qs
