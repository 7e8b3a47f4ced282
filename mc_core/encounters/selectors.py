# mc_core/encounters/selectors.py
from __future__ import annotations

from uuid import UUID

from django.db.models import QuerySet

from mc_core.encounters.models import DOCTOR_VISIBLE_STATUSES, Encounter


class EncounterSelectors:
    """
    Read-only queries for encounters.
    """

    @staticmethod
    def for_doctor(*, facility_id: UUID, doctor_id: int) -> QuerySet[Encounter]:
        return (
            Encounter.objects.filter(
                facility_id=facility_id,
                assigned_doctor_id=doctor_id,
                status__in=DOCTOR_VISIBLE_STATUSES,
            )
            .select_related("patient")
            .order_by("-created_at")
        )

    @staticmethod
    def patient_history(*, patient_id: UUID) -> QuerySet[Encounter]:
        return (
            Encounter.objects.filter(patient_id=patient_id)
            .select_related("assigned_doctor", "triaged_by")
            .prefetch_related("lab_requests", "prescriptions__items")
            .order_by("-created_at")
        )

    @staticmethod
    def current_visit(*, patient_id: UUID) -> Encounter | None:
        return (
            Encounter.objects.filter(patient_id=patient_id, status__in=DOCTOR_VISIBLE_STATUSES)
            .select_related("assigned_doctor", "triaged_by")
            .order_by("-created_at")
            .first()
        )
