# mc_core/patients/selectors.py
from __future__ import annotations

from uuid import UUID

from django.db.models import Q, QuerySet

from mc_core.patients.models import Patient


def search_patients(*, facility_id: UUID, q: str | None = None) -> QuerySet[Patient]:
    qs = Patient.objects.filter(facility_id=facility_id)

    qv = (q or "").strip()
    if qv:
        qs = qs.filter(
            Q(national_id__icontains=qv)
            | Q(first_name__icontains=qv)
            | Q(last_name__icontains=qv)
            | Q(phone__icontains=qv)
        )

    return qs.order_by("-created_at")
