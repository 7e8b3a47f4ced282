# mc_core/iam/services/membership.py
from __future__ import annotations

from uuid import UUID

from mc_core.common.permissions import ROLE_DOCTOR
from mc_core.iam.models import StaffMembership


def list_user_facilities(user_id: int) -> list[dict]:
    qs = (
        StaffMembership.objects.select_related("facility")
        .filter(user_id=user_id, is_active=True, facility__is_active=True)
        .order_by("facility__name")
    )

    return [
        {
            "facility_id": str(m.facility_id),
            "facility_code": m.facility.code,
            "facility_name": m.facility.name,
        }
        for m in qs
    ]


def active_facility_ids(user_id: int) -> list[UUID]:
    return list(
        StaffMembership.objects.filter(user_id=user_id, is_active=True, facility__is_active=True)
        .values_list("facility_id", flat=True)
    )


def is_user_member_of_facility(*, user_id: int, facility_id: UUID) -> bool:
    """
    Single source of truth used by scope enforcement.
    """
    return StaffMembership.objects.filter(
        user_id=user_id,
        facility_id=facility_id,
        is_active=True,
        facility__is_active=True,
    ).exists()


def is_active_doctor_of_facility(*, user_id: int, facility_id: UUID) -> bool:
    return StaffMembership.objects.filter(
        user_id=user_id,
        facility_id=facility_id,
        is_active=True,
        user__is_active=True,
        user__groups__name=ROLE_DOCTOR,
    ).exists()
