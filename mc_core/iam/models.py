# mc_core/iam/models.py
import uuid

from django.conf import settings
from django.db import models

from mc_core.facilities.models import Facility


class StaffMembership(models.Model):
    """
    Assigns a staff user to a facility.
    This is the enforcement point for facility-level scope; clinical roles
    come from Django groups (ADMIN/DOCTOR/NURSE/RECEPTION).
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="staff_memberships")
    facility = models.ForeignKey(Facility, on_delete=models.PROTECT, related_name="staff_memberships")

    is_active = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "iam_staff_membership"
        constraints = [
            models.UniqueConstraint(fields=["facility", "user"], name="uq_staff_membership_facility_user"),
        ]
        indexes = [
            models.Index(fields=["user", "is_active"]),
            models.Index(fields=["facility", "is_active"]),
        ]

    def __str__(self) -> str:
        return f"{self.user_id} @ {self.facility_id}"
