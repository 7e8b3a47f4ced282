# mc_core/facilities/models.py
from __future__ import annotations

import uuid

from django.db import models


class FacilityType(models.TextChoices):
    HOSPITAL = "HOSPITAL", "Hospital"
    CLINIC = "CLINIC", "Clinic"
    HEALTH_CENTER = "HEALTH_CENTER", "Health Center"
    OTHER = "OTHER", "Other"


class Facility(models.Model):
    """
    An independent hospital/clinic. Each facility is its own tenant: it owns
    its patients, encounters and clinical artifacts, and contributes visit
    entries to the central history.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    name = models.CharField(max_length=255)
    code = models.SlugField(max_length=64, unique=True)

    facility_type = models.CharField(
        max_length=24,
        choices=FacilityType.choices,
        default=FacilityType.HOSPITAL,
        db_index=True,
    )

    location = models.CharField(max_length=255, blank=True, default="")
    contact_number = models.CharField(max_length=32, blank=True, default="")
    license_number = models.CharField(max_length=64, blank=True, default="")

    is_active = models.BooleanField(default=True, db_index=True)

    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "facilities_facility"
        indexes = [
            models.Index(fields=["code"]),
            models.Index(fields=["is_active"]),
        ]

    def __str__(self) -> str:
        return f"{self.name} ({self.code})"


class FacilityCredential(models.Model):
    """
    Secret API key a facility presents when submitting to the central history.

    Only the SHA-256 digest of the key is stored; the raw key is shown once at
    issuance. A credential admits writes only while is_approved is true.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    facility = models.ForeignKey(Facility, on_delete=models.CASCADE, related_name="credentials")

    key_digest = models.CharField(max_length=64, unique=True)
    key_prefix = models.CharField(max_length=12, db_index=True)

    is_approved = models.BooleanField(default=False, db_index=True)
    approved_at = models.DateTimeField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "facilities_credential"

    def __str__(self) -> str:
        return f"{self.key_prefix}… ({self.facility_id})"
