# mc_core/central_history/models.py
from __future__ import annotations

import uuid

from django.core.exceptions import ValidationError
from django.core.serializers.json import DjangoJSONEncoder
from django.db import models

from mc_core.common.models import TimeStampedModel
from mc_core.facilities.models import Facility
from mc_core.patients.models import BloodGroup, Gender


class CentralPatient(TimeStampedModel):
    """
    Cross-facility longitudinal record, one per national ID.
    Demographics are fixed at first submission except blood group,
    which the latest submission overwrites.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    national_id = models.CharField(max_length=64, unique=True)

    first_name = models.CharField(max_length=128)
    last_name = models.CharField(max_length=128)
    date_of_birth = models.DateField()
    gender = models.CharField(max_length=16, choices=Gender.choices)
    blood_group = models.CharField(max_length=4, choices=BloodGroup.choices, blank=True, default="")

    class Meta:
        db_table = "central_patient"

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    def __str__(self) -> str:
        return self.national_id


class VisitEntry(models.Model):
    """
    One facility's contribution for one visit. Append-only: the only
    permitted change after insert is adding prescription back-references
    to doctor_notes.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    patient = models.ForeignKey(CentralPatient, on_delete=models.PROTECT, related_name="visits")
    facility = models.ForeignKey(Facility, on_delete=models.PROTECT, related_name="central_visits")

    # Insertion order within the patient's record, starting at 1
    sequence = models.PositiveIntegerField()

    # {"diagnosis": str, "treatmentPlan": str, "prescriptions": [str, ...]}
    doctor_notes = models.JSONField(default=dict)
    # [{"testName", "result", "date"}]
    lab_results = models.JSONField(default=list, blank=True, encoder=DjangoJSONEncoder)
    # [{"medicationName", "dosage", "frequency", "duration"}]
    prescriptions = models.JSONField(default=list, blank=True)

    recorded_at = models.DateTimeField(auto_now_add=True, db_index=True)

    class Meta:
        db_table = "central_visit_entry"
        constraints = [
            models.UniqueConstraint(fields=["patient", "sequence"], name="uq_visit_sequence_per_patient"),
        ]
        indexes = [
            models.Index(fields=["patient", "-sequence"]),
        ]

    def save(self, *args, **kwargs):
        # UUID PK exists before first save, so use _state.adding
        if not self._state.adding:
            update_fields = kwargs.get("update_fields")
            if not update_fields or set(update_fields) != {"doctor_notes"}:
                raise ValidationError("VisitEntry is append-only; only doctor_notes back-references may change.")
        return super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValidationError("VisitEntry is append-only and cannot be deleted.")

    def __str__(self) -> str:
        return f"{self.patient_id}#{self.sequence}"
