# mc_core/encounters/models.py

from django.conf import settings
from django.db import models
from django.db.models import Q

from mc_core.common.models import FacilityScopedModel
from mc_core.patients.models import Patient


class EncounterStatus(models.TextChoices):
    PENDING = "Pending", "Pending"
    ASSIGNED = "Assigned", "Assigned"
    IN_TREATMENT = "InTreatment", "In Treatment"
    COMPLETED = "Completed", "Completed"


ACTIVE_STATUSES = (EncounterStatus.PENDING, EncounterStatus.ASSIGNED, EncounterStatus.IN_TREATMENT)

# What a doctor sees as "my patients" / "current visit"
DOCTOR_VISIBLE_STATUSES = (EncounterStatus.ASSIGNED, EncounterStatus.IN_TREATMENT)


class TriageUrgency(models.TextChoices):
    LOW = "Low", "Low"
    MEDIUM = "Medium", "Medium"
    HIGH = "High", "High"
    CRITICAL = "Critical", "Critical"


class Encounter(FacilityScopedModel):
    """
    One clinical episode for a patient at one facility.
    Status only moves through mc_core.encounters.lifecycle.
    """
    patient = models.ForeignKey(Patient, on_delete=models.PROTECT, related_name="encounters")

    status = models.CharField(
        max_length=16,
        choices=EncounterStatus.choices,
        default=EncounterStatus.PENDING,
        db_index=True,
    )

    assigned_doctor = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="assigned_encounters",
        null=True,
        blank=True,
    )
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="created_encounters",
        null=True,
        blank=True,
    )

    # Triage sub-record
    vitals = models.JSONField(default=dict, blank=True)
    chief_complaint = models.CharField(max_length=500, blank=True, default="")
    urgency = models.CharField(max_length=16, choices=TriageUrgency.choices, blank=True, default="")
    triaged_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="triaged_encounters",
        null=True,
        blank=True,
    )
    triage_completed_at = models.DateTimeField(null=True, blank=True)

    # Clinical notes sub-record
    diagnosis = models.TextField(blank=True, default="")
    treatment_plan = models.TextField(blank=True, default="")

    # Artifact references (set semantics: re-adding is a no-op)
    lab_requests = models.ManyToManyField("clinical.LabRequest", related_name="encounters", blank=True)
    prescriptions = models.ManyToManyField("clinical.Prescription", related_name="encounters", blank=True)

    assigned_at = models.DateTimeField(null=True, blank=True)
    treatment_started_at = models.DateTimeField(null=True, blank=True)
    completed_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = "encounters_encounter"
        indexes = [
            models.Index(fields=["facility_id", "status"]),
            models.Index(fields=["facility_id", "patient"]),
            models.Index(fields=["assigned_doctor", "status"]),
        ]
        constraints = [
            # At most one active encounter per patient per facility.
            models.UniqueConstraint(
                fields=["facility_id", "patient"],
                condition=Q(status__in=ACTIVE_STATUSES),
                name="uq_active_encounter_per_patient_facility",
            ),
        ]

    @property
    def has_triage(self) -> bool:
        return self.triage_completed_at is not None

    def __str__(self) -> str:
        return f"Encounter({self.patient_id}, {self.status})"
