# mc_core/clinical/models.py

from django.conf import settings
from django.db import models

from mc_core.common.models import FacilityScopedModel
from mc_core.patients.models import Patient


class LabUrgency(models.TextChoices):
    NORMAL = "Normal", "Normal"
    URGENT = "Urgent", "Urgent"
    STAT = "STAT", "STAT"


class LabRequestStatus(models.TextChoices):
    PENDING = "Pending", "Pending"
    COMPLETED = "Completed", "Completed"


class LabRequest(FacilityScopedModel):
    patient = models.ForeignKey(Patient, on_delete=models.PROTECT, related_name="lab_requests")
    ordering_doctor = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.PROTECT, related_name="ordered_lab_requests")

    test_type = models.CharField(max_length=128)
    urgency = models.CharField(max_length=16, choices=LabUrgency.choices, default=LabUrgency.NORMAL)
    status = models.CharField(max_length=16, choices=LabRequestStatus.choices, default=LabRequestStatus.PENDING)
    instructions = models.TextField(blank=True, default="")

    class Meta:
        db_table = "clinical_lab_request"
        indexes = [models.Index(fields=["facility_id", "patient"])]

    def __str__(self) -> str:
        return f"LabRequest({self.test_type}, {self.status})"


class Prescription(FacilityScopedModel):
    patient = models.ForeignKey(Patient, on_delete=models.PROTECT, related_name="prescriptions")
    prescribing_doctor = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.PROTECT, related_name="issued_prescriptions")

    instructions = models.TextField(blank=True, default="")
    is_filled = models.BooleanField(default=False)

    class Meta:
        db_table = "clinical_prescription"
        indexes = [models.Index(fields=["facility_id", "patient"])]


class PrescriptionItem(models.Model):
    prescription = models.ForeignKey(Prescription, on_delete=models.CASCADE, related_name="items")
    position = models.PositiveIntegerField()

    name = models.CharField(max_length=255)
    dosage = models.CharField(max_length=128)
    frequency = models.CharField(max_length=128)
    duration = models.CharField(max_length=128)

    class Meta:
        db_table = "clinical_prescription_item"
        ordering = ["position"]
        constraints = [
            models.UniqueConstraint(fields=["prescription", "position"], name="uq_prescription_item_position"),
        ]
