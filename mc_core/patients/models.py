# mc_core/patients/models.py
from django.db import models

from mc_core.common.models import FacilityScopedModel


class Gender(models.TextChoices):
    MALE = "Male", "Male"
    FEMALE = "Female", "Female"
    OTHER = "Other", "Other"


class BloodGroup(models.TextChoices):
    A_POS = "A+", "A+"
    A_NEG = "A-", "A-"
    B_POS = "B+", "B+"
    B_NEG = "B-", "B-"
    AB_POS = "AB+", "AB+"
    AB_NEG = "AB-", "AB-"
    O_POS = "O+", "O+"
    O_NEG = "O-", "O-"


class Patient(FacilityScopedModel):
    """
    Facility-local patient registration, keyed by the national ID.
    The cross-facility record lives in central_history.CentralPatient.
    """
    national_id = models.CharField(max_length=64)

    first_name = models.CharField(max_length=128)
    last_name = models.CharField(max_length=128)
    date_of_birth = models.DateField(null=True, blank=True)
    gender = models.CharField(max_length=16, choices=Gender.choices)
    blood_group = models.CharField(max_length=4, choices=BloodGroup.choices, blank=True, default="")

    phone = models.CharField(max_length=32, blank=True, default="")
    address = models.CharField(max_length=255, blank=True, default="")

    class Meta:
        db_table = "patients_patient"
        constraints = [
            models.UniqueConstraint(
                fields=["facility_id", "national_id"],
                name="uq_patient_facility_national_id",
            ),
        ]
        indexes = [
            models.Index(fields=["facility_id", "last_name", "first_name"]),
        ]

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    def __str__(self) -> str:
        return f"{self.full_name} ({self.national_id})"
