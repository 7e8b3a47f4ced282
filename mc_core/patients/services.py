# mc_core/patients/services.py
from __future__ import annotations

import logging

from django.db import IntegrityError, transaction
from rest_framework.exceptions import ValidationError

from mc_core.iam.scope import StaffPrincipal
from mc_core.patients.models import Patient

logger = logging.getLogger(__name__)


class PatientService:
    @staticmethod
    def register(
        *,
        principal: StaffPrincipal,
        national_id: str,
        first_name: str,
        last_name: str,
        gender: str,
        date_of_birth=None,
        blood_group: str = "",
        phone: str = "",
        address: str = "",
    ) -> Patient:
        try:
            with transaction.atomic():
                patient = Patient.objects.create(
                    facility_id=principal.facility_id,
                    national_id=national_id.strip(),
                    first_name=first_name,
                    last_name=last_name,
                    gender=gender,
                    date_of_birth=date_of_birth,
                    blood_group=blood_group or "",
                    phone=phone or "",
                    address=address or "",
                )
        except IntegrityError:
            # National ID uniqueness is enforced by constraint; surface readable error.
            raise ValidationError({"national_id": "A patient with this national ID is already registered here."})

        logger.info("Patient %s registered at facility %s", patient.id, principal.facility_id)
        return patient
