# mc_core/central_history/api/serializers.py
from __future__ import annotations

from rest_framework import serializers

from mc_core.patients.models import BloodGroup, Gender


class DoctorNotesSerializer(serializers.Serializer):
    diagnosis = serializers.CharField(required=False, allow_blank=True, default="")
    treatmentPlan = serializers.CharField(required=False, allow_blank=True, default="")
    prescriptions = serializers.ListField(child=serializers.CharField(), required=False, default=list)


class LabResultSerializer(serializers.Serializer):
    testName = serializers.CharField()
    result = serializers.CharField(required=False, allow_blank=True, default="")
    date = serializers.DateField(required=False, allow_null=True, default=None)


class MedicationSerializer(serializers.Serializer):
    medicationName = serializers.CharField()
    dosage = serializers.CharField(required=False, allow_blank=True, default="")
    frequency = serializers.CharField(required=False, allow_blank=True, default="")
    duration = serializers.CharField(required=False, allow_blank=True, default="")


class VisitRecordSerializer(serializers.Serializer):
    doctorNotes = DoctorNotesSerializer()
    labResults = LabResultSerializer(many=True, required=False, default=list)
    prescription = MedicationSerializer(many=True, required=False, default=list)


class CentralRecordSubmitSerializer(serializers.Serializer):
    nationalID = serializers.CharField(max_length=64)
    firstName = serializers.CharField(max_length=128)
    lastName = serializers.CharField(max_length=128)
    dateOfBirth = serializers.DateField()
    gender = serializers.ChoiceField(choices=Gender.choices)
    bloodGroup = serializers.ChoiceField(choices=BloodGroup.choices, required=False, allow_blank=True, default="")
    record = VisitRecordSerializer()

    def to_service_kwargs(self) -> dict:
        data = self.validated_data
        record = data["record"]
        return {
            "national_id": data["nationalID"],
            "demographics": {
                "first_name": data["firstName"],
                "last_name": data["lastName"],
                "date_of_birth": data["dateOfBirth"],
                "gender": data["gender"],
                "blood_group": data.get("bloodGroup") or "",
            },
            "visit": {
                "doctor_notes": {
                    "diagnosis": record["doctorNotes"].get("diagnosis", ""),
                    "treatment_plan": record["doctorNotes"].get("treatmentPlan", ""),
                    "prescriptions": record["doctorNotes"].get("prescriptions", []),
                },
                "lab_results": [dict(r) for r in record.get("labResults", [])],
                "prescriptions": [dict(m) for m in record.get("prescription", [])],
            },
        }


class CentralRecordSubmitResponseSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=["created", "updated"])
    nationalID = serializers.CharField()
    visitId = serializers.UUIDField()
    sequence = serializers.IntegerField()
    totalRecords = serializers.IntegerField()
    patient = serializers.DictField(help_text="Resulting aggregate: demographics plus records, most recent first")


class PrescriptionReferenceSerializer(serializers.Serializer):
    prescriptionRef = serializers.CharField(max_length=128)
