# mc_core/encounters/api/serializers.py
from __future__ import annotations

from rest_framework import serializers

from mc_core.encounters.models import Encounter, TriageUrgency


class EncounterCreateSerializer(serializers.Serializer):
    patient_id = serializers.UUIDField()
    chief_complaint = serializers.CharField(max_length=500, required=False, allow_blank=True, default="")


class TriageInputSerializer(serializers.Serializer):
    vitals = serializers.DictField(required=False, default=dict)
    chief_complaint = serializers.CharField(max_length=500)
    urgency = serializers.ChoiceField(choices=TriageUrgency.choices)


class AssignDoctorSerializer(serializers.Serializer):
    doctor_id = serializers.IntegerField()


class CompleteInputSerializer(serializers.Serializer):
    # Presence is checked by the service so every missing field is reported together
    diagnosis = serializers.CharField(required=False, allow_blank=True, default="")
    treatment_plan = serializers.CharField(required=False, allow_blank=True, default="")
    vitals = serializers.DictField(required=False, default=dict)


class EncounterSerializer(serializers.ModelSerializer):
    lab_requests = serializers.PrimaryKeyRelatedField(many=True, read_only=True)
    prescriptions = serializers.PrimaryKeyRelatedField(many=True, read_only=True)

    class Meta:
        model = Encounter
        fields = [
            "id",
            "facility_id",
            "patient",
            "status",
            "assigned_doctor",
            "created_by",
            "vitals",
            "chief_complaint",
            "urgency",
            "triaged_by",
            "triage_completed_at",
            "diagnosis",
            "treatment_plan",
            "lab_requests",
            "prescriptions",
            "assigned_at",
            "treatment_started_at",
            "completed_at",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class AssignedPatientSerializer(serializers.Serializer):
    """One row of a doctor's "my patients" list (encounter + patient summary)."""
    encounterId = serializers.UUIDField(source="id")
    status = serializers.CharField()
    patientId = serializers.UUIDField(source="patient.id")
    nationalID = serializers.CharField(source="patient.national_id")
    firstName = serializers.CharField(source="patient.first_name")
    lastName = serializers.CharField(source="patient.last_name")
    gender = serializers.CharField(source="patient.gender")
    dateOfBirth = serializers.DateField(source="patient.date_of_birth")
    bloodGroup = serializers.CharField(source="patient.blood_group")
    urgency = serializers.CharField()
    createdAt = serializers.DateTimeField(source="created_at")
