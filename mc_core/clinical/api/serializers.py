# mc_core/clinical/api/serializers.py
from __future__ import annotations

from rest_framework import serializers

from mc_core.clinical.models import LabRequest, LabUrgency, Prescription, PrescriptionItem


class LabRequestCreateSerializer(serializers.Serializer):
    test_type = serializers.CharField(max_length=128)
    urgency = serializers.ChoiceField(choices=LabUrgency.choices, required=False, default=LabUrgency.NORMAL)
    instructions = serializers.CharField(required=False, allow_blank=True, default="")


class LabRequestSerializer(serializers.ModelSerializer):
    class Meta:
        model = LabRequest
        fields = [
            "id",
            "facility_id",
            "patient",
            "ordering_doctor",
            "test_type",
            "urgency",
            "status",
            "instructions",
            "created_at",
        ]
        read_only_fields = fields


class PrescriptionCreateSerializer(serializers.Serializer):
    # Line items are validated by the service so partially valid batches survive
    medicines = serializers.ListField(allow_empty=True)
    instructions = serializers.CharField(required=False, allow_blank=True, default="")


class PrescriptionItemSerializer(serializers.ModelSerializer):
    class Meta:
        model = PrescriptionItem
        fields = ["name", "dosage", "frequency", "duration"]
        read_only_fields = fields


class PrescriptionSerializer(serializers.ModelSerializer):
    medicines = PrescriptionItemSerializer(source="items", many=True, read_only=True)

    class Meta:
        model = Prescription
        fields = [
            "id",
            "facility_id",
            "patient",
            "prescribing_doctor",
            "medicines",
            "instructions",
            "is_filled",
            "created_at",
        ]
        read_only_fields = fields
