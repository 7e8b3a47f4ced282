# mc_core/patients/api/serializers.py
from __future__ import annotations

from rest_framework import serializers

from mc_core.patients.models import BloodGroup, Gender, Patient


class PatientCreateSerializer(serializers.Serializer):
    national_id = serializers.CharField(max_length=64)
    first_name = serializers.CharField(max_length=128)
    last_name = serializers.CharField(max_length=128)
    gender = serializers.ChoiceField(choices=Gender.choices)
    date_of_birth = serializers.DateField(required=False, allow_null=True)
    blood_group = serializers.ChoiceField(choices=BloodGroup.choices, required=False, allow_blank=True, default="")
    phone = serializers.CharField(max_length=32, required=False, allow_blank=True, default="")
    address = serializers.CharField(max_length=255, required=False, allow_blank=True, default="")


class PatientSerializer(serializers.ModelSerializer):
    class Meta:
        model = Patient
        fields = [
            "id",
            "facility_id",
            "national_id",
            "first_name",
            "last_name",
            "date_of_birth",
            "gender",
            "blood_group",
            "phone",
            "address",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields
