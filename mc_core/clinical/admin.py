# mc_core/clinical/admin.py
from __future__ import annotations

from django.contrib import admin

from mc_core.clinical.models import LabRequest, Prescription, PrescriptionItem


@admin.register(LabRequest)
class LabRequestAdmin(admin.ModelAdmin):
    list_display = ("id", "facility_id", "patient", "test_type", "urgency", "status", "ordering_doctor", "created_at")
    list_filter = ("facility_id", "urgency", "status")
    search_fields = ("id", "test_type", "patient__national_id")
    ordering = ("-created_at",)


class PrescriptionItemInline(admin.TabularInline):
    model = PrescriptionItem
    extra = 0


@admin.register(Prescription)
class PrescriptionAdmin(admin.ModelAdmin):
    list_display = ("id", "facility_id", "patient", "prescribing_doctor", "is_filled", "created_at")
    list_filter = ("facility_id", "is_filled")
    search_fields = ("id", "patient__national_id")
    inlines = [PrescriptionItemInline]
    ordering = ("-created_at",)
