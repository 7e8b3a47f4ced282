from __future__ import annotations

from django.contrib import admin

from mc_core.patients.models import Patient


@admin.register(Patient)
class PatientAdmin(admin.ModelAdmin):
    list_display = ("national_id", "first_name", "last_name", "gender", "facility_id", "created_at")
    list_filter = ("gender",)
    search_fields = ("national_id", "first_name", "last_name", "phone")
    readonly_fields = ("id", "created_at", "updated_at")
