# mc_core/central_history/admin.py
from __future__ import annotations

from django.contrib import admin

from mc_core.central_history.models import CentralPatient, VisitEntry


class VisitEntryInline(admin.TabularInline):
    model = VisitEntry
    extra = 0
    can_delete = False
    readonly_fields = ("sequence", "facility", "doctor_notes", "lab_results", "prescriptions", "recorded_at")

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(CentralPatient)
class CentralPatientAdmin(admin.ModelAdmin):
    list_display = ("national_id", "first_name", "last_name", "gender", "blood_group", "created_at")
    search_fields = ("national_id", "first_name", "last_name")
    inlines = [VisitEntryInline]
    ordering = ("-created_at",)
