# mc_core/encounters/admin.py
from __future__ import annotations

from django.contrib import admin

from mc_core.encounters.models import Encounter


@admin.register(Encounter)
class EncounterAdmin(admin.ModelAdmin):
    list_display = ("id", "facility_id", "patient", "status", "assigned_doctor", "urgency", "created_at")
    list_filter = ("facility_id", "status", "urgency")
    search_fields = ("id", "patient__national_id", "patient__first_name", "patient__last_name")
    raw_id_fields = ("patient", "assigned_doctor", "created_by", "triaged_by")
    filter_horizontal = ("lab_requests", "prescriptions")
    ordering = ("-created_at",)
