# mc_core/facilities/admin.py
from __future__ import annotations

from django.contrib import admin

from mc_core.facilities.models import Facility, FacilityCredential


@admin.register(Facility)
class FacilityAdmin(admin.ModelAdmin):
    list_display = ("name", "code", "facility_type", "is_active", "location", "updated_at")
    list_filter = ("is_active", "facility_type")
    search_fields = ("name", "code", "location", "license_number")
    readonly_fields = ("id", "created_at", "updated_at")
    ordering = ("name",)


@admin.register(FacilityCredential)
class FacilityCredentialAdmin(admin.ModelAdmin):
    list_display = ("key_prefix", "facility", "is_approved", "approved_at", "created_at")
    list_filter = ("is_approved",)
    search_fields = ("key_prefix", "facility__name", "facility__code")
    readonly_fields = ("id", "key_digest", "key_prefix", "created_at", "updated_at")
