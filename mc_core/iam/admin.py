# mc_core/iam/admin.py
from __future__ import annotations

from django.contrib import admin

from mc_core.iam.models import StaffMembership


@admin.register(StaffMembership)
class StaffMembershipAdmin(admin.ModelAdmin):
    list_display = ("facility", "user", "is_active", "created_at")
    list_filter = ("facility", "is_active")
    search_fields = ("facility__name", "facility__code", "user__username", "user__email")
    autocomplete_fields = ("facility", "user")
