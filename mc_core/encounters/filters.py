# mc_core/encounters/filters.py
from __future__ import annotations

import django_filters
from django.db.models import Q

from mc_core.encounters.models import Encounter


class AssignedEncounterFilter(django_filters.FilterSet):
    """
    Applied on top of an already doctor-scoped queryset, so it can only narrow.
    """
    search = django_filters.CharFilter(method="filter_search")

    class Meta:
        model = Encounter
        fields = ["status"]

    def filter_search(self, queryset, name, value):
        # Every whitespace-separated token must hit one of the fields
        for token in (value or "").split():
            queryset = queryset.filter(
                Q(patient__national_id__icontains=token)
                | Q(patient__first_name__icontains=token)
                | Q(patient__last_name__icontains=token)
            )
        return queryset
