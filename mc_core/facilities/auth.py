# mc_core/facilities/auth.py

from __future__ import annotations

from django.conf import settings
from rest_framework.authentication import BaseAuthentication
from rest_framework.exceptions import NotAuthenticated
from rest_framework.permissions import BasePermission

from mc_core.facilities.authenticator import MISSING_KEY_MSG, FacilityAuthenticator, FacilityContext


class FacilityKeyAuthentication(BaseAuthentication):
    """
    Authenticate a facility by its secret key:
      1) X-Api-Key header
      2) ?apiKey= query parameter

    No key -> None (DRF turns that into 401 via authenticate_header).
    Bad or unapproved key -> 403.
    """

    def _raw_key(self, request) -> str | None:
        header = getattr(settings, "MC_FACILITY_KEY_HEADER", "X-Api-Key")
        param = getattr(settings, "MC_FACILITY_KEY_QUERY_PARAM", "apiKey")
        return request.headers.get(header) or request.query_params.get(param)

    def authenticate(self, request):
        raw_key = self._raw_key(request)
        if not raw_key:
            return None

        facility = FacilityAuthenticator.resolve(raw_key)
        return facility, None

    def authenticate_header(self, request):
        return getattr(settings, "MC_FACILITY_KEY_HEADER", "X-Api-Key")


class IsAuthenticatedFacility(BasePermission):
    def has_permission(self, request, view) -> bool:
        if not isinstance(getattr(request, "user", None), FacilityContext):
            raise NotAuthenticated(MISSING_KEY_MSG)
        return True
