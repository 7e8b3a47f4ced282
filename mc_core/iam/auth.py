# mc_core/iam/auth.py

from __future__ import annotations

from django.conf import settings
from rest_framework_simplejwt.authentication import JWTAuthentication

from mc_core.iam.scope import apply_scope_from_headers


class CookieOrHeaderJWTAuthentication(JWTAuthentication):
    """
    Staff JWT from the Authorization header, falling back to the HttpOnly
    access cookie set by LoginView. Once the user is known, the facility
    scope (X-Facility-Id) is resolved onto the request.
    """

    def _token_from_cookie(self, request):
        cookie_name = settings.SIMPLE_JWT.get("AUTH_COOKIE", "mc_access")
        raw_token = request.COOKIES.get(cookie_name)
        if not raw_token:
            return None
        validated = self.get_validated_token(raw_token)
        return self.get_user(validated), validated

    def authenticate(self, request):
        if self.get_header(request):
            result = super().authenticate(request)
        else:
            result = self._token_from_cookie(request)

        if result is None:
            return None

        user, _token = result
        apply_scope_from_headers(request, user=user)
        return result
