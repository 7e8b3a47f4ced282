# mc_core/iam/api/me.py

from __future__ import annotations

from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from mc_core.common.permissions import user_roles
from mc_core.iam.api.schema_serializers import MeResponseSerializer
from mc_core.iam.scope import resolve_facility_scope
from mc_core.iam.services.membership import list_user_facilities


class MeView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(responses={200: MeResponseSerializer}, tags=["IAM"])
    def get(self, request):
        """
        User info, roles and facility memberships.
        X-Facility-Id is optional here; if sent it must be one of the
        user's facilities (403 otherwise).
        """
        user = request.user
        active = getattr(request, "facility_id", None) or resolve_facility_scope(request, user)

        return Response(
            {
                "user": {
                    "id": user.id,
                    "username": getattr(user, "username", None),
                    "first_name": getattr(user, "first_name", ""),
                    "last_name": getattr(user, "last_name", ""),
                },
                "roles": sorted(user_roles(user)),
                "facilities": list_user_facilities(user.id),
                "active_facility_id": str(active) if active else None,
            },
            status=status.HTTP_200_OK,
        )
