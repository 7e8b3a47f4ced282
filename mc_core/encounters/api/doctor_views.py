# mc_core/encounters/api/doctor_views.py
from __future__ import annotations

from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from mc_core.common.api.pagination import paginate
from mc_core.common.permissions import DoctorPatientPermission
from mc_core.encounters.access import AccessControlGuard
from mc_core.encounters.api.serializers import AssignedPatientSerializer
from mc_core.encounters.models import Encounter
from mc_core.encounters.read_models import build_medical_history, build_patient_profile
from mc_core.iam.scope import require_principal


class DoctorPatientViewSet(viewsets.ViewSet):
    """
    A doctor's view of patients: only those reachable through encounters
    assigned to the requesting doctor.
    """
    permission_classes = [DoctorPatientPermission]
    serializer_class = AssignedPatientSerializer
    queryset = Encounter.objects.none()

    @extend_schema(parameters=[OpenApiParameter("search", str, OpenApiParameter.QUERY, required=False)])
    def list(self, request):
        principal = require_principal(request)
        qs = AccessControlGuard.assigned_encounters(
            principal=principal,
            search=request.query_params.get("search"),
        )
        return paginate(request, qs, AssignedPatientSerializer)

    def retrieve(self, request, pk=None):
        principal = require_principal(request)
        patient = AccessControlGuard.authorize_patient(principal=principal, patient_id=pk)
        return Response(build_patient_profile(patient), status=status.HTTP_200_OK)

    @action(detail=True, methods=["get"], url_path="history")
    def history(self, request, pk=None):
        principal = require_principal(request)
        patient = AccessControlGuard.authorize_patient(principal=principal, patient_id=pk)
        return Response(build_medical_history(patient), status=status.HTTP_200_OK)
