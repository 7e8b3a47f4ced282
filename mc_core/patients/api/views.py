# mc_core/patients/api/views.py
from __future__ import annotations

from rest_framework import status, viewsets
from rest_framework.response import Response

from mc_core.common.api.pagination import paginate
from mc_core.common.permissions import PatientPermission
from mc_core.iam.scope import require_principal
from mc_core.patients.api.serializers import PatientCreateSerializer, PatientSerializer
from mc_core.patients.models import Patient
from mc_core.patients.selectors import search_patients
from mc_core.patients.services import PatientService


class PatientViewSet(viewsets.ViewSet):
    """Facility-local patient registry (front desk / nursing)."""
    permission_classes = [PatientPermission]

    serializer_class = PatientSerializer
    queryset = Patient.objects.none()

    def list(self, request):
        principal = require_principal(request)
        qs = search_patients(facility_id=principal.facility_id, q=request.query_params.get("q"))
        return paginate(request, qs, PatientSerializer)

    def create(self, request):
        principal = require_principal(request)

        ser = PatientCreateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        patient = PatientService.register(principal=principal, **ser.validated_data)
        return Response(PatientSerializer(patient).data, status=status.HTTP_201_CREATED)
