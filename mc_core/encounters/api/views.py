# mc_core/encounters/api/views.py
from __future__ import annotations

from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from mc_core.clinical.api.serializers import (
    LabRequestCreateSerializer,
    LabRequestSerializer,
    PrescriptionCreateSerializer,
    PrescriptionSerializer,
)
from mc_core.clinical.services import ClinicalArtifactService
from mc_core.common.permissions import EncounterPermission
from mc_core.encounters.access import AccessControlGuard
from mc_core.encounters.api.serializers import (
    AssignDoctorSerializer,
    CompleteInputSerializer,
    EncounterCreateSerializer,
    EncounterSerializer,
    TriageInputSerializer,
)
from mc_core.encounters.models import Encounter
from mc_core.encounters.read_models import encounter_detail
from mc_core.encounters.services import EncounterService
from mc_core.iam.scope import require_principal


class EncounterViewSet(viewsets.ViewSet):
    permission_classes = [EncounterPermission]
    serializer_class = EncounterSerializer
    queryset = Encounter.objects.none()

    # ------------------------------------------------------------
    # Intake / triage / assignment
    # ------------------------------------------------------------
    def create(self, request):
        principal = require_principal(request)

        ser = EncounterCreateSerializer(data=request.data or {})
        ser.is_valid(raise_exception=True)

        enc = EncounterService.create(principal=principal, **ser.validated_data)
        return Response(EncounterSerializer(enc).data, status=status.HTTP_201_CREATED)

    @extend_schema(request=TriageInputSerializer, responses={200: EncounterSerializer})
    @action(detail=True, methods=["post"], url_path="triage")
    def triage(self, request, pk=None):
        principal = require_principal(request)

        ser = TriageInputSerializer(data=request.data or {})
        ser.is_valid(raise_exception=True)

        enc = EncounterService.record_triage(principal=principal, encounter_id=pk, **ser.validated_data)
        return Response(EncounterSerializer(enc).data, status=status.HTTP_200_OK)

    @extend_schema(request=AssignDoctorSerializer, responses={200: EncounterSerializer})
    @action(detail=True, methods=["post"], url_path="assign")
    def assign(self, request, pk=None):
        principal = require_principal(request)

        ser = AssignDoctorSerializer(data=request.data or {})
        ser.is_valid(raise_exception=True)

        enc = EncounterService.assign_doctor(
            principal=principal,
            encounter_id=pk,
            doctor_id=ser.validated_data["doctor_id"],
        )
        return Response(EncounterSerializer(enc).data, status=status.HTTP_200_OK)

    # ------------------------------------------------------------
    # Doctor workflow (assigned doctor only)
    # ------------------------------------------------------------
    @extend_schema(responses={200: OpenApiResponse(description="Encounter with patient summary, triage, notes and artifacts")})
    def retrieve(self, request, pk=None):
        principal = require_principal(request)
        enc = AccessControlGuard.authorize_encounter(principal=principal, encounter_id=pk)
        return Response(encounter_detail(enc), status=status.HTTP_200_OK)

    @extend_schema(request=None, responses={200: EncounterSerializer})
    @action(detail=True, methods=["post"], url_path="start-treatment")
    def start_treatment(self, request, pk=None):
        principal = require_principal(request)
        enc = EncounterService.start_treatment(principal=principal, encounter_id=pk)
        return Response(EncounterSerializer(enc).data, status=status.HTTP_200_OK)

    @extend_schema(request=CompleteInputSerializer, responses={200: EncounterSerializer})
    @action(detail=True, methods=["post"], url_path="complete")
    def complete(self, request, pk=None):
        principal = require_principal(request)

        ser = CompleteInputSerializer(data=request.data or {})
        ser.is_valid(raise_exception=True)

        enc = EncounterService.complete(principal=principal, encounter_id=pk, **ser.validated_data)
        return Response(EncounterSerializer(enc).data, status=status.HTTP_200_OK)

    @extend_schema(request=LabRequestCreateSerializer, responses={200: LabRequestSerializer(many=True), 201: LabRequestSerializer})
    @action(detail=True, methods=["get", "post"], url_path="lab-requests")
    def lab_requests(self, request, pk=None):
        principal = require_principal(request)

        if request.method == "GET":
            qs = ClinicalArtifactService.list_lab_requests(principal=principal, encounter_id=pk)
            data = LabRequestSerializer(qs, many=True).data
            return Response({"count": len(data), "results": data}, status=status.HTTP_200_OK)

        ser = LabRequestCreateSerializer(data=request.data or {})
        ser.is_valid(raise_exception=True)

        lab = ClinicalArtifactService.create_lab_request(principal=principal, encounter_id=pk, **ser.validated_data)
        return Response(LabRequestSerializer(lab).data, status=status.HTTP_201_CREATED)

    @extend_schema(request=PrescriptionCreateSerializer, responses={200: PrescriptionSerializer(many=True), 201: PrescriptionSerializer})
    @action(detail=True, methods=["get", "post"], url_path="prescriptions")
    def prescriptions(self, request, pk=None):
        principal = require_principal(request)

        if request.method == "GET":
            qs = ClinicalArtifactService.list_prescriptions(principal=principal, encounter_id=pk)
            data = PrescriptionSerializer(qs, many=True).data
            return Response({"count": len(data), "results": data}, status=status.HTTP_200_OK)

        ser = PrescriptionCreateSerializer(data=request.data or {})
        ser.is_valid(raise_exception=True)

        rx, dropped = ClinicalArtifactService.create_prescription(
            principal=principal,
            encounter_id=pk,
            **ser.validated_data,
        )
        payload = dict(PrescriptionSerializer(rx).data)
        payload["droppedItems"] = dropped
        return Response(payload, status=status.HTTP_201_CREATED)
