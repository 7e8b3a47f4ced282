# mc_core/central_history/api/views.py
from __future__ import annotations

from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from mc_core.central_history.api.serializers import (
    CentralRecordSubmitResponseSerializer,
    CentralRecordSubmitSerializer,
    PrescriptionReferenceSerializer,
)
from mc_core.central_history.services import CentralHistoryService
from mc_core.facilities.auth import FacilityKeyAuthentication, IsAuthenticatedFacility


class CentralRecordSubmitView(APIView):
    """
    POST /api/v1/central/records/

    A facility pushes one visit for a patient identified by national ID.
    201 when the central record is created, 200 when a visit is appended.
    Both carry the resulting aggregate under "patient".
    """
    authentication_classes = [FacilityKeyAuthentication]
    permission_classes = [IsAuthenticatedFacility]

    @extend_schema(
        request=CentralRecordSubmitSerializer,
        responses={201: CentralRecordSubmitResponseSerializer, 200: CentralRecordSubmitResponseSerializer},
        tags=["Central History"],
    )
    def post(self, request):
        ser = CentralRecordSubmitSerializer(data=request.data or {})
        ser.is_valid(raise_exception=True)

        result = CentralHistoryService.submit_visit(facility=request.user, **ser.to_service_kwargs())

        aggregate = CentralHistoryService.fetch_history(national_id=result.patient.national_id)
        body = {
            "status": "created" if result.created else "updated",
            "nationalID": result.patient.national_id,
            "visitId": str(result.visit.id),
            "sequence": result.visit.sequence,
            "totalRecords": aggregate["totalRecords"],
            "patient": aggregate,
        }
        return Response(body, status=status.HTTP_201_CREATED if result.created else status.HTTP_200_OK)


class CentralRecordDetailView(APIView):
    """Public lookup of a patient's full longitudinal history."""
    authentication_classes: list = []
    permission_classes = [AllowAny]

    @extend_schema(responses={200: OpenApiResponse(description="Demographics + records, most recent first")}, tags=["Central History"])
    def get(self, request, national_id: str):
        return Response(CentralHistoryService.fetch_history(national_id=national_id), status=status.HTTP_200_OK)


class VisitPrescriptionReferenceView(APIView):
    authentication_classes = [FacilityKeyAuthentication]
    permission_classes = [IsAuthenticatedFacility]

    @extend_schema(request=PrescriptionReferenceSerializer, responses={200: OpenApiResponse(description="Updated doctor notes")}, tags=["Central History"])
    def post(self, request, national_id: str, visit_id: str):
        ser = PrescriptionReferenceSerializer(data=request.data or {})
        ser.is_valid(raise_exception=True)

        entry = CentralHistoryService.attach_prescription_reference(
            facility=request.user,
            national_id=national_id,
            visit_id=visit_id,
            prescription_ref=ser.validated_data["prescriptionRef"],
        )
        return Response({"visitId": str(entry.id), "doctorNotes": entry.doctor_notes}, status=status.HTTP_200_OK)
