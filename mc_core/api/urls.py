# mc_core/api/urls.py
from __future__ import annotations

from django.urls import path
from rest_framework.routers import DefaultRouter

from mc_core.central_history.api.views import (
    CentralRecordDetailView,
    CentralRecordSubmitView,
    VisitPrescriptionReferenceView,
)
from mc_core.encounters.api.doctor_views import DoctorPatientViewSet
from mc_core.encounters.api.views import EncounterViewSet
from mc_core.iam.api.auth import LoginView, LogoutView, RefreshView
from mc_core.iam.api.me import MeView
from mc_core.patients.api.views import PatientViewSet

router = DefaultRouter()

router.register(r"patients", PatientViewSet, basename="patients")
router.register(r"encounters", EncounterViewSet, basename="encounter")
router.register(r"doctor/patients", DoctorPatientViewSet, basename="doctor-patients")

urlpatterns = [
    # Staff auth
    path("auth/login/", LoginView.as_view(), name="login"),
    path("auth/refresh/", RefreshView.as_view(), name="refresh"),
    path("auth/logout/", LogoutView.as_view(), name="logout"),
    path("me/", MeView.as_view(), name="me"),

    # Central history (facility API key for writes, public read)
    path("central/records/", CentralRecordSubmitView.as_view(), name="central-records"),
    path("central/records/<str:national_id>/", CentralRecordDetailView.as_view(), name="central-record-detail"),
    path(
        "central/records/<str:national_id>/visits/<str:visit_id>/prescriptions/",
        VisitPrescriptionReferenceView.as_view(),
        name="central-visit-prescriptions",
    ),

    # Router URLs last (so explicit paths win if ever overlapping)
    *router.urls,
]
