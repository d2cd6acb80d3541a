# hospital_core/api/urls.py
from __future__ import annotations

from django.urls import path
from rest_framework.routers import DefaultRouter

from hospital_core.appointments.api.views import AppointmentViewSet
from hospital_core.dashboard.api.views import DashboardView
from hospital_core.doctors.api.views import DoctorViewSet
from hospital_core.iam.api.auth import LoginView, MeView, RegisterView
from hospital_core.inventory.api.views import MedicationViewSet
from hospital_core.patients.api.views import PatientViewSet

router = DefaultRouter()

router.register(r"patients", PatientViewSet, basename="patients")
router.register(r"doctors", DoctorViewSet, basename="doctors")
router.register(r"appointments", AppointmentViewSet, basename="appointments")
router.register(r"medications", MedicationViewSet, basename="medications")

urlpatterns = [
    # Auth + /me
    path("auth/login/", LoginView.as_view(), name="login"),
    path("auth/register/", RegisterView.as_view(), name="register"),
    path("me/", MeView.as_view(), name="me"),
    path("dashboard/", DashboardView.as_view(), name="dashboard"),

    # Router URLs last (so explicit paths win if ever overlapping)
    *router.urls,
]
