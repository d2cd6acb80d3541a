# hospital_core/dashboard/selectors.py
from __future__ import annotations

from django.db.models import F
from django.utils import timezone

from hospital_core.appointments.models import Appointment
from hospital_core.doctors.models import Doctor
from hospital_core.inventory.models import Medication
from hospital_core.patients.models import Patient


def dashboard_stats(*, today=None) -> dict[str, int]:
    """
    Headline counters. "Low stock" counts everything at or under its minimum,
    empty shelves included.
    """
    today = today or timezone.localdate()
    return {
        "patients": Patient.objects.count(),
        "doctors": Doctor.objects.count(),
        "appointments": Appointment.objects.count(),
        "todayAppointments": Appointment.objects.filter(appointment_time__date=today).count(),
        "medications": Medication.objects.count(),
        "lowStockMedications": Medication.objects.filter(quantity__lte=F("minimum_stock")).count(),
    }
