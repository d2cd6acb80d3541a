# hospital_core/appointments/selectors.py
from __future__ import annotations

from typing import Any

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db.models import QuerySet
from django.utils import timezone
from rest_framework.exceptions import NotFound, ValidationError

from hospital_core.appointments.filters import AppointmentFilter
from hospital_core.appointments.models import Appointment
from hospital_core.appointments.rules import group_by_date


def get_appointment(*, appointment_id, for_update: bool = False) -> Appointment:
    qs = Appointment.objects.select_related("patient", "doctor")
    if for_update:
        qs = qs.select_for_update(of=("self",))
    try:
        return qs.get(id=appointment_id)
    except (Appointment.DoesNotExist, DjangoValidationError):
        raise NotFound("Appointment not found.")


def list_appointments(*, params: Any) -> QuerySet[Appointment]:
    qs = Appointment.objects.select_related("patient", "doctor")

    f = AppointmentFilter(data=params, queryset=qs)
    if not f.is_valid():
        raise ValidationError(f.errors)

    return f.qs.order_by("appointment_time")


def appointments_by_date(appointments) -> dict:
    """
    {date: [appointments ordered by time]} with dates ascending, in the local timezone.
    """
    return group_by_date(appointments, time_of=lambda a: timezone.localtime(a.appointment_time))
