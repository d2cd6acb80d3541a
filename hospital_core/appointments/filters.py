# hospital_core/appointments/filters.py
from __future__ import annotations

import django_filters
from django.db.models import Q

from hospital_core.appointments.models import Appointment, AppointmentStatus


class AppointmentFilter(django_filters.FilterSet):
    """
    Query params:
      - q: case-insensitive substring of patient name or doctor name
      - status
      - doctor_id / patient_id
      - date: YYYY-MM-DD (calendar date of appointment_time, local timezone)
    """
    q = django_filters.CharFilter(method="filter_q")
    status = django_filters.ChoiceFilter(choices=AppointmentStatus.choices)
    doctor_id = django_filters.UUIDFilter(field_name="doctor_id")
    patient_id = django_filters.UUIDFilter(field_name="patient_id")
    date = django_filters.DateFilter(field_name="appointment_time", lookup_expr="date")

    class Meta:
        model = Appointment
        fields = []

    def filter_q(self, queryset, name, value):
        value = (value or "").strip()
        if not value:
            return queryset
        return queryset.filter(Q(patient__name__icontains=value) | Q(doctor__name__icontains=value))
