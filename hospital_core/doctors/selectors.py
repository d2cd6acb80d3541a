# hospital_core/doctors/selectors.py
from __future__ import annotations

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db.models import Q, QuerySet
from rest_framework.exceptions import NotFound

from hospital_core.doctors.models import Doctor


def get_doctor(*, doctor_id, for_update: bool = False) -> Doctor:
    qs = Doctor.objects.select_for_update() if for_update else Doctor.objects.all()
    try:
        return qs.get(id=doctor_id)
    except (Doctor.DoesNotExist, DjangoValidationError):
        raise NotFound("Doctor not found.")


def search_doctors(*, q: str | None = None) -> QuerySet[Doctor]:
    qs = Doctor.objects.all()

    qv = (q or "").strip()
    if qv:
        qs = qs.filter(Q(name__icontains=qv) | Q(specialty__icontains=qv))

    return qs.order_by("specialty", "name")


def doctors_by_specialty(doctors) -> dict[str, list[Doctor]]:
    """
    Group an already-filtered doctor listing by specialty, keeping listing order.
    """
    grouped: dict[str, list[Doctor]] = {}
    for doctor in doctors:
        grouped.setdefault(doctor.specialty, []).append(doctor)
    return grouped
