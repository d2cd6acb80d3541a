# hospital_core/patients/selectors.py
from __future__ import annotations

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db.models import Q, QuerySet
from rest_framework.exceptions import NotFound

from hospital_core.patients.models import Patient


def get_patient(*, patient_id) -> Patient:
    try:
        return Patient.objects.get(id=patient_id)
    except (Patient.DoesNotExist, DjangoValidationError):
        raise NotFound("Patient not found.")


def search_patients(*, q: str | None = None) -> QuerySet[Patient]:
    qs = Patient.objects.all()

    qv = (q or "").strip()
    if qv:
        qs = qs.filter(Q(name__icontains=qv) | Q(cpf__icontains=qv))

    return qs.order_by("name")
