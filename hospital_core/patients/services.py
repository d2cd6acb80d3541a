# hospital_core/patients/services.py
from __future__ import annotations

import logging

from django.db import IntegrityError, transaction
from django.db.models import ProtectedError

from hospital_core.audit.services import AuditService
from hospital_core.common.api.exceptions import ConflictError
from hospital_core.patients.models import Patient
from hospital_core.patients.selectors import get_patient

logger = logging.getLogger(__name__)

DUPLICATE_CPF_MSG = "CPF is already in use."


class PatientService:
    @staticmethod
    @transaction.atomic
    def create_patient(*, actor_user_id: int | None, name: str, dob, cpf: str) -> Patient:
        try:
            with transaction.atomic():
                patient = Patient.objects.create(name=name, dob=dob, cpf=cpf)
        except IntegrityError:
            # CPF uniqueness is enforced by constraint; surface a readable 409.
            raise ConflictError({"cpf": DUPLICATE_CPF_MSG, "detail": DUPLICATE_CPF_MSG}, code="duplicate")

        AuditService.log(
            event_code="patient.created",
            entity_type="Patient",
            entity_id=patient.id,
            actor_user_id=actor_user_id,
            metadata={"cpf": cpf},
        )
        logger.info("Patient %s created", patient.id)
        return patient

    @staticmethod
    @transaction.atomic
    def update_patient(*, actor_user_id: int | None, patient_id, data: dict) -> Patient:
        patient = get_patient(patient_id=patient_id)

        allowed = {"name", "dob", "cpf"}
        updates = {k: v for k, v in (data or {}).items() if k in allowed}

        for k, v in updates.items():
            setattr(patient, k, v)

        try:
            with transaction.atomic():
                patient.save()
        except IntegrityError:
            raise ConflictError({"cpf": DUPLICATE_CPF_MSG, "detail": DUPLICATE_CPF_MSG}, code="duplicate")

        AuditService.log(
            event_code="patient.updated",
            entity_type="Patient",
            entity_id=patient.id,
            actor_user_id=actor_user_id,
            metadata={"updated_fields": sorted(updates.keys())},
        )
        return patient

    @staticmethod
    @transaction.atomic
    def delete_patient(*, actor_user_id: int | None, patient_id) -> None:
        patient = get_patient(patient_id=patient_id)
        pid = patient.id

        try:
            patient.delete()
        except ProtectedError:
            raise ConflictError("Patient has appointments and cannot be deleted.", code="protected")

        AuditService.log(
            event_code="patient.deleted",
            entity_type="Patient",
            entity_id=pid,
            actor_user_id=actor_user_id,
        )
        logger.info("Patient %s deleted", pid)
