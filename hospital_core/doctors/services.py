# hospital_core/doctors/services.py
from __future__ import annotations

import logging

from django.db import transaction
from django.db.models import ProtectedError

from hospital_core.audit.services import AuditService
from hospital_core.common.api.exceptions import ConflictError
from hospital_core.doctors.models import Doctor
from hospital_core.doctors.selectors import get_doctor

logger = logging.getLogger(__name__)


class DoctorService:
    """
    Doctor write-model operations.

    Deletion is restricted: a doctor referenced by any appointment cannot be
    deleted (409). Cancel or reassign the appointments first.
    """

    @staticmethod
    @transaction.atomic
    def create_doctor(*, actor_user_id: int | None, name: str, specialty: str) -> Doctor:
        doctor = Doctor.objects.create(name=name, specialty=specialty)

        AuditService.log(
            event_code="doctor.created",
            entity_type="Doctor",
            entity_id=doctor.id,
            actor_user_id=actor_user_id,
            metadata={"specialty": specialty},
        )
        logger.info("Doctor %s created", doctor.id)
        return doctor

    @staticmethod
    @transaction.atomic
    def update_doctor(*, actor_user_id: int | None, doctor_id, name: str, specialty: str) -> Doctor:
        doctor = get_doctor(doctor_id=doctor_id, for_update=True)
        doctor.name = name
        doctor.specialty = specialty
        doctor.save(update_fields=["name", "specialty", "updated_at"])

        AuditService.log(
            event_code="doctor.updated",
            entity_type="Doctor",
            entity_id=doctor.id,
            actor_user_id=actor_user_id,
            metadata={"specialty": specialty},
        )
        return doctor

    @staticmethod
    @transaction.atomic
    def delete_doctor(*, actor_user_id: int | None, doctor_id) -> None:
        doctor = get_doctor(doctor_id=doctor_id)
        did = doctor.id

        try:
            doctor.delete()
        except ProtectedError:
            logger.warning("Refused to delete doctor %s: appointments still reference it", did)
            raise ConflictError("Doctor has appointments and cannot be deleted.", code="protected")

        AuditService.log(
            event_code="doctor.deleted",
            entity_type="Doctor",
            entity_id=did,
            actor_user_id=actor_user_id,
        )
        logger.info("Doctor %s deleted", did)
