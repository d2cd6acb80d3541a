# hospital_core/appointments/services.py
from __future__ import annotations

import logging
from datetime import datetime

from django.conf import settings
from django.db import transaction
from django.utils import timezone
from rest_framework.exceptions import ValidationError

from hospital_core.appointments.models import Appointment, AppointmentStatus
from hospital_core.appointments.rules import conflict_window, is_future, transition_error
from hospital_core.appointments.selectors import get_appointment
from hospital_core.audit.services import AuditService
from hospital_core.common.api.exceptions import ConflictError
from hospital_core.doctors.models import Doctor
from hospital_core.doctors.selectors import get_doctor
from hospital_core.patients.selectors import get_patient

logger = logging.getLogger(__name__)

SLOT_TAKEN_MSG = "This time slot is already booked for the doctor."


class AppointmentService:
    """
    Appointment write-model operations.

    Notes:
    - A doctor never has two non-cancelled appointments at the same timestamp.
      With APPOINTMENT_SLOT_MINUTES > 0, starts closer than that also conflict.
    - The doctor row is locked while checking the slot so two concurrent
      bookings for the same doctor are serialized.
    - Status workflow: SCHEDULED -> COMPLETED | CANCELLED. Both are terminal.
    """

    # -------------------------
    # Internal helpers
    # -------------------------
    @staticmethod
    def _slot_minutes() -> int:
        return int(getattr(settings, "APPOINTMENT_SLOT_MINUTES", 0))

    @staticmethod
    def _ensure_slot_free(*, doctor: Doctor, when: datetime, exclude_id=None) -> None:
        qs = Appointment.objects.filter(doctor=doctor).exclude(status=AppointmentStatus.CANCELLED)
        if exclude_id is not None:
            qs = qs.exclude(id=exclude_id)

        window = conflict_window(when, slot_minutes=AppointmentService._slot_minutes())
        if window is None:
            qs = qs.filter(appointment_time=when)
        else:
            lower, upper = window
            qs = qs.filter(appointment_time__gt=lower, appointment_time__lt=upper)

        clash = qs.order_by("appointment_time").first()
        if clash is not None:
            logger.warning(
                "Slot conflict for doctor %s at %s (existing appointment %s)",
                doctor.id,
                when.isoformat(),
                clash.id,
            )
            raise ConflictError(
                {
                    "detail": SLOT_TAKEN_MSG,
                    "appointmentTime": SLOT_TAKEN_MSG,
                    "conflicting_appointment_id": str(clash.id),
                },
                code="schedule_conflict",
            )

    # -------------------------
    # Create
    # -------------------------
    @staticmethod
    @transaction.atomic
    def create_appointment(
        *,
        actor_user_id: int | None,
        patient_id,
        doctor_id,
        appointment_time: datetime,
    ) -> Appointment:
        if not is_future(appointment_time, now=timezone.now()):
            raise ValidationError({"appointmentTime": "Appointment time must be in the future."})

        patient = get_patient(patient_id=patient_id)
        doctor = get_doctor(doctor_id=doctor_id, for_update=True)

        AppointmentService._ensure_slot_free(doctor=doctor, when=appointment_time)

        appt = Appointment.objects.create(
            patient=patient,
            doctor=doctor,
            appointment_time=appointment_time,
            status=AppointmentStatus.SCHEDULED,
        )

        AuditService.log(
            event_code="appointment.created",
            entity_type="Appointment",
            entity_id=appt.id,
            actor_user_id=actor_user_id,
            metadata={
                "patient_id": str(patient.id),
                "doctor_id": str(doctor.id),
                "appointment_time": appointment_time.isoformat(),
            },
        )
        logger.info("Appointment %s booked with doctor %s at %s", appt.id, doctor.id, appointment_time.isoformat())
        return appt

    # -------------------------
    # Update (reschedule and/or status change)
    # -------------------------
    @staticmethod
    @transaction.atomic
    def update_appointment(
        *,
        actor_user_id: int | None,
        appointment_id,
        patient_id,
        doctor_id,
        appointment_time: datetime,
        status: str,
    ) -> Appointment:
        """
        Past timestamps are allowed here (closing out yesterday's visit is an edit).
        """
        appt = get_appointment(appointment_id=appointment_id, for_update=True)

        err = transition_error(appt.status, status)
        if err:
            logger.warning("Rejected status change on appointment %s: %s -> %s", appt.id, appt.status, status)
            raise ConflictError(err, code="invalid_transition")

        patient = get_patient(patient_id=patient_id)
        doctor = get_doctor(doctor_id=doctor_id, for_update=True)

        rescheduled = (
            patient.id != appt.patient_id
            or doctor.id != appt.doctor_id
            or appointment_time != appt.appointment_time
        )
        if rescheduled and appt.status in (AppointmentStatus.COMPLETED, AppointmentStatus.CANCELLED):
            raise ConflictError(
                f"Appointment is {appt.status} and can no longer be rescheduled.",
                code="invalid_transition",
            )

        if status != AppointmentStatus.CANCELLED:
            AppointmentService._ensure_slot_free(doctor=doctor, when=appointment_time, exclude_id=appt.id)

        previous_status = appt.status
        appt.patient = patient
        appt.doctor = doctor
        appt.appointment_time = appointment_time
        appt.status = status
        appt.save(update_fields=["patient", "doctor", "appointment_time", "status", "updated_at"])

        AuditService.log(
            event_code="appointment.updated",
            entity_type="Appointment",
            entity_id=appt.id,
            actor_user_id=actor_user_id,
            metadata={
                "from_status": previous_status,
                "to_status": status,
                "rescheduled": rescheduled,
            },
        )
        logger.info("Appointment %s updated (%s -> %s)", appt.id, previous_status, status)
        return appt

    # -------------------------
    # Delete (irreversible)
    # -------------------------
    @staticmethod
    @transaction.atomic
    def delete_appointment(*, actor_user_id: int | None, appointment_id) -> None:
        appt = get_appointment(appointment_id=appointment_id)
        aid = appt.id
        appt.delete()

        AuditService.log(
            event_code="appointment.deleted",
            entity_type="Appointment",
            entity_id=aid,
            actor_user_id=actor_user_id,
        )
        logger.info("Appointment %s deleted", aid)
