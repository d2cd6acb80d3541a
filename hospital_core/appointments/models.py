# hospital_core/appointments/models.py
from django.db import models

from hospital_core.appointments.rules import AppointmentStatus as Status
from hospital_core.common.models import UUIDModel
from hospital_core.doctors.models import Doctor
from hospital_core.patients.models import Patient


class AppointmentStatus(models.TextChoices):
    SCHEDULED = Status.SCHEDULED, "Scheduled"
    COMPLETED = Status.COMPLETED, "Completed"
    CANCELLED = Status.CANCELLED, "Cancelled"


class Appointment(UUIDModel):
    """
    A booking of one doctor for one patient at one timestamp.
    Non-cancelled bookings of the same doctor never overlap (AppointmentService).
    """
    patient = models.ForeignKey(Patient, on_delete=models.PROTECT, related_name="appointments")
    doctor = models.ForeignKey(Doctor, on_delete=models.PROTECT, related_name="appointments")

    appointment_time = models.DateTimeField(db_index=True)

    status = models.CharField(
        max_length=16,
        choices=AppointmentStatus.choices,
        default=AppointmentStatus.SCHEDULED,
        db_index=True,
    )

    class Meta:
        db_table = "appointments_appointment"
        indexes = [
            models.Index(fields=["doctor", "appointment_time"]),
            models.Index(fields=["status", "appointment_time"]),
        ]

    @property
    def doctor_name(self) -> str:
        return self.doctor.name

    @property
    def patient_name(self) -> str:
        return self.patient.name

    def __str__(self) -> str:
        return f"{self.patient_id} with {self.doctor_id} at {self.appointment_time:%Y-%m-%d %H:%M}"
