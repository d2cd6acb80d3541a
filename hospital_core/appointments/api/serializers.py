# hospital_core/appointments/api/serializers.py
from __future__ import annotations

from rest_framework import serializers

from hospital_core.appointments.models import Appointment, AppointmentStatus


class AppointmentCreateSerializer(serializers.Serializer):
    patientId = serializers.UUIDField(source="patient_id")
    doctorId = serializers.UUIDField(source="doctor_id")
    appointmentTime = serializers.DateTimeField(source="appointment_time")


class AppointmentUpdateSerializer(AppointmentCreateSerializer):
    """
    Full-replace contract (PUT). Status is required so the caller states intent.
    """
    status = serializers.ChoiceField(choices=AppointmentStatus.choices)


class AppointmentSerializer(serializers.ModelSerializer):
    patientId = serializers.UUIDField(source="patient_id", read_only=True)
    patientName = serializers.CharField(source="patient_name", read_only=True)
    doctorId = serializers.UUIDField(source="doctor_id", read_only=True)
    doctorName = serializers.CharField(source="doctor_name", read_only=True)
    appointmentTime = serializers.DateTimeField(source="appointment_time", read_only=True)

    class Meta:
        model = Appointment
        fields = [
            "id",
            "patientId",
            "patientName",
            "doctorId",
            "doctorName",
            "appointmentTime",
            "status",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields
