# hospital_core/appointments/api/views.py
from __future__ import annotations

from rest_framework import status, viewsets
from rest_framework.response import Response

from hospital_core.appointments.api.serializers import (
    AppointmentCreateSerializer,
    AppointmentSerializer,
    AppointmentUpdateSerializer,
)
from hospital_core.appointments.models import Appointment
from hospital_core.appointments.selectors import appointments_by_date, get_appointment, list_appointments
from hospital_core.appointments.services import AppointmentService
from hospital_core.common.api.actors import actor_user_id


class AppointmentViewSet(viewsets.ViewSet):
    """
    Thin API layer:
    - validation mapping (camelCase wire format)
    - calls selectors for reads
    - calls services for writes
    """

    serializer_class = AppointmentSerializer
    queryset = Appointment.objects.none()

    def list(self, request):
        qs = list_appointments(params=request.query_params)

        # ?group=date -> {"YYYY-MM-DD": [...]} with dates and times ascending
        if request.query_params.get("group") == "date":
            grouped = appointments_by_date(qs)
            data = {d.isoformat(): AppointmentSerializer(items, many=True).data for d, items in grouped.items()}
            return Response(data, status=status.HTTP_200_OK)

        return Response(AppointmentSerializer(qs, many=True).data, status=status.HTTP_200_OK)

    def retrieve(self, request, pk=None):
        appt = get_appointment(appointment_id=pk)
        return Response(AppointmentSerializer(appt).data, status=status.HTTP_200_OK)

    def create(self, request):
        ser = AppointmentCreateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        appt = AppointmentService.create_appointment(
            actor_user_id=actor_user_id(request),
            **ser.validated_data,
        )
        return Response(AppointmentSerializer(appt).data, status=status.HTTP_201_CREATED)

    def update(self, request, pk=None):
        ser = AppointmentUpdateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        appt = AppointmentService.update_appointment(
            actor_user_id=actor_user_id(request),
            appointment_id=pk,
            **ser.validated_data,
        )
        return Response(AppointmentSerializer(appt).data, status=status.HTTP_200_OK)

    def destroy(self, request, pk=None):
        AppointmentService.delete_appointment(actor_user_id=actor_user_id(request), appointment_id=pk)
        return Response(status=status.HTTP_204_NO_CONTENT)
