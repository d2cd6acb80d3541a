# hospital_core/doctors/api/views.py
from __future__ import annotations

from rest_framework import status, viewsets
from rest_framework.response import Response

from hospital_core.common.api.actors import actor_user_id
from hospital_core.doctors.api.serializers import DoctorSerializer, DoctorWriteSerializer
from hospital_core.doctors.models import Doctor
from hospital_core.doctors.selectors import doctors_by_specialty, get_doctor, search_doctors
from hospital_core.doctors.services import DoctorService


class DoctorViewSet(viewsets.ViewSet):
    serializer_class = DoctorSerializer
    queryset = Doctor.objects.none()

    def list(self, request):
        q = request.query_params.get("q", "").strip()
        qs = search_doctors(q=q)

        if request.query_params.get("group") == "specialty":
            grouped = doctors_by_specialty(qs)
            data = {k: DoctorSerializer(v, many=True).data for k, v in grouped.items()}
            return Response(data, status=status.HTTP_200_OK)

        return Response(DoctorSerializer(qs, many=True).data, status=status.HTTP_200_OK)

    def retrieve(self, request, pk=None):
        doctor = get_doctor(doctor_id=pk)
        return Response(DoctorSerializer(doctor).data, status=status.HTTP_200_OK)

    def create(self, request):
        ser = DoctorWriteSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        doctor = DoctorService.create_doctor(actor_user_id=actor_user_id(request), **ser.validated_data)
        return Response(DoctorSerializer(doctor).data, status=status.HTTP_201_CREATED)

    def update(self, request, pk=None):
        ser = DoctorWriteSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        doctor = DoctorService.update_doctor(
            actor_user_id=actor_user_id(request),
            doctor_id=pk,
            **ser.validated_data,
        )
        return Response(DoctorSerializer(doctor).data, status=status.HTTP_200_OK)

    def destroy(self, request, pk=None):
        DoctorService.delete_doctor(actor_user_id=actor_user_id(request), doctor_id=pk)
        return Response(status=status.HTTP_204_NO_CONTENT)
