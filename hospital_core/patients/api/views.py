# hospital_core/patients/api/views.py
from __future__ import annotations

from rest_framework import status, viewsets
from rest_framework.response import Response

from hospital_core.common.api.actors import actor_user_id
from hospital_core.patients.api.serializers import PatientSerializer, PatientWriteSerializer
from hospital_core.patients.models import Patient
from hospital_core.patients.selectors import get_patient, search_patients
from hospital_core.patients.services import PatientService


class PatientViewSet(viewsets.ViewSet):
    # these two lines fix spectacular + path param typing
    serializer_class = PatientSerializer
    queryset = Patient.objects.none()

    def list(self, request):
        q = request.query_params.get("q", "").strip()
        qs = search_patients(q=q)
        return Response(PatientSerializer(qs, many=True).data, status=status.HTTP_200_OK)

    def retrieve(self, request, pk=None):
        patient = get_patient(patient_id=pk)
        return Response(PatientSerializer(patient).data, status=status.HTTP_200_OK)

    def create(self, request):
        ser = PatientWriteSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        patient = PatientService.create_patient(
            actor_user_id=actor_user_id(request),
            **ser.validated_data,
        )
        return Response(PatientSerializer(patient).data, status=status.HTTP_201_CREATED)

    def update(self, request, pk=None):
        ser = PatientWriteSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        patient = PatientService.update_patient(
            actor_user_id=actor_user_id(request),
            patient_id=pk,
            data=ser.validated_data,
        )
        return Response(PatientSerializer(patient).data, status=status.HTTP_200_OK)

    def destroy(self, request, pk=None):
        PatientService.delete_patient(actor_user_id=actor_user_id(request), patient_id=pk)
        return Response(status=status.HTTP_204_NO_CONTENT)
