# hospital_core/inventory/api/views.py
from __future__ import annotations

from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from hospital_core.common.api.actors import actor_user_id
from hospital_core.inventory.api.serializers import (
    MedicationSerializer,
    MedicationWriteSerializer,
    StockAdjustmentSerializer,
    StockMovementSerializer,
)
from hospital_core.inventory.models import Medication
from hospital_core.inventory.selectors import get_medication, list_movements, search_medications
from hospital_core.inventory.services import MedicationService


class MedicationViewSet(viewsets.ViewSet):
    serializer_class = MedicationSerializer
    queryset = Medication.objects.none()

    # ----------------------------
    # Reads
    # ----------------------------
    def list(self, request):
        qs = search_medications(
            q=request.query_params.get("q"),
            stock_status=request.query_params.get("stock_status"),
        )
        return Response(MedicationSerializer(qs, many=True).data, status=status.HTTP_200_OK)

    def retrieve(self, request, pk=None):
        med = get_medication(medication_id=pk)
        return Response(MedicationSerializer(med).data, status=status.HTTP_200_OK)

    @action(detail=True, methods=["get"])
    def movements(self, request, pk=None):
        med = get_medication(medication_id=pk)
        qs = list_movements(medication=med)
        return Response(StockMovementSerializer(qs, many=True).data, status=status.HTTP_200_OK)

    # ----------------------------
    # Writes
    # ----------------------------
    def create(self, request):
        ser = MedicationWriteSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        med = MedicationService.create_medication(actor_user_id=actor_user_id(request), data=ser.validated_data)
        return Response(MedicationSerializer(med).data, status=status.HTTP_201_CREATED)

    def update(self, request, pk=None):
        ser = MedicationWriteSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        med = MedicationService.update_medication(
            actor_user_id=actor_user_id(request),
            medication_id=pk,
            data=ser.validated_data,
        )
        return Response(MedicationSerializer(med).data, status=status.HTTP_200_OK)

    def destroy(self, request, pk=None):
        MedicationService.delete_medication(actor_user_id=actor_user_id(request), medication_id=pk)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=True, methods=["post"])
    def stock(self, request, pk=None):
        ser = StockAdjustmentSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        med, movement = MedicationService.adjust_stock(
            actor_user_id=actor_user_id(request),
            medication_id=pk,
            **ser.validated_data,
        )
        return Response(
            {
                "medication": MedicationSerializer(med).data,
                "movement": StockMovementSerializer(movement).data,
            },
            status=status.HTTP_200_OK,
        )
