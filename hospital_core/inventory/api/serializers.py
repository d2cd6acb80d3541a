# hospital_core/inventory/api/serializers.py
from __future__ import annotations

from decimal import Decimal

from rest_framework import serializers

from hospital_core.inventory.models import Medication, StockMovement
from hospital_core.inventory.services import stock_value


class MedicationWriteSerializer(serializers.Serializer):
    """
    Full-replace contract (POST and PUT).
    """
    name = serializers.CharField(max_length=255)
    sku = serializers.CharField(max_length=64)
    description = serializers.CharField(required=False, allow_blank=True, default="")
    manufacturer = serializers.CharField(max_length=255)
    dosage = serializers.CharField(max_length=64)
    unit = serializers.CharField(max_length=32)
    quantity = serializers.IntegerField(
        min_value=0,
        error_messages={"min_value": "Quantity cannot be negative."},
    )
    minimumStock = serializers.IntegerField(
        source="minimum_stock",
        min_value=0,
        error_messages={"min_value": "Minimum stock cannot be negative."},
    )
    price = serializers.DecimalField(
        max_digits=12,
        decimal_places=2,
        min_value=Decimal("0.01"),
        error_messages={"min_value": "Price must be greater than zero."},
    )


class StockAdjustmentSerializer(serializers.Serializer):
    delta = serializers.IntegerField()
    reason = serializers.CharField(max_length=255, required=False, allow_blank=True, default="")


class MedicationSerializer(serializers.ModelSerializer):
    minimumStock = serializers.IntegerField(source="minimum_stock", read_only=True)
    stockStatus = serializers.CharField(source="stock_status", read_only=True)
    stockValue = serializers.SerializerMethodField()

    class Meta:
        model = Medication
        fields = [
            "id",
            "name",
            "sku",
            "description",
            "manufacturer",
            "dosage",
            "unit",
            "quantity",
            "minimumStock",
            "price",
            "stockStatus",
            "stockValue",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields

    def get_stockValue(self, obj: Medication) -> str:
        return str(stock_value(obj))


class StockMovementSerializer(serializers.ModelSerializer):
    medicationId = serializers.UUIDField(source="medication_id", read_only=True)
    quantityBefore = serializers.IntegerField(source="quantity_before", read_only=True)
    quantityAfter = serializers.IntegerField(source="quantity_after", read_only=True)
    actorUserId = serializers.IntegerField(source="actor_user_id", read_only=True, allow_null=True)

    class Meta:
        model = StockMovement
        fields = [
            "id",
            "medicationId",
            "delta",
            "quantityBefore",
            "quantityAfter",
            "reason",
            "actorUserId",
            "created_at",
        ]
        read_only_fields = fields
