# hospital_core/inventory/models.py
from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models

from hospital_core.common.models import UUIDModel
from hospital_core.inventory.rules import classify_stock


class Medication(UUIDModel):
    """
    Medication stock item. Stock status is derived at read time, never stored.
    """
    name = models.CharField(max_length=255)
    sku = models.CharField(max_length=64, unique=True)
    description = models.TextField(blank=True, default="")
    manufacturer = models.CharField(max_length=255)
    dosage = models.CharField(max_length=64)
    unit = models.CharField(max_length=32)

    quantity = models.PositiveIntegerField(default=0)
    minimum_stock = models.PositiveIntegerField(default=0)
    price = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.01"))],
    )

    class Meta:
        db_table = "inventory_medication"
        indexes = [
            models.Index(fields=["name"]),
        ]

    @property
    def stock_status(self) -> str:
        return classify_stock(self.quantity, self.minimum_stock)

    def __str__(self) -> str:
        return f"{self.name} [{self.sku}]"


class StockMovement(UUIDModel):
    """
    Immutable ledger row: one per accepted stock adjustment.
    quantity_after == quantity_before + delta always holds.
    """
    medication = models.ForeignKey(Medication, on_delete=models.CASCADE, related_name="movements")

    delta = models.IntegerField()
    quantity_before = models.PositiveIntegerField()
    quantity_after = models.PositiveIntegerField()

    reason = models.CharField(max_length=255, blank=True, default="")
    actor_user_id = models.BigIntegerField(null=True, blank=True)

    class Meta:
        db_table = "inventory_stock_movement"
        indexes = [
            models.Index(fields=["medication", "created_at"]),
        ]

    def __str__(self) -> str:
        return f"{self.medication_id} {self.delta:+d} -> {self.quantity_after}"
