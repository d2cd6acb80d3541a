# hospital_core/inventory/services.py
from __future__ import annotations

import logging
from decimal import Decimal

from django.db import IntegrityError, transaction
from rest_framework.exceptions import ValidationError

from hospital_core.audit.services import AuditService
from hospital_core.common.api.exceptions import ConflictError
from hospital_core.inventory.models import Medication, StockMovement
from hospital_core.inventory.rules import InsufficientStock, apply_delta
from hospital_core.inventory.selectors import get_medication

logger = logging.getLogger(__name__)

DUPLICATE_SKU_MSG = "SKU is already in use."

EDITABLE_FIELDS = (
    "name",
    "sku",
    "description",
    "manufacturer",
    "dosage",
    "unit",
    "quantity",
    "minimum_stock",
    "price",
)


class MedicationService:
    """
    Medication write-model operations.

    Notes:
    - update_medication is a single in-place update (no delete + recreate).
    - adjust_stock locks the row, applies the signed delta and writes a
      StockMovement; stock never goes below zero.
    """

    @staticmethod
    def _save_or_conflict(medication: Medication, **save_kwargs) -> None:
        try:
            with transaction.atomic():
                medication.save(**save_kwargs)
        except IntegrityError:
            raise ConflictError({"sku": DUPLICATE_SKU_MSG, "detail": DUPLICATE_SKU_MSG}, code="duplicate")

    @staticmethod
    @transaction.atomic
    def create_medication(*, actor_user_id: int | None, data: dict) -> Medication:
        med = Medication(**{k: v for k, v in data.items() if k in EDITABLE_FIELDS})
        MedicationService._save_or_conflict(med, force_insert=True)

        AuditService.log(
            event_code="medication.created",
            entity_type="Medication",
            entity_id=med.id,
            actor_user_id=actor_user_id,
            metadata={"sku": med.sku, "quantity": med.quantity},
        )
        logger.info("Medication %s (%s) created with quantity %s", med.id, med.sku, med.quantity)
        return med

    @staticmethod
    @transaction.atomic
    def update_medication(*, actor_user_id: int | None, medication_id, data: dict) -> Medication:
        med = get_medication(medication_id=medication_id, for_update=True)
        previous_quantity = med.quantity

        updates = {k: v for k, v in (data or {}).items() if k in EDITABLE_FIELDS}
        for k, v in updates.items():
            setattr(med, k, v)

        MedicationService._save_or_conflict(med)

        AuditService.log(
            event_code="medication.updated",
            entity_type="Medication",
            entity_id=med.id,
            actor_user_id=actor_user_id,
            metadata={
                "updated_fields": sorted(updates.keys()),
                "quantity_before": previous_quantity,
                "quantity_after": med.quantity,
            },
        )
        return med

    @staticmethod
    @transaction.atomic
    def delete_medication(*, actor_user_id: int | None, medication_id) -> None:
        med = get_medication(medication_id=medication_id)
        mid, sku = med.id, med.sku
        med.delete()

        AuditService.log(
            event_code="medication.deleted",
            entity_type="Medication",
            entity_id=mid,
            actor_user_id=actor_user_id,
            metadata={"sku": sku},
        )
        logger.info("Medication %s (%s) deleted", mid, sku)

    @staticmethod
    @transaction.atomic
    def adjust_stock(
        *,
        actor_user_id: int | None,
        medication_id,
        delta: int,
        reason: str = "",
    ) -> tuple[Medication, StockMovement]:
        if delta == 0:
            raise ValidationError({"delta": "Delta must be a non-zero integer."})

        med = get_medication(medication_id=medication_id, for_update=True)
        before = med.quantity

        try:
            after = apply_delta(before, delta)
        except InsufficientStock as e:
            logger.warning("Rejected stock adjustment %+d on medication %s (quantity %s)", delta, med.id, before)
            raise ConflictError(
                {"detail": str(e), "quantity": before, "delta": delta},
                code="insufficient_stock",
            )

        med.quantity = after
        med.save(update_fields=["quantity", "updated_at"])

        movement = StockMovement.objects.create(
            medication=med,
            delta=delta,
            quantity_before=before,
            quantity_after=after,
            reason=reason or "",
            actor_user_id=actor_user_id,
        )

        AuditService.log(
            event_code="medication.stock_adjusted",
            entity_type="Medication",
            entity_id=med.id,
            actor_user_id=actor_user_id,
            metadata={"delta": delta, "quantity_before": before, "quantity_after": after},
        )
        logger.info("Stock of medication %s adjusted %+d (%s -> %s)", med.id, delta, before, after)
        return med, movement


def stock_value(medication: Medication) -> Decimal:
    return (Decimal(medication.quantity) * medication.price).quantize(Decimal("0.01"))
