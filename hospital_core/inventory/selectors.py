# hospital_core/inventory/selectors.py
from __future__ import annotations

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db.models import F, Q, QuerySet
from rest_framework.exceptions import NotFound, ValidationError

from hospital_core.inventory.models import Medication, StockMovement
from hospital_core.inventory.rules import StockStatus

# same partition as rules.classify_stock, expressed for the database
_STATUS_FILTERS = {
    StockStatus.OUT: Q(quantity=0),
    StockStatus.LOW: Q(quantity__gt=0, quantity__lte=F("minimum_stock")),
    StockStatus.OK: Q(quantity__gt=0) & Q(quantity__gt=F("minimum_stock")),
}


def get_medication(*, medication_id, for_update: bool = False) -> Medication:
    qs = Medication.objects.select_for_update() if for_update else Medication.objects.all()
    try:
        return qs.get(id=medication_id)
    except (Medication.DoesNotExist, DjangoValidationError):
        raise NotFound("Medication not found.")


def search_medications(*, q: str | None = None, stock_status: str | None = None) -> QuerySet[Medication]:
    qs = Medication.objects.all()

    qv = (q or "").strip()
    if qv:
        qs = qs.filter(
            Q(name__icontains=qv)
            | Q(manufacturer__icontains=qv)
            | Q(sku__icontains=qv)
        )

    sv = (stock_status or "").strip().upper()
    if sv:
        if sv not in _STATUS_FILTERS:
            raise ValidationError({"stock_status": f"Invalid stock status. Allowed: {list(StockStatus.ALL)}"})
        qs = qs.filter(_STATUS_FILTERS[sv])

    return qs.order_by("name")


def list_movements(*, medication: Medication) -> QuerySet[StockMovement]:
    return StockMovement.objects.filter(medication=medication).order_by("-created_at")
