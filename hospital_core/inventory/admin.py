# hospital_core/inventory/admin.py
from django.contrib import admin

from hospital_core.inventory.models import Medication, StockMovement


@admin.register(Medication)
class MedicationAdmin(admin.ModelAdmin):
    list_display = ("name", "sku", "manufacturer", "quantity", "minimum_stock", "price", "stock_status")
    search_fields = ("name", "sku", "manufacturer")
    readonly_fields = ("created_at", "updated_at")
    ordering = ("name",)


@admin.register(StockMovement)
class StockMovementAdmin(admin.ModelAdmin):
    list_display = ("medication", "delta", "quantity_before", "quantity_after", "actor_user_id", "created_at")
    search_fields = ("medication__name", "medication__sku", "reason")
    readonly_fields = ("created_at", "updated_at")
    ordering = ("-created_at",)
