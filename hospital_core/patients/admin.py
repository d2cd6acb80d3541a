# hospital_core/patients/admin.py
from django.contrib import admin

from hospital_core.patients.models import Patient


@admin.register(Patient)
class PatientAdmin(admin.ModelAdmin):
    list_display = ("name", "cpf", "dob", "created_at")
    search_fields = ("name", "cpf")
    readonly_fields = ("created_at", "updated_at")
    ordering = ("name",)
