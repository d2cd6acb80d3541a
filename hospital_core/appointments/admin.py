# hospital_core/appointments/admin.py
from django.contrib import admin

from hospital_core.appointments.models import Appointment


@admin.register(Appointment)
class AppointmentAdmin(admin.ModelAdmin):
    list_display = ("appointment_time", "doctor", "patient", "status", "created_at")
    list_filter = ("status", "doctor")
    search_fields = ("patient__name", "doctor__name")
    readonly_fields = ("created_at", "updated_at")
    ordering = ("-appointment_time",)
