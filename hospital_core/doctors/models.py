# hospital_core/doctors/models.py
from django.db import models

from hospital_core.common.models import UUIDModel
from hospital_core.doctors.rules import SPECIALTIES

SPECIALTY_CHOICES = [(s, s) for s in SPECIALTIES]


class Doctor(UUIDModel):
    name = models.CharField(max_length=255)
    specialty = models.CharField(max_length=64, choices=SPECIALTY_CHOICES, db_index=True)

    class Meta:
        db_table = "doctors_doctor"
        indexes = [
            models.Index(fields=["name"]),
        ]

    def __str__(self) -> str:
        return f"{self.name} ({self.specialty})"
