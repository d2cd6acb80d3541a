# hospital_core/patients/models.py
from django.core.validators import RegexValidator
from django.db import models

from hospital_core.common.models import UUIDModel
from hospital_core.patients.rules import CPF_FORMAT_MESSAGE, CPF_PATTERN


class Patient(UUIDModel):
    """
    Patient record. No lifecycle beyond existence.
    """
    name = models.CharField(max_length=255)
    dob = models.DateField()

    # national ID, XXX.XXX.XXX-XX
    cpf = models.CharField(
        max_length=14,
        unique=True,
        validators=[RegexValidator(CPF_PATTERN, CPF_FORMAT_MESSAGE)],
    )

    class Meta:
        db_table = "patients_patient"
        indexes = [
            models.Index(fields=["name"]),
        ]

    def __str__(self) -> str:
        return f"{self.name} ({self.cpf})"
