# hospital_core/patients/api/serializers.py
from __future__ import annotations

from rest_framework import serializers

from hospital_core.patients.models import Patient
from hospital_core.patients.rules import CPF_FORMAT_MESSAGE, CPF_PATTERN


class PatientWriteSerializer(serializers.Serializer):
    """
    Full-replace contract (POST and PUT).
    """
    name = serializers.CharField(max_length=255)
    dob = serializers.DateField()
    cpf = serializers.RegexField(
        CPF_PATTERN,
        max_length=14,
        error_messages={"invalid": CPF_FORMAT_MESSAGE},
    )

    def validate_name(self, value: str) -> str:
        value = value.strip()
        if not value:
            raise serializers.ValidationError("Name is required.")
        return value


class PatientSerializer(serializers.ModelSerializer):
    class Meta:
        model = Patient
        fields = [
            "id",
            "name",
            "dob",
            "cpf",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields
