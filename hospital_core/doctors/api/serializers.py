# hospital_core/doctors/api/serializers.py
from __future__ import annotations

from rest_framework import serializers

from hospital_core.doctors.models import Doctor
from hospital_core.doctors.rules import SPECIALTIES


class DoctorWriteSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255)
    specialty = serializers.ChoiceField(choices=SPECIALTIES)

    def validate_name(self, value: str) -> str:
        value = value.strip()
        if not value:
            raise serializers.ValidationError("Name is required.")
        return value


class DoctorSerializer(serializers.ModelSerializer):
    class Meta:
        model = Doctor
        fields = ["id", "name", "specialty", "created_at", "updated_at"]
        read_only_fields = fields
