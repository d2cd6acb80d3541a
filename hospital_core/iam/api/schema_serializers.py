# hospital_core/iam/api/schema_serializers.py
from __future__ import annotations

from rest_framework import serializers

MIN_PASSWORD_LENGTH = 6


class LoginRequestSerializer(serializers.Serializer):
    username = serializers.CharField()
    password = serializers.CharField()


class RegisterRequestSerializer(serializers.Serializer):
    # usernames are email addresses
    username = serializers.EmailField(error_messages={"invalid": "Enter a valid email."})
    password = serializers.CharField(
        min_length=MIN_PASSWORD_LENGTH,
        error_messages={"min_length": f"Password too short: minimum {MIN_PASSWORD_LENGTH} characters."},
    )
    name = serializers.CharField(max_length=150, required=False, allow_blank=True, default="")


class AuthUserSerializer(serializers.Serializer):
    id = serializers.CharField()
    username = serializers.CharField()
    name = serializers.CharField()


class AuthResponseSerializer(serializers.Serializer):
    token = serializers.CharField()
    user = AuthUserSerializer()


class MeResponseSerializer(serializers.Serializer):
    user = AuthUserSerializer()
