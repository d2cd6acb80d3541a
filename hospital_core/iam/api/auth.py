# hospital_core/iam/api/auth.py

from __future__ import annotations

from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from hospital_core.iam.api.schema_serializers import (
    AuthResponseSerializer,
    LoginRequestSerializer,
    MeResponseSerializer,
    RegisterRequestSerializer,
)
from hospital_core.iam.services import AuthService, user_payload


class LoginView(APIView):
    permission_classes = [AllowAny]

    @extend_schema(
        request=LoginRequestSerializer,
        responses={200: AuthResponseSerializer},
        tags=["IAM"],
    )
    def post(self, request):
        serializer = LoginRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        payload = AuthService.login(**serializer.validated_data)
        return Response(payload, status=status.HTTP_200_OK)


class RegisterView(APIView):
    permission_classes = [AllowAny]

    @extend_schema(
        request=RegisterRequestSerializer,
        responses={201: AuthResponseSerializer},
        tags=["IAM"],
    )
    def post(self, request):
        serializer = RegisterRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        payload = AuthService.register(**serializer.validated_data)
        return Response(payload, status=status.HTTP_201_CREATED)


class MeView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(responses={200: MeResponseSerializer}, tags=["IAM"])
    def get(self, request):
        return Response({"user": user_payload(request.user)}, status=status.HTTP_200_OK)
