# hospital_core/iam/services.py
from __future__ import annotations

import logging
from typing import Any

from django.contrib.auth import authenticate, get_user_model
from django.db import IntegrityError, transaction
from rest_framework.exceptions import AuthenticationFailed
from rest_framework_simplejwt.tokens import RefreshToken

from hospital_core.common.api.exceptions import ConflictError

logger = logging.getLogger(__name__)

DUPLICATE_USER_MSG = "This email is already registered."


def user_payload(user) -> dict[str, Any]:
    return {
        "id": str(user.id),
        "username": user.get_username(),
        "name": user.get_full_name() or user.get_username(),
    }


def issue_token(user) -> dict[str, Any]:
    """
    {token, user} contract consumed by the client session.
    """
    access = RefreshToken.for_user(user).access_token
    return {"token": str(access), "user": user_payload(user)}


class AuthService:
    @staticmethod
    def login(*, username: str, password: str) -> dict[str, Any]:
        user = authenticate(username=username, password=password)
        if user is None:
            logger.warning("Failed login for %s", username)
            raise AuthenticationFailed("Invalid username or password.")
        logger.info("User %s logged in", user.id)
        return issue_token(user)

    @staticmethod
    @transaction.atomic
    def register(*, username: str, password: str, name: str = "") -> dict[str, Any]:
        User = get_user_model()
        if User.objects.filter(username__iexact=username).exists():
            raise ConflictError({"username": DUPLICATE_USER_MSG, "detail": DUPLICATE_USER_MSG}, code="duplicate")

        try:
            with transaction.atomic():
                user = User.objects.create_user(
                    username=username,
                    email=username,
                    password=password,
                    first_name=name or "",
                )
        except IntegrityError:
            raise ConflictError({"username": DUPLICATE_USER_MSG, "detail": DUPLICATE_USER_MSG}, code="duplicate")

        logger.info("User %s registered", user.id)
        return issue_token(user)
