# hospital_core/common/api/exceptions.py
"""
One error shape for every API failure:

    {"error": {"code": ..., "message": ..., "details": ..., "request_id": ...}}

The client maps `code`/HTTP status onto its own error types, so codes are
part of the contract.
"""
from __future__ import annotations

import logging
import uuid
from typing import Any

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db.models import ProtectedError
from rest_framework import status
from rest_framework.exceptions import APIException, NotFound, ValidationError
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler

logger = logging.getLogger(__name__)


def ensure_request_id(request) -> str:
    """
    Returns the request's request_id, generating one on first use.
    Shared by RequestIdMiddleware and the exception handler.
    """
    rid = getattr(request, "request_id", None) if request is not None else None
    if not rid:
        rid = uuid.uuid4().hex
        if request is not None:
            setattr(request, "request_id", rid)
    return rid


def build_error_envelope(*, request=None, code: str, message: str, details: Any = None) -> dict[str, Any]:
    return {
        "error": {
            "code": code,
            "message": message,
            "details": details,
            "request_id": ensure_request_id(request),
        }
    }


class ConflictError(APIException):
    """
    409: a business rule blocked the write.

    Codes in use: schedule_conflict, invalid_transition, insufficient_stock,
    duplicate, protected.
    """
    status_code = status.HTTP_409_CONFLICT
    default_detail = "Conflict."
    default_code = "conflict"

    def __init__(self, detail=None, code=None):
        super().__init__(detail=detail or self.default_detail, code=code or self.default_code)
        self.error_code = code or self.default_code


def _as_api_exception(exc: Exception) -> Exception:
    """
    Django errors that slipped past a service still get a proper status.
    """
    if isinstance(exc, ProtectedError):
        return ConflictError("Record is still referenced and cannot be deleted.", code="protected")
    if isinstance(exc, DjangoValidationError):
        detail = exc.message_dict if hasattr(exc, "error_dict") else exc.messages
        return ValidationError(detail)
    return exc


def _error_code(exc: Exception, http_status: int) -> str:
    if isinstance(exc, ConflictError):
        return exc.error_code
    if isinstance(exc, ValidationError):
        return "validation_error"
    if isinstance(exc, NotFound):
        return "not_found"
    if isinstance(exc, APIException):
        return exc.default_code or "api_error"
    if http_status == status.HTTP_404_NOT_FOUND:
        return "not_found"
    return "server_error" if http_status >= 500 else "error"


def _message_and_details(data: Any) -> tuple[str, Any]:
    """
    {"detail": msg, **rest} -> (msg, rest or None)
    {field: [errors], ...}  -> ("field: first error", data)
    [errors]                -> (first error, data)
    """
    if isinstance(data, dict) and "detail" in data:
        rest = {k: v for k, v in data.items() if k != "detail"}
        return str(data["detail"]), rest or None

    if isinstance(data, dict) and data:
        field, errors = next(iter(data.items()))
        first = errors[0] if isinstance(errors, list) and errors else errors
        return f"{field}: {first}", data

    if isinstance(data, list) and data:
        return str(data[0]), data

    return "Request failed.", data


def api_exception_handler(exc: Exception, context: dict[str, Any]):
    request = context.get("request")
    exc = _as_api_exception(exc)
    response = drf_exception_handler(exc, context)

    if response is None:
        logger.error("Unhandled API error (request_id=%s)", ensure_request_id(request), exc_info=exc)
        return Response(
            build_error_envelope(request=request, code="server_error", message="Unexpected server error."),
            status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    message, details = _message_and_details(response.data)
    return Response(
        build_error_envelope(
            request=request,
            code=_error_code(exc, response.status_code),
            message=message,
            details=details,
        ),
        status=response.status_code,
        headers=response.headers,
    )
