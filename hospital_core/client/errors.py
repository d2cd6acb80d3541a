# hospital_core/client/errors.py
"""
Errors raised by the API client.

    ApiError
     ├── ValidationError   local, field-level; the request was never sent
     ├── ConflictError     409: slot taken, duplicate key, illegal transition, no stock
     ├── NotFoundError     404: dangling reference
     └── UnknownError      any other non-2xx, or the network failed

No error is retried; the caller resubmits.
"""
from __future__ import annotations

from typing import Any


class ApiError(Exception):
    def __init__(
        self,
        message: str,
        *,
        status: int | None = None,
        code: str | None = None,
        details: Any = None,
    ):
        super().__init__(message)
        self.message = message
        self.status = status
        self.code = code
        self.details = details

    def __str__(self) -> str:
        return self.message


class ValidationError(ApiError):
    def __init__(self, errors: dict[str, str]):
        self.errors = dict(errors)
        first = next(iter(self.errors.values()), "Invalid input.")
        super().__init__(first, status=None, code="validation_error", details=self.errors)


class ConflictError(ApiError):
    @property
    def field(self) -> str | None:
        """
        Form field the conflict belongs to (e.g. "appointmentTime", "cpf"), if any.
        """
        if isinstance(self.details, dict):
            for key in self.details:
                if key != "detail":
                    return key
        return None


class NotFoundError(ApiError):
    pass


class UnknownError(ApiError):
    pass
