# hospital_core/client/validators.py
"""
Form checks run before any request is sent.

Each validate_* returns {field: message}; an empty dict means "submit".
"""
from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any

from django.utils.dateparse import parse_date, parse_datetime

from hospital_core.appointments.rules import AppointmentStatus, is_future, transition_error
from hospital_core.client.errors import ValidationError
from hospital_core.doctors.rules import SPECIALTIES
from hospital_core.inventory.rules import InsufficientStock, apply_delta
from hospital_core.patients.rules import CPF_FORMAT_MESSAGE, is_valid_cpf

MIN_PASSWORD_LENGTH = 6
PASSWORD_TOO_SHORT_MSG = f"Password too short: minimum {MIN_PASSWORD_LENGTH} characters."


def raise_if_errors(errors: dict[str, str]) -> None:
    if errors:
        raise ValidationError(errors)


def _blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def as_datetime(value: Any) -> datetime | None:
    """
    datetime or ISO string; anything else (a bare date included) is None.
    """
    if isinstance(value, datetime):
        return value
    if not isinstance(value, str):
        return None
    try:
        return parse_datetime(value)
    except ValueError:
        return None


def _comparable(when: datetime, now: datetime) -> tuple[datetime, datetime]:
    """
    Naive timestamps are wall-clock local time; compare like with like.
    """
    if when.tzinfo is None and now.tzinfo is not None:
        now = now.astimezone().replace(tzinfo=None)
    elif when.tzinfo is not None and now.tzinfo is None:
        when = when.astimezone().replace(tzinfo=None)
    return when, now


# -------------------------
# Auth
# -------------------------
def validate_login(username: str, password: str) -> dict[str, str]:
    errors: dict[str, str] = {}
    if _blank(username):
        errors["username"] = "Email is required."
    if _blank(password):
        errors["password"] = "Password is required."
    return errors


def validate_registration(username: str, password: str, confirm_password: str) -> dict[str, str]:
    errors: dict[str, str] = {}
    if _blank(username):
        errors["username"] = "Email is required."
    elif "@" not in username:
        errors["username"] = "Enter a valid email."

    if _blank(password):
        errors["password"] = "Password is required."
    elif len(password) < MIN_PASSWORD_LENGTH:
        errors["password"] = PASSWORD_TOO_SHORT_MSG
    elif password != confirm_password:
        errors["confirmPassword"] = "Passwords do not match."
    return errors


# -------------------------
# Patients / doctors
# -------------------------
def validate_patient(data: dict[str, Any]) -> dict[str, str]:
    errors: dict[str, str] = {}
    if _blank(data.get("name")):
        errors["name"] = "Name is required."

    dob = data.get("dob")
    if _blank(dob):
        errors["dob"] = "Date of birth is required."
    elif not isinstance(dob, date) and parse_date(str(dob)) is None:
        errors["dob"] = "Date of birth must be YYYY-MM-DD."

    cpf = data.get("cpf")
    if _blank(cpf):
        errors["cpf"] = "CPF is required."
    elif not is_valid_cpf(cpf):
        errors["cpf"] = CPF_FORMAT_MESSAGE
    return errors


def validate_doctor(data: dict[str, Any]) -> dict[str, str]:
    errors: dict[str, str] = {}
    if _blank(data.get("name")):
        errors["name"] = "Name is required."

    specialty = data.get("specialty")
    if _blank(specialty):
        errors["specialty"] = "Specialty is required."
    elif specialty not in SPECIALTIES:
        errors["specialty"] = f"Unknown specialty {specialty!r}."
    return errors


# -------------------------
# Appointments
# -------------------------
def validate_appointment(data: dict[str, Any], *, now: datetime, is_edit: bool = False) -> dict[str, str]:
    """
    New bookings must be in the future; edits may touch past appointments.
    """
    errors: dict[str, str] = {}
    if _blank(data.get("patientId")):
        errors["patientId"] = "Patient is required."
    if _blank(data.get("doctorId")):
        errors["doctorId"] = "Doctor is required."

    raw_time = data.get("appointmentTime")
    when = as_datetime(raw_time)
    if _blank(raw_time):
        errors["appointmentTime"] = "Date and time are required."
    elif when is None:
        errors["appointmentTime"] = "Date and time must be an ISO timestamp."
    elif not is_edit:
        when, now = _comparable(when, now)
        if not is_future(when, now=now):
            errors["appointmentTime"] = "Date and time must be in the future."

    if is_edit and data.get("status") not in AppointmentStatus.ALL:
        errors["status"] = "Status must be SCHEDULED, COMPLETED or CANCELLED."
    return errors


def validate_status_change(current_status: str, new_status: str) -> dict[str, str]:
    err = transition_error(current_status, new_status)
    return {"status": err} if err else {}


# -------------------------
# Inventory
# -------------------------
def _as_int(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        return None


def validate_medication(data: dict[str, Any]) -> dict[str, str]:
    errors: dict[str, str] = {}

    required = {
        "name": "Name is required.",
        "sku": "SKU is required.",
        "manufacturer": "Manufacturer is required.",
        "dosage": "Dosage is required.",
        "unit": "Unit is required.",
    }
    for field, message in required.items():
        if _blank(data.get(field)):
            errors[field] = message

    quantity = _as_int(data.get("quantity"))
    if quantity is None:
        errors["quantity"] = "Quantity must be a whole number."
    elif quantity < 0:
        errors["quantity"] = "Quantity cannot be negative."

    minimum = _as_int(data.get("minimumStock"))
    if minimum is None:
        errors["minimumStock"] = "Minimum stock must be a whole number."
    elif minimum < 0:
        errors["minimumStock"] = "Minimum stock cannot be negative."

    try:
        price = Decimal(str(data.get("price")))
    except (InvalidOperation, ValueError):
        price = None
    if price is None or not price.is_finite():
        errors["price"] = "Price must be a number."
    elif price <= 0:
        errors["price"] = "Price must be greater than zero."
    return errors


def validate_stock_adjustment(current_quantity: int, delta: Any) -> dict[str, str]:
    d = _as_int(delta)
    if d is None:
        return {"delta": "Delta must be a whole number."}
    if d == 0:
        return {"delta": "Delta must be a non-zero integer."}
    try:
        apply_delta(int(current_quantity), d)
    except InsufficientStock as e:
        return {"delta": str(e)}
    return {}
