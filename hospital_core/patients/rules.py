# hospital_core/patients/rules.py
"""
National ID (CPF) rules shared by the API and the client.

Pure functions only: importable without Django settings.
"""
from __future__ import annotations

import re

CPF_PATTERN = r"^\d{3}\.\d{3}\.\d{3}-\d{2}$"
CPF_FORMAT_MESSAGE = "CPF must be in the format 123.456.789-00."

_CPF_RE = re.compile(CPF_PATTERN)


def is_valid_cpf(value: str | None) -> bool:
    return bool(value) and _CPF_RE.match(value) is not None


def format_cpf(raw: str) -> str:
    """
    Mask up to 11 digits as XXX.XXX.XXX-XX while the user types.
    Input with more than 11 digits is returned untouched.
    """
    digits = re.sub(r"\D", "", raw or "")
    if len(digits) > 11:
        return raw

    out = digits
    out = re.sub(r"(\d{3})(\d)", r"\1.\2", out, count=1)
    out = re.sub(r"(\.\d{3})(\d)", r"\1.\2", out, count=1)
    out = re.sub(r"(\.\d{3})(\d{1,2})$", r"\1-\2", out, count=1)
    return out
