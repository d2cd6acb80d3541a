from hospital_core.client.api import HospitalApiClient
from hospital_core.client.config import ClientConfig
from hospital_core.client.errors import ApiError, ConflictError, NotFoundError, UnknownError, ValidationError
from hospital_core.client.session import AuthUser, Session, TokenStore
from hospital_core.patients.rules import format_cpf

__all__ = [
    "ApiError",
    "AuthUser",
    "ClientConfig",
    "ConflictError",
    "HospitalApiClient",
    "NotFoundError",
    "Session",
    "TokenStore",
    "UnknownError",
    "ValidationError",
    "format_cpf",
]
