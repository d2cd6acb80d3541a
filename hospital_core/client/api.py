# hospital_core/client/api.py
"""
HTTP client for the hospital admin API.

Every write is checked locally first (client.validators); a ValidationError
means no request was sent. Server failures come back as the ApiError
taxonomy in client.errors. Nothing is retried.
"""
from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Any, Optional

import requests
from django.utils import timezone
from django.utils.dateparse import parse_datetime

from hospital_core.appointments.rules import group_by_date, matches_search
from hospital_core.client import validators
from hospital_core.client.config import ClientConfig
from hospital_core.client.errors import ApiError, ConflictError, NotFoundError, UnknownError
from hospital_core.client.session import Session, TokenStore

logger = logging.getLogger(__name__)


def _now() -> datetime:
    return datetime.now().astimezone()


def _iso(value: Any) -> Any:
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    return value


class HospitalApiClient:
    def __init__(
        self,
        base_url: str = ClientConfig.base_url,
        *,
        session: Optional[Session] = None,
        timeout: float = ClientConfig.timeout,
        http: Any = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.session = session
        self.timeout = timeout
        # anything with requests.Session.request's signature
        self.http = http or requests.Session()

    @classmethod
    def from_config(cls, config: ClientConfig, *, http: Any = None) -> "HospitalApiClient":
        session = TokenStore(config.token_file).load()
        return cls(config.base_url, session=session, timeout=config.timeout, http=http)

    def with_session(self, session: Optional[Session]) -> "HospitalApiClient":
        return HospitalApiClient(self.base_url, session=session, timeout=self.timeout, http=self.http)

    # ----------------------------
    # Transport
    # ----------------------------
    def _request(self, method: str, path: str, *, json: Any = None, params: dict | None = None) -> Any:
        url = f"{self.base_url}/{path.lstrip('/')}"
        headers = {"Accept": "application/json"}
        if self.session is not None:
            headers["Authorization"] = self.session.authorization

        try:
            resp = self.http.request(
                method,
                url,
                json=json,
                params=params,
                headers=headers,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.warning("%s %s failed: %s", method, url, e)
            raise UnknownError(f"Network error: {e}") from e

        if resp.status_code == 204:
            return None
        if 200 <= resp.status_code < 300:
            return resp.json()

        raise self._error_for(resp)

    @staticmethod
    def _error_for(resp) -> ApiError:
        try:
            body = resp.json()
        except ValueError:
            body = None

        code = None
        details = None
        message = f"Request failed with status {resp.status_code}."
        if isinstance(body, dict):
            err = body.get("error")
            if isinstance(err, dict):
                message = err.get("message") or message
                code = err.get("code")
                details = err.get("details")
            else:
                message = body.get("message") or body.get("detail") or message

        if resp.status_code == 409:
            cls = ConflictError
        elif resp.status_code == 404:
            cls = NotFoundError
        else:
            cls = UnknownError
        logger.info("API error %s (%s): %s", resp.status_code, code, message)
        return cls(message, status=resp.status_code, code=code, details=details)

    # ----------------------------
    # Auth
    # ----------------------------
    def login(self, username: str, password: str) -> Session:
        validators.raise_if_errors(validators.validate_login(username, password))
        payload = self._request("POST", "auth/login/", json={"username": username, "password": password})
        return Session.from_auth_response(payload)

    def register(self, username: str, password: str, confirm_password: str, name: str = "") -> Session:
        validators.raise_if_errors(validators.validate_registration(username, password, confirm_password))
        payload = self._request(
            "POST",
            "auth/register/",
            json={"username": username, "password": password, "name": name},
        )
        return Session.from_auth_response(payload)

    def me(self) -> dict[str, Any]:
        return self._request("GET", "me/")["user"]

    def logout(self, store: Optional[TokenStore] = None) -> "HospitalApiClient":
        """
        Tokens are stateless; dropping the session (and its file) is the logout.
        """
        if store is not None:
            store.clear()
        return self.with_session(None)

    # ----------------------------
    # Patients
    # ----------------------------
    def list_patients(self, q: str | None = None) -> list[dict[str, Any]]:
        return self._request("GET", "patients/", params={"q": q} if q else None)

    def get_patient(self, patient_id: str) -> dict[str, Any]:
        return self._request("GET", f"patients/{patient_id}/")

    def create_patient(self, data: dict[str, Any]) -> dict[str, Any]:
        validators.raise_if_errors(validators.validate_patient(data))
        return self._request("POST", "patients/", json=self._patient_body(data))

    def update_patient(self, patient_id: str, data: dict[str, Any]) -> dict[str, Any]:
        validators.raise_if_errors(validators.validate_patient(data))
        return self._request("PUT", f"patients/{patient_id}/", json=self._patient_body(data))

    def delete_patient(self, patient_id: str) -> None:
        self._request("DELETE", f"patients/{patient_id}/")

    @staticmethod
    def _patient_body(data: dict[str, Any]) -> dict[str, Any]:
        return {"name": data["name"].strip(), "dob": _iso(data["dob"]), "cpf": data["cpf"]}

    # ----------------------------
    # Doctors
    # ----------------------------
    def list_doctors(self, q: str | None = None) -> list[dict[str, Any]]:
        return self._request("GET", "doctors/", params={"q": q} if q else None)

    def doctors_by_specialty(self) -> dict[str, list[dict[str, Any]]]:
        return self._request("GET", "doctors/", params={"group": "specialty"})

    def get_doctor(self, doctor_id: str) -> dict[str, Any]:
        return self._request("GET", f"doctors/{doctor_id}/")

    def create_doctor(self, data: dict[str, Any]) -> dict[str, Any]:
        validators.raise_if_errors(validators.validate_doctor(data))
        return self._request("POST", "doctors/", json={"name": data["name"].strip(), "specialty": data["specialty"]})

    def update_doctor(self, doctor_id: str, data: dict[str, Any]) -> dict[str, Any]:
        validators.raise_if_errors(validators.validate_doctor(data))
        return self._request(
            "PUT",
            f"doctors/{doctor_id}/",
            json={"name": data["name"].strip(), "specialty": data["specialty"]},
        )

    def delete_doctor(self, doctor_id: str) -> None:
        self._request("DELETE", f"doctors/{doctor_id}/")

    # ----------------------------
    # Appointments
    # ----------------------------
    def list_appointments(self, **filters: Any) -> list[dict[str, Any]]:
        """
        Filters: q, status, doctor_id, patient_id, date (YYYY-MM-DD).
        """
        params = {k: _iso(v) for k, v in filters.items() if v not in (None, "")}
        return self._request("GET", "appointments/", params=params or None)

    def group_appointments_by_date(self, search: str | None = None) -> dict[date, list[dict[str, Any]]]:
        """
        Local view: filter by patient/doctor name, then group by calendar date
        (dates ascending, times ascending within a date).
        """
        items = [
            a
            for a in self.list_appointments()
            if matches_search(search, a.get("patientName"), a.get("doctorName"))
        ]
        return group_by_date(items, time_of=self._local_time)

    @staticmethod
    def _local_time(appointment: dict[str, Any]) -> datetime:
        when = parse_datetime(appointment["appointmentTime"])
        return when.astimezone() if timezone.is_aware(when) else when

    def get_appointment(self, appointment_id: str) -> dict[str, Any]:
        return self._request("GET", f"appointments/{appointment_id}/")

    def create_appointment(
        self,
        patient_id: str,
        doctor_id: str,
        appointment_time: datetime | str,
        *,
        now: datetime | None = None,
    ) -> dict[str, Any]:
        data = {"patientId": patient_id, "doctorId": doctor_id, "appointmentTime": appointment_time}
        validators.raise_if_errors(validators.validate_appointment(data, now=now or _now()))
        return self._request("POST", "appointments/", json={**data, "appointmentTime": _iso(appointment_time)})

    def update_appointment(
        self,
        current: dict[str, Any],
        *,
        patient_id: str | None = None,
        doctor_id: str | None = None,
        appointment_time: datetime | str | None = None,
        status: str | None = None,
    ) -> dict[str, Any]:
        """
        Full replace of `current` (as returned by the API); unset arguments keep their value.
        Past appointments may be edited; status changes must be legal.
        """
        data = {
            "patientId": patient_id or current["patientId"],
            "doctorId": doctor_id or current["doctorId"],
            "appointmentTime": appointment_time or current["appointmentTime"],
            "status": status or current["status"],
        }
        errors = validators.validate_appointment(data, now=_now(), is_edit=True)
        if "status" not in errors:
            errors.update(validators.validate_status_change(current["status"], data["status"]))
        validators.raise_if_errors(errors)

        return self._request(
            "PUT",
            f"appointments/{current['id']}/",
            json={**data, "appointmentTime": _iso(data["appointmentTime"])},
        )

    def cancel_appointment(self, current: dict[str, Any]) -> dict[str, Any]:
        return self.update_appointment(current, status="CANCELLED")

    def complete_appointment(self, current: dict[str, Any]) -> dict[str, Any]:
        return self.update_appointment(current, status="COMPLETED")

    def delete_appointment(self, appointment_id: str) -> None:
        self._request("DELETE", f"appointments/{appointment_id}/")

    # ----------------------------
    # Inventory
    # ----------------------------
    def list_medications(self, q: str | None = None, stock_status: str | None = None) -> list[dict[str, Any]]:
        params = {k: v for k, v in {"q": q, "stock_status": stock_status}.items() if v}
        return self._request("GET", "medications/", params=params or None)

    def get_medication(self, medication_id: str) -> dict[str, Any]:
        return self._request("GET", f"medications/{medication_id}/")

    def create_medication(self, data: dict[str, Any]) -> dict[str, Any]:
        validators.raise_if_errors(validators.validate_medication(data))
        return self._request("POST", "medications/", json=self._medication_body(data))

    def update_medication(self, medication_id: str, data: dict[str, Any]) -> dict[str, Any]:
        validators.raise_if_errors(validators.validate_medication(data))
        return self._request("PUT", f"medications/{medication_id}/", json=self._medication_body(data))

    def delete_medication(self, medication_id: str) -> None:
        self._request("DELETE", f"medications/{medication_id}/")

    @staticmethod
    def _medication_body(data: dict[str, Any]) -> dict[str, Any]:
        return {
            "name": data["name"],
            "sku": data["sku"],
            "description": data.get("description") or "",
            "manufacturer": data["manufacturer"],
            "dosage": data["dosage"],
            "unit": data["unit"],
            "quantity": int(data["quantity"]),
            "minimumStock": int(data["minimumStock"]),
            "price": str(data["price"]),
        }

    def adjust_stock(self, medication: dict[str, Any], delta: int, reason: str = "") -> dict[str, Any]:
        """
        Signed adjustment against the server's ledger. Returns {"medication", "movement"}.
        The local check uses the last known quantity; the server has the final say.
        """
        validators.raise_if_errors(validators.validate_stock_adjustment(medication["quantity"], delta))
        return self._request(
            "POST",
            f"medications/{medication['id']}/stock/",
            json={"delta": int(delta), "reason": reason},
        )

    def list_movements(self, medication_id: str) -> list[dict[str, Any]]:
        return self._request("GET", f"medications/{medication_id}/movements/")

    # ----------------------------
    # Dashboard
    # ----------------------------
    def dashboard(self) -> dict[str, int]:
        return self._request("GET", "dashboard/")
