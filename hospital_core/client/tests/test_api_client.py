# hospital_core/client/tests/test_api_client.py
from datetime import timedelta

import pytest
import requests

from hospital_core.client.api import HospitalApiClient
from hospital_core.client.config import ClientConfig
from hospital_core.client.errors import ConflictError, NotFoundError, UnknownError, ValidationError
from hospital_core.client.session import Session, TokenStore
from hospital_core.tests.helpers import local_noon

pytestmark = pytest.mark.django_db


def test_short_password_never_reaches_the_server(anon_client, transport):
    with pytest.raises(ValidationError) as exc:
        anon_client.register("new@example.com", "12345", "12345")

    assert exc.value.errors == {"password": "Password too short: minimum 6 characters."}
    assert transport.calls == []


def test_register_then_me(anon_client):
    session = anon_client.register("nurse@example.com", "secret1", "secret1", name="Nurse Joy")
    assert session.user.username == "nurse@example.com"

    me = anon_client.with_session(session).me()
    assert me["name"] == "Nurse Joy"


def test_wrong_password_is_unknown_error(anon_client, user):
    with pytest.raises(UnknownError) as exc:
        anon_client.login(user.username, "wrong-password")
    assert exc.value.status == 401
    assert exc.value.message == "Invalid username or password."


def test_requests_without_session_are_rejected(anon_client):
    with pytest.raises(UnknownError) as exc:
        anon_client.list_patients()
    assert exc.value.status == 401
    assert exc.value.code == "not_authenticated"


def test_duplicate_cpf_maps_to_conflict(hospital_client, patient):
    with pytest.raises(ConflictError) as exc:
        hospital_client.create_patient({"name": "Outra", "dob": "1999-09-09", "cpf": patient.cpf})

    assert exc.value.status == 409
    assert exc.value.code == "duplicate"
    assert exc.value.field == "cpf"


def test_patient_crud_round(hospital_client):
    created = hospital_client.create_patient({"name": " Ana Lima ", "dob": "2001-03-04", "cpf": "111.222.333-44"})
    assert created["name"] == "Ana Lima"

    updated = hospital_client.update_patient(created["id"], {**created, "name": "Ana B. Lima"})
    assert updated["id"] == created["id"]

    assert [p["id"] for p in hospital_client.list_patients(q="lima")] == [created["id"]]

    assert hospital_client.delete_patient(created["id"]) is None
    with pytest.raises(NotFoundError):
        hospital_client.get_patient(created["id"])


def test_slot_conflict_maps_to_conflict_on_appointment_time(hospital_client, patient, doctor):
    when = local_noon(days=2)
    first = hospital_client.create_appointment(str(patient.id), str(doctor.id), when)
    assert first["status"] == "SCHEDULED"

    with pytest.raises(ConflictError) as exc:
        hospital_client.create_appointment(str(patient.id), str(doctor.id), when)

    assert exc.value.code == "schedule_conflict"
    assert exc.value.field == "appointmentTime"
    assert exc.value.message == "This time slot is already booked for the doctor."


def test_past_booking_is_caught_locally(hospital_client, transport, patient, doctor):
    sent = len(transport.calls)
    with pytest.raises(ValidationError) as exc:
        hospital_client.create_appointment(str(patient.id), str(doctor.id), local_noon(days=-1))
    assert "appointmentTime" in exc.value.errors
    assert len(transport.calls) == sent


def test_terminal_transition_is_caught_locally(hospital_client, transport, patient, doctor):
    appt = hospital_client.create_appointment(str(patient.id), str(doctor.id), local_noon(days=3))
    cancelled = hospital_client.cancel_appointment(appt)
    assert cancelled["status"] == "CANCELLED"

    sent = len(transport.calls)
    with pytest.raises(ValidationError) as exc:
        hospital_client.update_appointment(cancelled, status="SCHEDULED")
    assert "status" in exc.value.errors
    assert len(transport.calls) == sent


def test_stale_transition_is_rejected_by_server(hospital_client, patient, doctor):
    appt = hospital_client.create_appointment(str(patient.id), str(doctor.id), local_noon(days=3))
    hospital_client.complete_appointment(appt)

    # `appt` still says SCHEDULED; the server knows better
    with pytest.raises(ConflictError) as exc:
        hospital_client.cancel_appointment(appt)
    assert exc.value.code == "invalid_transition"


def test_unknown_doctor_maps_to_not_found(hospital_client, patient):
    with pytest.raises(NotFoundError) as exc:
        hospital_client.create_appointment(
            str(patient.id),
            "00000000-0000-0000-0000-000000000000",
            local_noon(days=1),
        )
    assert exc.value.status == 404


def test_group_appointments_by_date(hospital_client, patient, doctor, other_doctor):
    late = hospital_client.create_appointment(str(patient.id), str(doctor.id), local_noon(days=2))
    early = hospital_client.create_appointment(
        str(patient.id), str(other_doctor.id), local_noon(days=2) - timedelta(hours=3)
    )
    first = hospital_client.create_appointment(str(patient.id), str(doctor.id), local_noon(days=1))

    grouped = hospital_client.group_appointments_by_date()
    assert list(grouped.keys()) == [local_noon(days=1).date(), local_noon(days=2).date()]
    assert [a["id"] for a in grouped[local_noon(days=1).date()]] == [first["id"]]
    assert [a["id"] for a in grouped[local_noon(days=2).date()]] == [early["id"], late["id"]]

    only_ana = hospital_client.group_appointments_by_date("ana prado")
    assert [a["id"] for day in only_ana.values() for a in day] == [early["id"]]


def test_insufficient_stock_is_caught_locally(hospital_client, transport, medication):
    current = hospital_client.get_medication(str(medication.id))
    result = hospital_client.adjust_stock(current, -5, "dispensed")
    assert result["medication"]["quantity"] == 0

    sent = len(transport.calls)
    with pytest.raises(ValidationError) as exc:
        hospital_client.adjust_stock(result["medication"], -1)
    assert exc.value.errors["delta"].startswith("Insufficient stock")
    assert len(transport.calls) == sent


def test_stale_quantity_is_rejected_by_server(hospital_client, medication):
    stale = hospital_client.get_medication(str(medication.id))
    hospital_client.adjust_stock(stale, -5)

    with pytest.raises(ConflictError) as exc:
        hospital_client.adjust_stock(stale, -1)
    assert exc.value.code == "insufficient_stock"

    movements = hospital_client.list_movements(str(medication.id))
    assert [m["delta"] for m in movements] == [-5]


def test_medication_update_keeps_identity(hospital_client, medication):
    current = hospital_client.get_medication(str(medication.id))
    updated = hospital_client.update_medication(current["id"], {**current, "quantity": 30})

    assert updated["id"] == current["id"]
    assert updated["stockStatus"] == "OK"
    assert [m["sku"] for m in hospital_client.list_medications(stock_status="OK")] == ["DIP-500"]


def test_dashboard(hospital_client, patient, doctor, medication):
    stats = hospital_client.dashboard()
    assert stats["patients"] == 1
    assert stats["lowStockMedications"] == 1


def test_network_failure_is_unknown_error():
    class _Down:
        def request(self, *args, **kwargs):
            raise requests.ConnectionError("connection refused")

    client = HospitalApiClient("http://nowhere.invalid/api/v1", http=_Down())
    with pytest.raises(UnknownError) as exc:
        client.dashboard()
    assert exc.value.status is None
    assert "connection refused" in exc.value.message


def test_token_store_round_trip_and_logout(tmp_path, hospital_client, transport):
    store = TokenStore(tmp_path / "token.json")
    store.save(hospital_client.session)

    restored = store.load()
    assert restored == hospital_client.session

    config = ClientConfig(base_url="http://testserver/api/v1", token_file=tmp_path / "token.json")
    resumed = HospitalApiClient.from_config(config, http=transport)
    assert resumed.me()["username"] == "admin@example.com"

    logged_out = resumed.logout(store)
    assert logged_out.session is None
    assert store.load() is None


def test_corrupt_token_file_is_ignored(tmp_path):
    path = tmp_path / "token.json"
    path.write_text("{not json", encoding="utf-8")
    assert TokenStore(path).load() is None


def test_session_authorization_header():
    assert Session(token="abc").authorization == "Bearer abc"


def test_config_from_env(monkeypatch, tmp_path):
    monkeypatch.setenv("HOSPITAL_API_URL", "https://hospital.example/api/v1/")
    monkeypatch.setenv("HOSPITAL_API_TIMEOUT", "3.5")
    monkeypatch.setenv("HOSPITAL_TOKEN_FILE", str(tmp_path / "t.json"))

    config = ClientConfig.from_env(tmp_path / "missing.env")
    assert config.base_url == "https://hospital.example/api/v1"
    assert config.timeout == 3.5
    assert config.token_file == tmp_path / "t.json"
