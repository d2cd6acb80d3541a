# hospital_core/appointments/tests/test_appointments_api.py
from datetime import timedelta

import pytest
from django.utils import timezone

from hospital_core.appointments.models import Appointment, AppointmentStatus
from hospital_core.audit.models import AuditEvent
from hospital_core.tests.helpers import local_noon

pytestmark = pytest.mark.django_db


def _book(api_client, patient, doctor, when):
    return api_client.post(
        "/api/v1/appointments/",
        {"patientId": str(patient.id), "doctorId": str(doctor.id), "appointmentTime": when.isoformat()},
        format="json",
    )


def _put(api_client, appt, **overrides):
    payload = {
        "patientId": appt["patientId"],
        "doctorId": appt["doctorId"],
        "appointmentTime": appt["appointmentTime"],
        "status": appt["status"],
    }
    payload.update(overrides)
    return api_client.put(f"/api/v1/appointments/{appt['id']}/", payload, format="json")


def test_create_appointment_is_scheduled(api_client, patient, doctor):
    r = _book(api_client, patient, doctor, local_noon(days=1))
    assert r.status_code == 201, r.data
    assert r.data["status"] == "SCHEDULED"
    assert r.data["patientName"] == "Maria Souza"
    assert r.data["doctorName"] == "Dr. Carlos Lima"

    assert AuditEvent.objects.filter(event_code="appointment.created", entity_id=r.data["id"]).exists()


def test_same_doctor_same_time_is_409(api_client, patient, doctor):
    when = local_noon(days=3)
    first = _book(api_client, patient, doctor, when)
    assert first.status_code == 201, first.data

    second = _book(api_client, patient, doctor, when)
    assert second.status_code == 409, second.data
    err = second.data["error"]
    assert err["code"] == "schedule_conflict"
    assert err["message"] == "This time slot is already booked for the doctor."
    assert err["details"]["conflicting_appointment_id"] == first.data["id"]
    assert "request_id" in err

    assert Appointment.objects.filter(doctor=doctor).count() == 1


def test_overlapping_slot_is_409_but_adjacent_slot_is_free(api_client, patient, doctor, settings):
    settings.APPOINTMENT_SLOT_MINUTES = 30
    when = local_noon(days=3)
    assert _book(api_client, patient, doctor, when).status_code == 201

    overlap = _book(api_client, patient, doctor, when + timedelta(minutes=15))
    assert overlap.status_code == 409, overlap.data

    adjacent = _book(api_client, patient, doctor, when + timedelta(minutes=30))
    assert adjacent.status_code == 201, adjacent.data


def test_default_only_identical_times_conflict(api_client, patient, doctor):
    when = local_noon(days=3)
    assert _book(api_client, patient, doctor, when).status_code == 201

    quarter_past = _book(api_client, patient, doctor, when + timedelta(minutes=15))
    assert quarter_past.status_code == 201, quarter_past.data

    assert _book(api_client, patient, doctor, when).status_code == 409


def test_exact_match_only_when_slot_is_zero(api_client, patient, doctor, settings):
    settings.APPOINTMENT_SLOT_MINUTES = 0
    when = local_noon(days=3)
    assert _book(api_client, patient, doctor, when).status_code == 201
    assert _book(api_client, patient, doctor, when + timedelta(minutes=1)).status_code == 201
    assert _book(api_client, patient, doctor, when).status_code == 409


def test_other_doctor_same_time_is_fine(api_client, patient, doctor, other_doctor):
    when = local_noon(days=3)
    assert _book(api_client, patient, doctor, when).status_code == 201
    assert _book(api_client, patient, other_doctor, when).status_code == 201


def test_cancelled_appointment_frees_the_slot(api_client, patient, doctor):
    when = local_noon(days=4)
    first = _book(api_client, patient, doctor, when).data

    cancel = _put(api_client, first, status="CANCELLED")
    assert cancel.status_code == 200, cancel.data
    assert cancel.data["status"] == "CANCELLED"

    again = _book(api_client, patient, doctor, when)
    assert again.status_code == 201, again.data


def test_create_in_the_past_is_400(api_client, patient, doctor):
    r = _book(api_client, patient, doctor, timezone.now() - timedelta(hours=1))
    assert r.status_code == 400, r.data
    assert r.data["error"]["code"] == "validation_error"
    assert "appointmentTime" in r.data["error"]["details"]


def test_unknown_doctor_or_patient_is_404(api_client, patient, doctor):
    r = api_client.post(
        "/api/v1/appointments/",
        {
            "patientId": str(patient.id),
            "doctorId": "00000000-0000-0000-0000-000000000000",
            "appointmentTime": local_noon().isoformat(),
        },
        format="json",
    )
    assert r.status_code == 404, r.data
    assert r.data["error"]["message"] == "Doctor not found."


def test_past_appointment_can_be_completed(api_client, patient, doctor):
    appt = Appointment.objects.create(
        patient=patient,
        doctor=doctor,
        appointment_time=timezone.now() - timedelta(days=1),
    )
    r = api_client.get(f"/api/v1/appointments/{appt.id}/")

    done = _put(api_client, r.data, status="COMPLETED")
    assert done.status_code == 200, done.data
    assert done.data["status"] == "COMPLETED"


def test_reschedule_moves_the_appointment(api_client, patient, doctor, other_doctor):
    appt = _book(api_client, patient, doctor, local_noon(days=5)).data
    new_time = local_noon(days=6)

    r = _put(api_client, appt, doctorId=str(other_doctor.id), appointmentTime=new_time.isoformat())
    assert r.status_code == 200, r.data
    assert r.data["doctorName"] == "Dra. Ana Prado"

    # the old slot is free again
    assert _book(api_client, patient, doctor, local_noon(days=5)).status_code == 201


def test_reschedule_onto_taken_slot_is_409(api_client, patient, doctor):
    taken = local_noon(days=5)
    _book(api_client, patient, doctor, taken)
    appt = _book(api_client, patient, doctor, local_noon(days=6)).data

    r = _put(api_client, appt, appointmentTime=taken.isoformat())
    assert r.status_code == 409, r.data
    assert r.data["error"]["code"] == "schedule_conflict"


@pytest.mark.parametrize(
    "terminal,target",
    [
        ("COMPLETED", "SCHEDULED"),
        ("COMPLETED", "CANCELLED"),
        ("CANCELLED", "SCHEDULED"),
        ("CANCELLED", "COMPLETED"),
    ],
)
def test_terminal_status_cannot_change(api_client, patient, doctor, terminal, target):
    appt = _book(api_client, patient, doctor, local_noon(days=7)).data
    closed = _put(api_client, appt, status=terminal)
    assert closed.status_code == 200, closed.data

    r = _put(api_client, closed.data, status=target)
    assert r.status_code == 409, r.data
    assert r.data["error"]["code"] == "invalid_transition"
    assert Appointment.objects.get(id=appt["id"]).status == terminal


def test_terminal_appointment_cannot_be_rescheduled(api_client, patient, doctor):
    appt = _book(api_client, patient, doctor, local_noon(days=7)).data
    closed = _put(api_client, appt, status="CANCELLED").data

    r = _put(api_client, closed, appointmentTime=local_noon(days=8).isoformat())
    assert r.status_code == 409, r.data
    assert r.data["error"]["code"] == "invalid_transition"


def test_unknown_status_is_400(api_client, appointment):
    r = api_client.put(
        f"/api/v1/appointments/{appointment.id}/",
        {
            "patientId": str(appointment.patient_id),
            "doctorId": str(appointment.doctor_id),
            "appointmentTime": appointment.appointment_time.isoformat(),
            "status": "NO_SHOW",
        },
        format="json",
    )
    assert r.status_code == 400, r.data
    assert "status" in r.data["error"]["details"]


def test_list_filters_by_name_and_status(api_client, patient, doctor, other_doctor):
    a = _book(api_client, patient, doctor, local_noon(days=2)).data
    b = _book(api_client, patient, other_doctor, local_noon(days=1)).data
    _put(api_client, b, status="CANCELLED")

    everything = api_client.get("/api/v1/appointments/")
    assert [x["id"] for x in everything.data] == [b["id"], a["id"]]

    by_doctor = api_client.get("/api/v1/appointments/?q=carlos")
    assert [x["id"] for x in by_doctor.data] == [a["id"]]

    by_patient = api_client.get("/api/v1/appointments/?q=SOUZA")
    assert len(by_patient.data) == 2

    cancelled = api_client.get("/api/v1/appointments/?status=CANCELLED")
    assert [x["id"] for x in cancelled.data] == [b["id"]]


def test_list_invalid_filter_is_400(api_client):
    r = api_client.get("/api/v1/appointments/?status=LATE")
    assert r.status_code == 400, r.data
    assert r.data["error"]["code"] == "validation_error"


def test_list_grouped_by_date(api_client, patient, doctor):
    day2_late = _book(api_client, patient, doctor, local_noon(days=2) + timedelta(hours=3)).data
    day2_early = _book(api_client, patient, doctor, local_noon(days=2) - timedelta(hours=2)).data
    day1 = _book(api_client, patient, doctor, local_noon(days=1)).data

    r = api_client.get("/api/v1/appointments/?group=date")
    assert r.status_code == 200, r.data

    d1 = local_noon(days=1).date().isoformat()
    d2 = local_noon(days=2).date().isoformat()
    assert list(r.data.keys()) == [d1, d2]
    assert [x["id"] for x in r.data[d1]] == [day1["id"]]
    assert [x["id"] for x in r.data[d2]] == [day2_early["id"], day2_late["id"]]


def test_delete_appointment(api_client, appointment):
    r = api_client.delete(f"/api/v1/appointments/{appointment.id}/")
    assert r.status_code == 204
    assert not Appointment.objects.filter(id=appointment.id).exists()
    assert api_client.get(f"/api/v1/appointments/{appointment.id}/").status_code == 404


def test_status_defaults_to_scheduled(appointment):
    assert appointment.status == AppointmentStatus.SCHEDULED
