# hospital_core/conftest.py
from datetime import date
from decimal import Decimal

import pytest
from django.contrib.auth import get_user_model
from rest_framework.test import APIClient

from hospital_core.appointments.models import Appointment
from hospital_core.client.api import HospitalApiClient
from hospital_core.doctors.models import Doctor
from hospital_core.inventory.models import Medication
from hospital_core.patients.models import Patient
from hospital_core.tests.helpers import APIClientTransport, local_noon

TEST_PASSWORD = "testpass"


@pytest.fixture
def user(db):
    User = get_user_model()
    return User.objects.create_user(
        username="admin@example.com",
        email="admin@example.com",
        password=TEST_PASSWORD,
        first_name="Admin",
        is_active=True,
    )


@pytest.fixture
def api_client(user):
    c = APIClient()
    c.force_authenticate(user=user)
    return c


@pytest.fixture
def patient(db):
    return Patient.objects.create(name="Maria Souza", dob=date(1985, 4, 12), cpf="123.456.789-00")


@pytest.fixture
def doctor(db):
    return Doctor.objects.create(name="Dr. Carlos Lima", specialty="Cardiologia")


@pytest.fixture
def other_doctor(db):
    return Doctor.objects.create(name="Dra. Ana Prado", specialty="Pediatria")


@pytest.fixture
def appointment(patient, doctor):
    return Appointment.objects.create(patient=patient, doctor=doctor, appointment_time=local_noon(days=2))


@pytest.fixture
def medication(db):
    return Medication.objects.create(
        name="Dipirona",
        sku="DIP-500",
        description="Analgesic",
        manufacturer="EMS",
        dosage="500mg",
        unit="tablet",
        quantity=5,
        minimum_stock=10,
        price=Decimal("2.50"),
    )


@pytest.fixture
def transport(db):
    """
    Routes the HTTP client through Django's test client (no real sockets).
    Uses a fresh, unauthenticated APIClient so JWT auth really runs.
    """
    return APIClientTransport(APIClient())


@pytest.fixture
def anon_client(transport):
    return HospitalApiClient("http://testserver/api/v1", http=transport)


@pytest.fixture
def hospital_client(anon_client, user):
    session = anon_client.login(user.username, TEST_PASSWORD)
    return anon_client.with_session(session)
