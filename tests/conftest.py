import os

# Must be set before config/database are imported.
os.environ["APP_ENV"] = "test"
os.environ["DATABASE_URL"] = "sqlite:///./test_telemedicine.db"
os.environ["SESSION_SECRET"] = "test-session-secret"

from datetime import date, time, timedelta

import pytest
from fastapi.testclient import TestClient

from Controller.admin_controller import create_admin
from database import Base, SessionLocal, engine, init_db
from main import app
from model.appointment_model import Appointment, AppointmentStatus
from model.doctor_model import Doctor
from model.patient_model import Patient


PATIENT_PASSWORD = "correct horse battery"
ADMIN_PASSWORD = "admin-pass-123"


def patient_payload(email="jane@example.com", **overrides):
    payload = {
        "first_name": "Jane",
        "last_name": "Doe",
        "email": email,
        "password": PATIENT_PASSWORD,
        "phone": "555-0100",
        "date_of_birth": "1990-04-12",
        "gender": "female",
        "address": "1 Main St",
    }
    payload.update(overrides)
    return payload


def doctor_payload(**overrides):
    payload = {
        "first_name": "Gregory",
        "last_name": "House",
        "specialization": "Diagnostics",
        "email": "house@example.com",
        "phone": "555-0199",
        "schedule": {
            "monday": [{"start": "09:00", "end": "12:00"}, {"start": "13:00", "end": "17:00"}],
            "thursday": [{"start": "10:00", "end": "14:00"}],
        },
    }
    payload.update(overrides)
    return payload


@pytest.fixture(autouse=True)
def fresh_schema():
    Base.metadata.drop_all(bind=engine)
    init_db()
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def make_client():
    clients = []

    def _make():
        client = TestClient(app)
        clients.append(client)
        return client

    yield _make
    for client in clients:
        client.close()


@pytest.fixture
def client(make_client):
    return make_client()


@pytest.fixture
def register_and_login(make_client):
    """Returns a function creating a logged-in patient client and its id."""

    def _login(email="jane@example.com"):
        client = make_client()
        r = client.post("/api/patients/register", json=patient_payload(email=email))
        assert r.status_code == 201
        patient_id = r.json()["patientId"]
        r = client.post("/api/patients/login", json={"email": email, "password": PATIENT_PASSWORD})
        assert r.status_code == 200
        return client, patient_id

    return _login


@pytest.fixture
def patient_client(register_and_login):
    client, _ = register_and_login()
    return client


@pytest.fixture
def admin_client(make_client, db):
    create_admin(db, "root", ADMIN_PASSWORD, "superadmin")
    client = make_client()
    r = client.post("/api/admin/login", json={"username": "root", "password": ADMIN_PASSWORD})
    assert r.status_code == 200
    return client


@pytest.fixture
def doctor_id(db):
    doc = Doctor(
        first_name="Lisa",
        last_name="Cuddy",
        specialization="Endocrinology",
        email="cuddy@example.com",
        phone="555-0111",
        schedule={"tuesday": [{"start": "08:00", "end": "12:00"}]},
    )
    db.add(doc)
    db.commit()
    db.refresh(doc)
    return doc.id


def add_appointment(db, patient_id, doctor_id, days_from_today, at=time(10, 0),
                    status=AppointmentStatus.SCHEDULED):
    appointment = Appointment(
        patient_id=patient_id,
        doctor_id=doctor_id,
        appointment_date=date.today() + timedelta(days=days_from_today),
        appointment_time=at,
        status=status,
    )
    db.add(appointment)
    db.commit()
    db.refresh(appointment)
    return appointment.id


def add_patient(db, email):
    patient = Patient(first_name="P", last_name=email.split("@")[0], email=email, password_hash="x")
    db.add(patient)
    db.commit()
    db.refresh(patient)
    return patient.id
