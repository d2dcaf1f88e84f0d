from sqlalchemy.exc import SQLAlchemyError

from conftest import PATIENT_PASSWORD, add_appointment, patient_payload
from core.auth_utils import verify_password
from core.session_store import session_store
from database import engine
from model.appointment_model import Appointment
from model.patient_model import Patient
from model.session_model import UserSession


def test_register_stores_hash_not_plaintext(client, db):
    r = client.post("/api/patients/register", json=patient_payload())
    assert r.status_code == 201
    body = r.json()
    assert body["message"] == "Patient registered successfully"

    patient = db.get(Patient, body["patientId"])
    assert patient is not None
    assert patient.password_hash != PATIENT_PASSWORD
    assert verify_password(PATIENT_PASSWORD, patient.password_hash)


def test_register_duplicate_email_is_conflict(client):
    assert client.post("/api/patients/register", json=patient_payload()).status_code == 201
    r = client.post("/api/patients/register", json=patient_payload(first_name="Other"))
    assert r.status_code == 409
    assert r.json() == {"error": "Email already registered"}


def test_register_rejects_overlong_password(client):
    r = client.post("/api/patients/register", json=patient_payload(password="x" * 73))
    assert r.status_code == 400


def test_register_invalid_email_is_validation_error(client):
    r = client.post("/api/patients/register", json=patient_payload(email="not-an-email"))
    assert r.status_code == 422
    assert r.json()["error"] == "Invalid request"


def test_login_sets_session_for_stored_identity(register_and_login, db):
    client, patient_id = register_and_login()
    session = db.query(UserSession).one()
    assert session.user_id == patient_id
    assert session.user_type.value == "patient"

    profile = client.get("/api/patients/profile").json()
    assert profile["id"] == patient_id
    assert profile["email"] == "jane@example.com"
    assert "password_hash" not in profile


def test_login_response_shape(client):
    client.post("/api/patients/register", json=patient_payload())
    r = client.post("/api/patients/login", json={"email": "jane@example.com", "password": PATIENT_PASSWORD})
    assert r.status_code == 200
    patient = r.json()["patient"]
    assert set(patient) == {"id", "first_name", "last_name", "email"}
    assert "session_cookie_name" in r.cookies


def test_wrong_password_and_unknown_email_look_the_same(client):
    client.post("/api/patients/register", json=patient_payload())
    wrong = client.post("/api/patients/login", json={"email": "jane@example.com", "password": "nope"})
    unknown = client.post("/api/patients/login", json={"email": "ghost@example.com", "password": "nope"})
    assert wrong.status_code == unknown.status_code == 401
    assert wrong.json() == unknown.json() == {"error": "Invalid credentials"}


def test_profile_requires_session(client):
    r = client.get("/api/patients/profile")
    assert r.status_code == 401
    assert r.json() == {"error": "Not authenticated"}


def test_profile_rejects_admin_session(admin_client):
    assert admin_client.get("/api/patients/profile").status_code == 401


def test_update_profile_changes_only_allowed_fields(patient_client):
    r = patient_client.put(
        "/api/patients/profile",
        json={"first_name": "Janet", "address": "2 Side St", "email": "hijack@example.com"},
    )
    assert r.status_code == 200
    profile = patient_client.get("/api/patients/profile").json()
    assert profile["first_name"] == "Janet"
    assert profile["last_name"] == "Doe"
    assert profile["address"] == "2 Side St"
    assert profile["email"] == "jane@example.com"


def test_delete_profile_cascades_and_ends_session(register_and_login, doctor_id, db):
    client, patient_id = register_and_login()
    other_client, other_id = register_and_login("other@example.com")
    add_appointment(db, patient_id, doctor_id, 3)
    add_appointment(db, patient_id, doctor_id, -3)
    add_appointment(db, other_id, doctor_id, 4)

    r = client.delete("/api/patients/profile")
    assert r.status_code == 200
    assert r.json() == {"message": "Account deleted successfully"}

    db.expire_all()
    assert db.query(Patient).filter(Patient.id == patient_id).count() == 0
    assert db.query(Appointment).filter(Appointment.patient_id == patient_id).count() == 0
    assert db.query(Appointment).filter(Appointment.patient_id == other_id).count() == 1
    assert db.query(UserSession).filter(UserSession.user_id == patient_id).count() == 0

    assert client.get("/api/patients/profile").status_code == 401
    assert other_client.get("/api/patients/profile").status_code == 200


def test_logout_destroys_session(patient_client, db):
    r = patient_client.post("/api/patients/logout")
    assert r.status_code == 200
    assert db.query(UserSession).count() == 0
    assert patient_client.get("/api/patients/profile").status_code == 401


def test_profile_storage_failure(patient_client):
    Patient.__table__.drop(bind=engine)
    r = patient_client.get("/api/patients/profile")
    assert r.status_code == 500
    assert r.json() == {"error": "Error fetching profile"}


def test_logout_storage_failure(patient_client, monkeypatch):
    def broken_destroy(db, sid):
        raise SQLAlchemyError("connection lost")

    monkeypatch.setattr(session_store, "destroy", broken_destroy)
    r = patient_client.post("/api/patients/logout")
    assert r.status_code == 500
    assert r.json() == {"error": "Error logging out"}


def test_cookie_refreshed_on_each_request(patient_client):
    r = patient_client.get("/api/patients/profile")
    cookies = r.headers.get_list("set-cookie")
    assert len(cookies) == 1
    assert cookies[0].startswith("session_cookie_name=")
    assert "Max-Age=86400" in cookies[0]

    r = patient_client.post("/api/patients/logout")
    cookies = r.headers.get_list("set-cookie")
    assert len(cookies) == 1
    assert "Max-Age=0" in cookies[0]
