from datetime import datetime, timedelta

from core.context import AdminPrincipal, PatientPrincipal
from core.session_store import SessionStore
from model.session_model import UserSession


def test_resolve_returns_tagged_principal(db):
    store = SessionStore(secret="s", max_age=60)
    patient_sid = store.create(db, PatientPrincipal(7))
    admin_sid = store.create(db, AdminPrincipal(7))

    assert store.resolve(db, patient_sid) == PatientPrincipal(7)
    assert store.resolve(db, admin_sid) == AdminPrincipal(7)
    assert store.resolve(db, patient_sid) != store.resolve(db, admin_sid)


def test_expiration_slides_forward(db):
    store = SessionStore(secret="s", max_age=3600)
    sid = store.create(db, PatientPrincipal(1))
    row = db.get(UserSession, sid)
    row.expires_at = datetime.utcnow() + timedelta(seconds=5)
    db.commit()

    assert store.resolve(db, sid) == PatientPrincipal(1)
    db.refresh(row)
    assert row.expires_at > datetime.utcnow() + timedelta(minutes=59)


def test_expired_session_is_gone(db):
    store = SessionStore(secret="s", max_age=3600)
    sid = store.create(db, PatientPrincipal(1))
    row = db.get(UserSession, sid)
    row.expires_at = datetime.utcnow() - timedelta(seconds=1)
    db.commit()

    assert store.resolve(db, sid) is None
    assert db.query(UserSession).count() == 0


def test_create_purges_expired_rows(db):
    store = SessionStore(secret="s", max_age=3600)
    stale = store.create(db, PatientPrincipal(1))
    db.get(UserSession, stale).expires_at = datetime.utcnow() - timedelta(hours=1)
    db.commit()

    store.create(db, PatientPrincipal(2))
    assert db.query(UserSession).filter(UserSession.sid == stale).count() == 0


def test_cookie_signature(db):
    store = SessionStore(secret="s", max_age=60)
    cookie = store.sign("abc")
    assert store.unsign(cookie) == "abc"
    assert SessionStore(secret="other", max_age=60).unsign(cookie) is None
    assert store.unsign("garbage") is None


def test_forged_cookie_is_unauthenticated(client, patient_client):
    sid = patient_client.cookies.get("session_cookie_name")
    client.cookies.set("session_cookie_name", sid + "tampered")
    assert client.get("/api/patients/profile").status_code == 401
