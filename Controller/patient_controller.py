import logging

from fastapi import HTTPException, Response
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from core.auth_utils import (
    MAX_BCRYPT_BYTES,
    clear_session_cookie,
    end_session,
    hash_password,
    start_session,
    verify_password,
)
from core.context import PatientPrincipal, RequestContext
from core.errors import DuplicateEmail, InternalError, InvalidCredentials, NotFound
from core.session_store import session_store
from model.appointment_model import Appointment
from model.patient_model import Patient
from model.patient_schema import CreatePatientRequest, LoginPatientRequest, UpdatePatientRequest

logger = logging.getLogger(__name__)


# ---------------- Registration & login ----------------
def register_patient(request: CreatePatientRequest, ctx: RequestContext):
    if len(request.password.encode("utf-8")) > MAX_BCRYPT_BYTES:
        raise HTTPException(status_code=400, detail="Password too long, max 72 bytes")

    db = ctx.db
    if db.query(Patient.id).filter(Patient.email == request.email).first():
        raise DuplicateEmail()

    new_patient = Patient(
        first_name=request.first_name,
        last_name=request.last_name,
        email=request.email,
        password_hash=hash_password(request.password),
        phone=request.phone,
        date_of_birth=request.date_of_birth,
        gender=request.gender,
        address=request.address,
    )
    try:
        db.add(new_patient)
        db.commit()
        db.refresh(new_patient)
    except IntegrityError:
        # lost a race with a concurrent registration for the same email
        db.rollback()
        raise DuplicateEmail()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Registration error")
        raise InternalError("Error registering patient")

    logger.info("Registered patient %s", new_patient.id)
    return {"message": "Patient registered successfully", "patientId": new_patient.id}


def login_patient(request_data: LoginPatientRequest, ctx: RequestContext, response: Response):
    patient = ctx.db.query(Patient).filter(Patient.email == request_data.email).first()

    # same answer for unknown email and wrong password
    if not patient or not verify_password(request_data.password, patient.password_hash):
        raise InvalidCredentials()

    try:
        start_session(ctx, response, PatientPrincipal(patient.id))
    except SQLAlchemyError:
        ctx.db.rollback()
        logger.exception("Login error")
        raise InternalError("Error during login")

    logger.info("Patient %s logged in", patient.id)
    return {
        "message": "Login successful",
        "patient": {
            "id": patient.id,
            "first_name": patient.first_name,
            "last_name": patient.last_name,
            "email": patient.email,
        },
    }


def logout_patient(ctx: RequestContext, response: Response):
    end_session(ctx, response)
    return {"message": "Logged out successfully"}


# ---------------- Profile ----------------
def _own_record(ctx: RequestContext) -> Patient:
    patient = ctx.db.get(Patient, ctx.principal.id)
    if not patient:
        raise NotFound("Patient not found")
    return patient


def get_profile(ctx: RequestContext):
    try:
        patient = _own_record(ctx)
    except SQLAlchemyError:
        ctx.db.rollback()
        logger.exception("Profile fetch error")
        raise InternalError("Error fetching profile")
    return patient.to_profile()


def update_profile(update_data: UpdatePatientRequest, ctx: RequestContext):
    patient = _own_record(ctx)
    if update_data.first_name is not None: patient.first_name = update_data.first_name
    if update_data.last_name is not None: patient.last_name = update_data.last_name
    if update_data.phone is not None: patient.phone = update_data.phone
    if update_data.address is not None: patient.address = update_data.address
    try:
        ctx.db.commit()
    except SQLAlchemyError:
        ctx.db.rollback()
        logger.exception("Profile update error")
        raise InternalError("Error updating profile")
    return {"message": "Profile updated successfully"}


def delete_account(ctx: RequestContext, response: Response):
    db = ctx.db
    patient_id = ctx.principal.id
    try:
        # appointments first, then the patient and every session it holds
        removed = db.query(Appointment).filter(
            Appointment.patient_id == patient_id
        ).delete(synchronize_session=False)
        db.query(Patient).filter(Patient.id == patient_id).delete(synchronize_session=False)
        session_store.destroy_all_for(db, ctx.principal)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Account deletion error")
        raise InternalError("Error deleting account")

    logger.info("Deleted patient %s and %d appointments", patient_id, removed)
    clear_session_cookie(ctx, response)
    return {"message": "Account deleted successfully"}
