import logging
from datetime import date

from fastapi import Response
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from core.auth_utils import end_session, hash_password, start_session, verify_password
from core.context import AdminPrincipal, RequestContext
from core.errors import InternalError, InvalidCredentials
from model.admin_model import Admin
from model.admin_schema import LoginAdminRequest
from model.appointment_model import Appointment, AppointmentStatus
from model.doctor_model import Doctor
from model.patient_model import Patient

logger = logging.getLogger(__name__)


def create_admin(db: Session, username: str, password: str, role: str = "admin") -> Admin:
    """Insert an admin account. Raises ValueError when the username is taken."""
    admin = Admin(username=username, password_hash=hash_password(password), role=role)
    db.add(admin)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ValueError(f"Admin '{username}' already exists")
    db.refresh(admin)
    logger.info("Created admin %s (%s)", admin.id, role)
    return admin


def login_admin(request_data: LoginAdminRequest, ctx: RequestContext, response: Response):
    admin = ctx.db.query(Admin).filter(Admin.username == request_data.username).first()
    if not admin or not verify_password(request_data.password, admin.password_hash):
        raise InvalidCredentials()

    try:
        start_session(ctx, response, AdminPrincipal(admin.id))
    except SQLAlchemyError:
        ctx.db.rollback()
        logger.exception("Admin login error")
        raise InternalError("Error during login")

    logger.info("Admin %s logged in", admin.id)
    return {
        "message": "Admin login successful",
        "admin": {"id": admin.id, "username": admin.username, "role": admin.role},
    }


def logout_admin(ctx: RequestContext, response: Response):
    end_session(ctx, response)
    return {"message": "Logged out successfully"}


def list_patients(ctx: RequestContext):
    try:
        patients = ctx.db.query(Patient).order_by(Patient.id).all()
    except SQLAlchemyError:
        ctx.db.rollback()
        logger.exception("Error fetching patients")
        raise InternalError("Error fetching patients")
    return [patient.to_profile() for patient in patients]


def get_statistics(ctx: RequestContext):
    db = ctx.db
    try:
        total_patients = db.query(func.count(Patient.id)).scalar()
        total_doctors = db.query(func.count(Doctor.id)).scalar()
        total_appointments = db.query(func.count(Appointment.id)).scalar()
        upcoming = db.query(func.count(Appointment.id)).filter(
            Appointment.status == AppointmentStatus.SCHEDULED,
            Appointment.appointment_date >= date.today(),
        ).scalar()
        by_status = (
            db.query(Appointment.status, func.count(Appointment.id))
            .group_by(Appointment.status)
            .order_by(Appointment.status)
            .all()
        )
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Error fetching statistics")
        raise InternalError("Error fetching statistics")

    return {
        "totalPatients": total_patients,
        "totalDoctors": total_doctors,
        "totalAppointments": total_appointments,
        "upcomingAppointments": upcoming,
        "appointmentsByStatus": [
            {"status": status.value, "count": count} for status, count in by_status
        ],
    }
