import logging
from datetime import date

from sqlalchemy.exc import SQLAlchemyError

from core.context import RequestContext
from core.errors import HasFutureAppointments, InternalError, NotFound
from model.appointment_model import Appointment, AppointmentStatus
from model.doctor_model import Doctor
from model.doctor_schema import DoctorRequest

logger = logging.getLogger(__name__)


def _get_doctor_or_404(ctx: RequestContext, doctor_id: int) -> Doctor:
    doctor = ctx.db.get(Doctor, doctor_id)
    if not doctor:
        raise NotFound("Doctor not found")
    return doctor


# ---------------- Admin-only writes ----------------
def create_doctor(request: DoctorRequest, ctx: RequestContext):
    db = ctx.db
    new_doctor = Doctor(
        first_name=request.first_name,
        last_name=request.last_name,
        specialization=request.specialization,
        email=request.email,
        phone=request.phone,
        schedule=request.schedule_json(),
    )
    try:
        db.add(new_doctor)
        db.commit()
        db.refresh(new_doctor)
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Error adding doctor")
        raise InternalError("Error adding doctor")

    logger.info("Admin %s added doctor %s", ctx.principal.id, new_doctor.id)
    return {"message": "Doctor added successfully", "doctorId": new_doctor.id}


def update_doctor(doctor_id: int, request: DoctorRequest, ctx: RequestContext):
    doctor = _get_doctor_or_404(ctx, doctor_id)
    doctor.first_name = request.first_name
    doctor.last_name = request.last_name
    doctor.specialization = request.specialization
    doctor.email = request.email
    doctor.phone = request.phone
    doctor.schedule = request.schedule_json()
    try:
        ctx.db.commit()
    except SQLAlchemyError:
        ctx.db.rollback()
        logger.exception("Error updating doctor")
        raise InternalError("Error updating doctor")
    return {"message": "Doctor updated successfully"}


def delete_doctor(doctor_id: int, ctx: RequestContext):
    db = ctx.db
    _get_doctor_or_404(ctx, doctor_id)

    upcoming = db.query(Appointment.id).filter(
        Appointment.doctor_id == doctor_id,
        Appointment.status == AppointmentStatus.SCHEDULED,
        Appointment.appointment_date >= date.today(),
    ).first()
    if upcoming:
        raise HasFutureAppointments()

    try:
        # what is left is history: past or no longer scheduled
        purged = db.query(Appointment).filter(
            Appointment.doctor_id == doctor_id
        ).delete(synchronize_session=False)
        db.query(Doctor).filter(Doctor.id == doctor_id).delete(synchronize_session=False)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Error deleting doctor")
        raise InternalError("Error deleting doctor")

    logger.info("Deleted doctor %s and %d past appointments", doctor_id, purged)
    return {"message": "Doctor deleted successfully"}


# ---------------- Public reads ----------------
def list_doctors(ctx: RequestContext):
    try:
        doctors = ctx.db.query(Doctor).order_by(Doctor.id).all()
    except SQLAlchemyError:
        ctx.db.rollback()
        logger.exception("Error fetching doctors")
        raise InternalError("Error fetching doctors")
    return [doctor.to_dict() for doctor in doctors]


def get_doctor(doctor_id: int, ctx: RequestContext):
    try:
        doctor = _get_doctor_or_404(ctx, doctor_id)
    except SQLAlchemyError:
        ctx.db.rollback()
        logger.exception("Error fetching doctor")
        raise InternalError("Error fetching doctor")
    return doctor.to_dict()
