import logging

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from core.context import AdminPrincipal, DoctorPrincipal, RequestContext
from core.errors import Forbidden, InternalError, InvalidStatusTransition, NotFound, SlotUnavailable
from model.appointment_model import Appointment, AppointmentStatus, can_transition
from model.appointment_schema import AppointmentRequest, AppointmentStatusUpdate
from model.doctor_model import Doctor
from model.patient_model import Patient

logger = logging.getLogger(__name__)


def _serialize_slot(appointment: Appointment) -> dict:
    return {
        "id": appointment.id,
        "appointment_date": appointment.appointment_date.isoformat(),
        "appointment_time": appointment.appointment_time.strftime("%H:%M:%S"),
        "status": appointment.status.value,
    }


# ------------------------
# Book a new appointment
# ------------------------
def slot_taken(db, request: AppointmentRequest) -> bool:
    return db.query(Appointment.id).filter(
        Appointment.doctor_id == request.doctor_id,
        Appointment.appointment_date == request.appointment_date,
        Appointment.appointment_time == request.appointment_time,
        Appointment.status == AppointmentStatus.SCHEDULED,
    ).first() is not None


def book_appointment(request: AppointmentRequest, ctx: RequestContext):
    db = ctx.db
    patient_id = ctx.principal.id

    if not db.get(Doctor, request.doctor_id):
        raise NotFound("Doctor not found")

    if slot_taken(db, request):
        raise SlotUnavailable()

    new_app = Appointment(
        patient_id=patient_id,
        doctor_id=request.doctor_id,
        appointment_date=request.appointment_date,
        appointment_time=request.appointment_time,
        status=AppointmentStatus.SCHEDULED,
    )
    try:
        db.add(new_app)
        db.commit()
        db.refresh(new_app)
    except IntegrityError:
        # the scheduled-slot unique index caught a concurrent booking
        db.rollback()
        raise SlotUnavailable()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Error booking appointment")
        raise InternalError("Error booking appointment")

    logger.info("Patient %s booked appointment %s with doctor %s", patient_id, new_app.id, request.doctor_id)
    return {"message": "Appointment booked successfully", "appointmentId": new_app.id}


# ------------------------
# Listings
# ------------------------
def get_my_appointments(ctx: RequestContext):
    try:
        rows = (
            ctx.db.query(Appointment, Doctor)
            .join(Doctor, Appointment.doctor_id == Doctor.id)
            .filter(Appointment.patient_id == ctx.principal.id)
            .order_by(Appointment.appointment_date, Appointment.appointment_time)
            .all()
        )
    except SQLAlchemyError:
        ctx.db.rollback()
        logger.exception("Error fetching appointments")
        raise InternalError("Error fetching appointments")
    return [
        {
            **_serialize_slot(app),
            "doctor_first_name": doctor.first_name,
            "doctor_last_name": doctor.last_name,
            "specialization": doctor.specialization,
        }
        for app, doctor in rows
    ]


def get_doctor_appointments(doctor_id: int, ctx: RequestContext):
    principal = ctx.principal
    is_that_doctor = isinstance(principal, DoctorPrincipal) and principal.id == doctor_id
    if not (isinstance(principal, AdminPrincipal) or is_that_doctor):
        raise Forbidden()

    try:
        rows = (
            ctx.db.query(Appointment, Patient)
            .join(Patient, Appointment.patient_id == Patient.id)
            .filter(Appointment.doctor_id == doctor_id)
            .order_by(Appointment.appointment_date, Appointment.appointment_time)
            .all()
        )
    except SQLAlchemyError:
        ctx.db.rollback()
        logger.exception("Error fetching doctor appointments")
        raise InternalError("Error fetching appointments")
    return [
        {
            **_serialize_slot(app),
            "patient_first_name": patient.first_name,
            "patient_last_name": patient.last_name,
        }
        for app, patient in rows
    ]


# ------------------------
# Status changes
# ------------------------
def _check_owner_or_admin(ctx: RequestContext, appointment: Appointment):
    if not (ctx.owns(appointment.patient_id) or ctx.is_admin):
        raise Forbidden()


def update_status(appointment_id: int, update: AppointmentStatusUpdate, ctx: RequestContext):
    appointment = ctx.db.get(Appointment, appointment_id)
    if not appointment:
        raise NotFound("Appointment not found")

    _check_owner_or_admin(ctx, appointment)

    if not can_transition(appointment.status, update.status):
        raise InvalidStatusTransition(appointment.status.value, update.status.value)

    appointment.status = update.status
    try:
        ctx.db.commit()
    except SQLAlchemyError:
        ctx.db.rollback()
        logger.exception("Error updating appointment")
        raise InternalError("Error updating appointment")

    logger.info("Appointment %s set to %s", appointment_id, update.status.value)
    return {"message": "Appointment updated successfully"}


def cancel_appointment(appointment_id: int, ctx: RequestContext):
    appointment = ctx.db.query(Appointment).filter(
        Appointment.id == appointment_id,
        Appointment.status == AppointmentStatus.SCHEDULED,
    ).first()
    if not appointment:
        raise NotFound("Appointment not found or already completed/canceled")

    _check_owner_or_admin(ctx, appointment)

    appointment.status = AppointmentStatus.CANCELED
    try:
        ctx.db.commit()
    except SQLAlchemyError:
        ctx.db.rollback()
        logger.exception("Error canceling appointment")
        raise InternalError("Error canceling appointment")

    logger.info("Appointment %s canceled", appointment_id)
    return {"message": "Appointment canceled successfully"}
