from fastapi import APIRouter, Depends

from Controller import appointment_controller
from core.auth_utils import require_patient, require_user
from core.context import RequestContext
from model.appointment_schema import AppointmentRequest, AppointmentStatusUpdate

router = APIRouter(prefix="/api/appointments", tags=["Appointments"])


# -------------------------------
# Book (patient id comes from the session)
# -------------------------------
@router.post("", status_code=201)
def book(request: AppointmentRequest, ctx: RequestContext = Depends(require_patient)):
    return appointment_controller.book_appointment(request, ctx)


@router.get("/my-appointments")
def my_appointments(ctx: RequestContext = Depends(require_patient)):
    return appointment_controller.get_my_appointments(ctx)


@router.get("/doctor/{doctor_id}")
def doctor_appointments(doctor_id: int, ctx: RequestContext = Depends(require_user)):
    return appointment_controller.get_doctor_appointments(doctor_id, ctx)


# -------------------------------
# Status changes (owner or admin)
# -------------------------------
@router.put("/{appointment_id}")
def update_status(
    appointment_id: int,
    update: AppointmentStatusUpdate,
    ctx: RequestContext = Depends(require_user),
):
    return appointment_controller.update_status(appointment_id, update, ctx)


@router.delete("/{appointment_id}")
def cancel(appointment_id: int, ctx: RequestContext = Depends(require_user)):
    return appointment_controller.cancel_appointment(appointment_id, ctx)
