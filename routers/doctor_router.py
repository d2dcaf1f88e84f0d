from fastapi import APIRouter, Depends

from Controller import doctor_controller
from core.auth_utils import get_context, require_admin
from core.context import RequestContext
from model.doctor_schema import DoctorRequest

router = APIRouter(prefix="/api/doctors", tags=["Doctors"])


@router.post("", status_code=201)
def create(request: DoctorRequest, ctx: RequestContext = Depends(require_admin)):
    return doctor_controller.create_doctor(request, ctx)


# Public listing
@router.get("")
def list_all(ctx: RequestContext = Depends(get_context)):
    return doctor_controller.list_doctors(ctx)


@router.get("/{doctor_id}")
def get_one(doctor_id: int, ctx: RequestContext = Depends(get_context)):
    return doctor_controller.get_doctor(doctor_id, ctx)


@router.put("/{doctor_id}")
def update(doctor_id: int, request: DoctorRequest, ctx: RequestContext = Depends(require_admin)):
    return doctor_controller.update_doctor(doctor_id, request, ctx)


@router.delete("/{doctor_id}")
def delete(doctor_id: int, ctx: RequestContext = Depends(require_admin)):
    return doctor_controller.delete_doctor(doctor_id, ctx)
