from fastapi import APIRouter, Depends, Response

from Controller import patient_controller
from core.auth_utils import get_context, require_patient, require_user
from core.context import RequestContext
from model.patient_schema import CreatePatientRequest, LoginPatientRequest, UpdatePatientRequest

router = APIRouter(prefix="/api/patients", tags=["Patients"])


# Register a new patient
@router.post("/register", status_code=201)
def register(request: CreatePatientRequest, ctx: RequestContext = Depends(get_context)):
    return patient_controller.register_patient(request, ctx)


@router.post("/login")
def login(request: LoginPatientRequest, response: Response, ctx: RequestContext = Depends(get_context)):
    return patient_controller.login_patient(request, ctx, response)


@router.post("/logout")
def logout(response: Response, ctx: RequestContext = Depends(require_user)):
    return patient_controller.logout_patient(ctx, response)


# Own profile
@router.get("/profile")
def get_profile(ctx: RequestContext = Depends(require_patient)):
    return patient_controller.get_profile(ctx)


@router.put("/profile")
def update_profile(update_data: UpdatePatientRequest, ctx: RequestContext = Depends(require_patient)):
    return patient_controller.update_profile(update_data, ctx)


@router.delete("/profile")
def delete_profile(response: Response, ctx: RequestContext = Depends(require_patient)):
    return patient_controller.delete_account(ctx, response)
