from fastapi import APIRouter, Depends, Response

from Controller import admin_controller
from core.auth_utils import get_context, require_admin
from core.context import RequestContext
from model.admin_schema import LoginAdminRequest

router = APIRouter(prefix="/api/admin", tags=["Admin"])


@router.post("/login")
def login(request: LoginAdminRequest, response: Response, ctx: RequestContext = Depends(get_context)):
    return admin_controller.login_admin(request, ctx, response)


@router.get("/patients")
def patients(ctx: RequestContext = Depends(require_admin)):
    return admin_controller.list_patients(ctx)


@router.get("/statistics")
def statistics(ctx: RequestContext = Depends(require_admin)):
    return admin_controller.get_statistics(ctx)


@router.post("/logout")
def logout(response: Response, ctx: RequestContext = Depends(require_admin)):
    return admin_controller.logout_admin(ctx, response)
