from dataclasses import dataclass
from typing import Optional, Union

from sqlalchemy.orm import Session

from model.session_model import UserType


@dataclass(frozen=True)
class PatientPrincipal:
    id: int
    user_type = UserType.PATIENT


@dataclass(frozen=True)
class DoctorPrincipal:
    id: int
    user_type = UserType.DOCTOR


@dataclass(frozen=True)
class AdminPrincipal:
    id: int
    user_type = UserType.ADMIN


Principal = Union[PatientPrincipal, DoctorPrincipal, AdminPrincipal]

_PRINCIPALS = {
    UserType.PATIENT: PatientPrincipal,
    UserType.DOCTOR: DoctorPrincipal,
    UserType.ADMIN: AdminPrincipal,
}


def principal_for(user_type: UserType, user_id: int) -> Principal:
    return _PRINCIPALS[UserType(user_type)](user_id)


@dataclass
class RequestContext:
    """Per-request state handed to every controller: the database session and the caller."""
    db: Session
    session_id: Optional[str] = None
    principal: Optional[Principal] = None

    @property
    def is_authenticated(self) -> bool:
        return self.principal is not None

    @property
    def is_admin(self) -> bool:
        return isinstance(self.principal, AdminPrincipal)

    def owns(self, patient_id: int) -> bool:
        return isinstance(self.principal, PatientPrincipal) and self.principal.id == patient_id
