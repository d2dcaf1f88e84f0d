# auth_utils.py
import logging

from fastapi import Depends, Request, Response
from passlib.context import CryptContext
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from config import settings
from core.context import PatientPrincipal, Principal, RequestContext
from core.errors import InternalError, Unauthenticated
from core.session_store import session_store
from database import get_db

logger = logging.getLogger(__name__)

# ---------------- Passwords ----------------
bcrypt_context = CryptContext(schemes=["bcrypt"], deprecated="auto")
MAX_BCRYPT_BYTES = 72


def hash_password(password: str) -> str:
    return bcrypt_context.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    return bcrypt_context.verify(password, password_hash)


# ---------------- Session cookie ----------------
def start_session(ctx: RequestContext, response: Response, principal: Principal) -> None:
    sid = session_store.create(ctx.db, principal)
    ctx.session_id = sid
    ctx.principal = principal
    set_session_cookie(response, sid)


def _drop_session_cookie(response: Response) -> None:
    # one Set-Cookie per response for the session cookie
    prefix = f"{settings.SESSION_COOKIE_NAME}=".encode("latin-1")
    # in place: response.headers may already wrap this list
    response.raw_headers[:] = [
        (name, value) for name, value in response.raw_headers
        if not (name == b"set-cookie" and value.startswith(prefix))
    ]


def set_session_cookie(response: Response, sid: str) -> None:
    _drop_session_cookie(response)
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=session_store.sign(sid),
        max_age=settings.SESSION_MAX_AGE,
        httponly=True,
        secure=settings.SESSION_COOKIE_SECURE,
        samesite="lax",
    )


def end_session(ctx: RequestContext, response: Response) -> None:
    if ctx.session_id:
        try:
            session_store.destroy(ctx.db, ctx.session_id)
        except SQLAlchemyError:
            ctx.db.rollback()
            logger.exception("Error destroying session")
            raise InternalError("Error logging out")
    clear_session_cookie(ctx, response)


def clear_session_cookie(ctx: RequestContext, response: Response) -> None:
    ctx.session_id = None
    ctx.principal = None
    _drop_session_cookie(response)
    response.delete_cookie(settings.SESSION_COOKIE_NAME)


# ---------------- Dependencies ----------------
def get_context(request: Request, response: Response, db: Session = Depends(get_db)) -> RequestContext:
    ctx = RequestContext(db=db)
    cookie = request.cookies.get(settings.SESSION_COOKIE_NAME)
    if not cookie:
        return ctx
    sid = session_store.unsign(cookie)
    if not sid:
        return ctx
    principal = session_store.resolve(db, sid)
    if principal is not None:
        ctx.session_id = sid
        ctx.principal = principal
        # cookie max-age slides with the stored expiry
        set_session_cookie(response, sid)
    return ctx


def require_user(ctx: RequestContext = Depends(get_context)) -> RequestContext:
    if not ctx.is_authenticated:
        raise Unauthenticated()
    return ctx


def require_admin(ctx: RequestContext = Depends(get_context)) -> RequestContext:
    if not ctx.is_admin:
        raise Unauthenticated("Admin access required")
    return ctx


def require_patient(ctx: RequestContext = Depends(require_user)) -> RequestContext:
    if not isinstance(ctx.principal, PatientPrincipal):
        raise Unauthenticated("Patient access required")
    return ctx
