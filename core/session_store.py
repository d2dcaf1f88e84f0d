import logging
import secrets
from datetime import datetime, timedelta
from typing import Optional

from jose import jwt, JWTError
from sqlalchemy.orm import Session

from config import settings
from core.context import Principal, principal_for
from model.session_model import UserSession

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"


class SessionStore:
    """Database-backed sessions keyed by an opaque id.

    The cookie holds the id signed with the session secret; the row holds the
    identity and a sliding expiry that moves forward on every resolved request.
    """

    def __init__(self, secret: str = settings.SESSION_SECRET, max_age: int = settings.SESSION_MAX_AGE):
        self.secret = secret
        self.max_age = timedelta(seconds=max_age)

    # ---------------- cookie signing ----------------
    def sign(self, sid: str) -> str:
        return jwt.encode({"sid": sid}, self.secret, algorithm=ALGORITHM)

    def unsign(self, cookie_value: str) -> Optional[str]:
        try:
            payload = jwt.decode(cookie_value, self.secret, algorithms=[ALGORITHM])
        except JWTError:
            return None
        return payload.get("sid")

    # ---------------- session rows ----------------
    def create(self, db: Session, principal: Principal) -> str:
        self.purge_expired(db)
        sid = secrets.token_urlsafe(32)
        db.add(UserSession(
            sid=sid,
            user_id=principal.id,
            user_type=principal.user_type,
            expires_at=datetime.utcnow() + self.max_age,
        ))
        db.commit()
        return sid

    def resolve(self, db: Session, sid: str) -> Optional[Principal]:
        row = db.get(UserSession, sid)
        if row is None:
            return None
        now = datetime.utcnow()
        if row.expires_at <= now:
            db.delete(row)
            db.commit()
            return None
        row.expires_at = now + self.max_age
        db.commit()
        return principal_for(row.user_type, row.user_id)

    def destroy(self, db: Session, sid: str) -> None:
        db.query(UserSession).filter(UserSession.sid == sid).delete(synchronize_session=False)
        db.commit()

    def destroy_all_for(self, db: Session, principal: Principal) -> int:
        """Drop every session of one identity; the caller commits."""
        return db.query(UserSession).filter(
            UserSession.user_id == principal.id,
            UserSession.user_type == principal.user_type,
        ).delete(synchronize_session=False)

    def purge_expired(self, db: Session) -> int:
        removed = db.query(UserSession).filter(
            UserSession.expires_at <= datetime.utcnow()
        ).delete(synchronize_session=False)
        if removed:
            logger.info("Purged %d expired sessions", removed)
        return removed


session_store = SessionStore()
