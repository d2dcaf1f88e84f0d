import enum
from datetime import datetime

from sqlalchemy import Column, Integer, String, DateTime, Enum

from database import Base


class UserType(str, enum.Enum):
    PATIENT = "patient"
    DOCTOR = "doctor"
    ADMIN = "admin"


class UserSession(Base):
    __tablename__ = "sessions"

    sid = Column(String(128), primary_key=True)
    user_id = Column(Integer, nullable=False, index=True)
    user_type = Column(
        Enum(
            UserType,
            name="user_type",
            native_enum=False,
            length=20,
            values_callable=lambda types: [t.value for t in types],
        ),
        nullable=False,
    )
    expires_at = Column(DateTime, nullable=False, index=True)
    created_at = Column(DateTime, default=datetime.utcnow)
