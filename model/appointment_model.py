import enum
from datetime import datetime

from sqlalchemy import Column, Integer, Date, Time, DateTime, ForeignKey, Enum, Index, text
from sqlalchemy.orm import relationship

from database import Base


class AppointmentStatus(str, enum.Enum):
    SCHEDULED = "scheduled"
    CANCELED = "canceled"
    COMPLETED = "completed"


# canceled and completed are terminal
ALLOWED_TRANSITIONS = {
    AppointmentStatus.SCHEDULED: {AppointmentStatus.CANCELED, AppointmentStatus.COMPLETED},
    AppointmentStatus.CANCELED: set(),
    AppointmentStatus.COMPLETED: set(),
}


def can_transition(current: AppointmentStatus, new: AppointmentStatus) -> bool:
    return new in ALLOWED_TRANSITIONS[current]


class Appointment(Base):
    __tablename__ = "appointments"

    id = Column(Integer, primary_key=True, index=True)
    patient_id = Column(Integer, ForeignKey("patients.id"), nullable=False, index=True)
    doctor_id = Column(Integer, ForeignKey("doctors.id"), nullable=False, index=True)
    appointment_date = Column(Date, nullable=False)
    appointment_time = Column(Time, nullable=False)
    status = Column(
        Enum(
            AppointmentStatus,
            name="appointment_status",
            native_enum=False,
            length=20,
            values_callable=lambda statuses: [s.value for s in statuses],
        ),
        default=AppointmentStatus.SCHEDULED,
        nullable=False,
    )
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    patient = relationship("Patient", back_populates="appointments")
    doctor = relationship("Doctor", back_populates="appointments")

    # A slot can be held by at most one scheduled appointment.
    __table_args__ = (
        Index(
            "uq_appointments_scheduled_slot",
            "doctor_id",
            "appointment_date",
            "appointment_time",
            unique=True,
            postgresql_where=text("status = 'scheduled'"),
            sqlite_where=text("status = 'scheduled'"),
        ),
    )
