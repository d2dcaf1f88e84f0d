from datetime import date, time

from pydantic import BaseModel

from model.appointment_model import AppointmentStatus


class AppointmentRequest(BaseModel):
    doctor_id: int
    appointment_date: date
    appointment_time: time


class AppointmentStatusUpdate(BaseModel):
    status: AppointmentStatus
