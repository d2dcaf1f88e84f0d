from datetime import date
from typing import Optional

from pydantic import BaseModel, EmailStr


class CreatePatientRequest(BaseModel):
    first_name: str
    last_name: str
    email: EmailStr
    password: str
    phone: Optional[str] = None
    date_of_birth: Optional[date] = None
    gender: Optional[str] = None
    address: Optional[str] = None


class LoginPatientRequest(BaseModel):
    email: EmailStr
    password: str


class UpdatePatientRequest(BaseModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
