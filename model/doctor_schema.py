import enum
from datetime import time
from typing import Dict, List, Optional

from pydantic import BaseModel, EmailStr, field_validator, model_validator


class Weekday(str, enum.Enum):
    MONDAY = "monday"
    TUESDAY = "tuesday"
    WEDNESDAY = "wednesday"
    THURSDAY = "thursday"
    FRIDAY = "friday"
    SATURDAY = "saturday"
    SUNDAY = "sunday"


class TimeRange(BaseModel):
    start: time
    end: time

    # stored as HH:MM
    @field_validator("start", "end")
    @classmethod
    def whole_minutes(cls, value: time):
        if value.second or value.microsecond:
            raise ValueError("times must be whole minutes (HH:MM)")
        return value

    @model_validator(mode="after")
    def check_order(self):
        if self.start >= self.end:
            raise ValueError("start must be before end")
        return self


class DoctorRequest(BaseModel):
    first_name: str
    last_name: str
    specialization: Optional[str] = None
    email: EmailStr
    phone: Optional[str] = None
    schedule: Dict[Weekday, List[TimeRange]] = {}

    @field_validator("schedule")
    @classmethod
    def check_overlaps(cls, schedule):
        for day, ranges in schedule.items():
            ordered = sorted(ranges, key=lambda r: r.start)
            for previous, current in zip(ordered, ordered[1:]):
                if current.start < previous.end:
                    raise ValueError(f"overlapping time ranges on {day.value}")
        return schedule

    def schedule_json(self):
        """Schedule as stored in the doctors table: weekday -> [{start, end}] with HH:MM times."""
        return {
            day.value: [
                {"start": r.start.strftime("%H:%M"), "end": r.end.strftime("%H:%M")}
                for r in sorted(ranges, key=lambda r: r.start)
            ]
            for day, ranges in self.schedule.items()
        }
