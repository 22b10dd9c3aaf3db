import datetime as dt

from pydantic import BaseModel, Field


class AttendanceCreate(BaseModel):
    employee_id: int = Field(..., gt=0)
    date: dt.date  # YYYY-MM-DD
    check_in_time: dt.datetime  # ISO 8601, UTC when no offset is given


class AttendanceUpdate(BaseModel):
    check_in_time: dt.datetime
