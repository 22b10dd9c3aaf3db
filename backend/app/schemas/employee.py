import datetime as dt
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field


class EmployeeBase(BaseModel):
    name: str = Field(..., min_length=2)
    designation: str = Field(..., min_length=1)
    hiring_date: dt.date
    date_of_birth: dt.date
    salary: Decimal = Field(..., gt=0, decimal_places=2)


class EmployeeCreate(EmployeeBase):
    pass


class EmployeeUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=2)
    designation: Optional[str] = Field(None, min_length=1)
    hiring_date: Optional[dt.date] = None
    date_of_birth: Optional[dt.date] = None
    salary: Optional[Decimal] = Field(None, gt=0, decimal_places=2)
