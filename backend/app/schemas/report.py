from pydantic import BaseModel
from typing import List


class EmployeeMonthSummary(BaseModel):
    employee_id: int
    name: str
    days_present: int
    times_late: int  # check-ins after 09:45 UTC


class MonthlyAttendanceReport(BaseModel):
    month: str  # YYYY-MM
    total_working_days: int
    summary: List[EmployeeMonthSummary]
    total_employees: int
