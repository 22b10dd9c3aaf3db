from app.models.user import HRUser
from app.models.employee import Employee
from app.models.attendance import AttendanceRecord

__all__ = [
    "HRUser",
    "Employee",
    "AttendanceRecord",
]
