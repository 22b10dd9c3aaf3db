"""Service wiring for routes. Tests override get_clock to pin "now"."""
from fastapi import Depends
from sqlalchemy.orm import Session

from app.core.clock import Clock, utcnow
from app.core.config import settings
from app.core.database import get_db
from app.services.attendance import AttendanceService
from app.services.attendance_rules import AttendanceRules
from app.services.employees import EmployeeService
from app.services.reports import ReportService


def get_clock() -> Clock:
    return utcnow


def get_employee_service(
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
) -> EmployeeService:
    return EmployeeService(
        db,
        upload_dir=settings.UPLOAD_DIR,
        max_upload_size=settings.MAX_UPLOAD_SIZE,
        clock=clock,
    )


def get_attendance_service(
    db: Session = Depends(get_db),
    employees: EmployeeService = Depends(get_employee_service),
    clock: Clock = Depends(get_clock),
) -> AttendanceService:
    return AttendanceService(db, employees, AttendanceRules.from_settings(settings, clock=clock))


def get_report_service(
    db: Session = Depends(get_db),
    employees: EmployeeService = Depends(get_employee_service),
    clock: Clock = Depends(get_clock),
) -> ReportService:
    return ReportService(db, employees, clock=clock)
