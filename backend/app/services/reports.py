"""Monthly attendance report.

For one calendar month, every employee (or the single filtered one) gets a row
with the number of days they checked in and how many of those check-ins were
late. Employees with no attendance still appear with zeros.

"Late" = check-in time-of-day strictly after 09:45 UTC (585 minutes past
midnight). This is a fixed policy, independent of the business-hours window
that decides whether a check-in is accepted at all.
"""
import logging
import re
from datetime import MINYEAR, date, timedelta
from typing import Optional, Tuple

from dateutil.relativedelta import relativedelta
from sqlalchemy import and_, case, distinct, extract, func
from sqlalchemy.orm import Session

from app.core.clock import Clock, as_utc, utcnow
from app.core.errors import NotFoundError, ValidationError
from app.core.pagination import PageRequest
from app.models.attendance import AttendanceRecord
from app.models.employee import Employee
from app.services.employees import EmployeeService

logger = logging.getLogger(__name__)

LATE_THRESHOLD_MINUTES = 9 * 60 + 45  # 09:45 UTC
MONTH_PATTERN = re.compile(r"^\d{4}-(0[1-9]|1[0-2])$")


def month_bounds(month: str) -> Tuple[date, date]:
    """First and last calendar day of a YYYY-MM month."""
    year, m = map(int, month.split("-"))
    start = date(year, m, 1)
    end = start + relativedelta(months=1) - timedelta(days=1)
    return start, end


class ReportService:

    def __init__(self, db: Session, employees: EmployeeService, clock: Clock = utcnow):
        self.db = db
        self.employees = employees
        self.clock = clock

    def validate_month(self, month: Optional[str]) -> str:
        if month is None or not month.strip():
            raise ValidationError("Month is required", status_code=422)
        month = month.strip()
        if not MONTH_PATTERN.match(month) or int(month[:4]) < MINYEAR:
            raise ValidationError("Month must be in YYYY-MM format (e.g., 2025-01)", status_code=422)

        year, m = map(int, month.split("-"))
        now = as_utc(self.clock())
        if (year, m) > (now.year, now.month):
            raise ValidationError("Month cannot be in the future", status_code=422)
        return month

    def get_monthly_report(
        self,
        month: Optional[str],
        page: PageRequest,
        employee_id: Optional[int] = None,
        sort_by: str = "name",
        sort_order: str = "asc",
    ) -> dict:
        month = self.validate_month(month)

        if employee_id is not None and not self.employees.exists(employee_id):
            raise NotFoundError("Employee not found")

        start, end = month_bounds(month)
        total_working_days = self.get_working_days(start, end)
        rows, total = self._employee_summaries(start, end, page, employee_id, sort_by, sort_order)

        logger.info(
            "Attendance report %s: %d employees, %d working days", month, total, total_working_days
        )
        return {
            "month": month,
            "total_working_days": total_working_days,
            "summary": rows,
            "total_employees": total,
        }

    def get_working_days(self, start: date, end: date) -> int:
        """Distinct dates in [start, end] with at least one attendance record, any employee."""
        count = (
            self.db.query(func.count(distinct(AttendanceRecord.date)))
            .filter(AttendanceRecord.date.between(start, end))
            .scalar()
        )
        return int(count or 0)

    def _employee_summaries(self, start, end, page, employee_id, sort_by, sort_order):
        minutes_of_day = (
            extract("hour", AttendanceRecord.check_in_time) * 60
            + extract("minute", AttendanceRecord.check_in_time)
        )
        days_present = func.count(AttendanceRecord.id).label("days_present")
        times_late = func.coalesce(
            func.sum(case((minutes_of_day > LATE_THRESHOLD_MINUTES, 1), else_=0)), 0
        ).label("times_late")

        query = (
            self.db.query(
                Employee.id.label("employee_id"),
                Employee.name.label("name"),
                days_present,
                times_late,
            )
            .outerjoin(
                AttendanceRecord,
                and_(
                    AttendanceRecord.employee_id == Employee.id,
                    AttendanceRecord.date.between(start, end),
                ),
            )
            .group_by(Employee.id, Employee.name)
        )
        if employee_id is not None:
            query = query.filter(Employee.id == employee_id)

        total = query.count()

        sort_columns = {
            "name": Employee.name,
            "employee_id": Employee.id,
            "days_present": days_present,
            "times_late": times_late,
        }
        column = sort_columns.get(sort_by, Employee.name)
        ordering = column.asc() if sort_order == "asc" else column.desc()
        rows = (
            query.order_by(ordering, Employee.id.asc())
            .offset(page.offset)
            .limit(page.limit)
            .all()
        )
        summary = [
            {
                "employee_id": r.employee_id,
                "name": r.name,
                "days_present": int(r.days_present or 0),
                "times_late": int(r.times_late or 0),
            }
            for r in rows
        ]
        return summary, total
