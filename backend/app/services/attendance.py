"""Attendance recording and querying.

Recording is an upsert keyed on (employee_id, date): the first check-in of the
day creates the row, later ones overwrite check_in_time. The unique constraint
on the table is the source of truth; losing an insert race to a concurrent
request turns into an update of the row that won.
"""
import logging
from datetime import date, datetime
from typing import List, Optional, Tuple

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.clock import as_utc, isoformat_utc
from app.core.errors import NotFoundError
from app.core.pagination import PageRequest
from app.models.attendance import AttendanceRecord
from app.models.employee import Employee
from app.services.attendance_rules import AttendanceRules
from app.services.employees import EmployeeService

logger = logging.getLogger(__name__)

SORT_COLUMNS = {
    "date": AttendanceRecord.date,
    "check_in_time": AttendanceRecord.check_in_time,
    "employee_id": AttendanceRecord.employee_id,
}


class AttendanceService:

    def __init__(self, db: Session, employees: EmployeeService, rules: AttendanceRules):
        self.db = db
        self.employees = employees
        self.rules = rules

    # ── Create or update ─────────────────────────────────────────────

    def record_check_in(self, employee_id: int, day: date, check_in_time: datetime) -> AttendanceRecord:
        if not self.employees.exists(employee_id):
            raise NotFoundError("Employee not found")

        violation = self.rules.check_new_check_in(day, check_in_time)
        if violation:
            raise violation.to_error()
        check_in_time = as_utc(check_in_time)

        existing = self._find_by_employee_and_date(employee_id, day)
        if existing:
            return self._set_check_in_time(existing, check_in_time)

        record = AttendanceRecord(employee_id=employee_id, date=day, check_in_time=check_in_time)
        try:
            self.db.add(record)
            self.db.commit()
        except IntegrityError:
            # Another request inserted (employee_id, date) first
            self.db.rollback()
            existing = self._find_by_employee_and_date(employee_id, day)
            if existing is None:
                raise
            logger.info("Concurrent check-in for employee %s on %s, updating instead", employee_id, day)
            return self._set_check_in_time(existing, check_in_time)

        self.db.refresh(record)
        logger.info("Attendance %s created for employee %s on %s", record.id, employee_id, day)
        return record

    # ── Correction ───────────────────────────────────────────────────

    def update_check_in(self, attendance_id: int, check_in_time: datetime) -> AttendanceRecord:
        record = self.db.query(AttendanceRecord).filter(AttendanceRecord.id == attendance_id).first()
        if not record:
            raise NotFoundError("Attendance record not found")

        if not self.employees.exists(record.employee_id):
            raise NotFoundError("Cannot update attendance: Employee not found")

        violation = self.rules.check_correction(record.date, check_in_time)
        if violation:
            raise violation.to_error()
        check_in_time = as_utc(check_in_time)

        return self._set_check_in_time(record, check_in_time)

    # ── Listing ──────────────────────────────────────────────────────

    def list_attendance(
        self,
        page: PageRequest,
        employee_id: Optional[int] = None,
        day: Optional[date] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        sort_by: str = "date",
        sort_order: str = "desc",
    ) -> Tuple[List[AttendanceRecord], int]:
        violation = self.rules.check_list_filters(day, start_date, end_date)
        if violation:
            raise violation.to_error()

        # Inner join: attendance of employees that no longer exist is not listed
        query = self.db.query(AttendanceRecord).join(Employee, Employee.id == AttendanceRecord.employee_id)
        if employee_id is not None:
            query = query.filter(AttendanceRecord.employee_id == employee_id)
        if day is not None:
            query = query.filter(AttendanceRecord.date == day)
        elif start_date is not None and end_date is not None:
            query = query.filter(AttendanceRecord.date.between(start_date, end_date))

        total = query.count()
        column = SORT_COLUMNS.get(sort_by, AttendanceRecord.date)
        ordering = column.asc() if sort_order == "asc" else column.desc()
        records = (
            query.order_by(ordering, AttendanceRecord.id.asc())
            .offset(page.offset)
            .limit(page.limit)
            .all()
        )
        return records, total

    # ── Internal Helpers ─────────────────────────────────────────────

    def _find_by_employee_and_date(self, employee_id: int, day: date) -> Optional[AttendanceRecord]:
        return self.db.query(AttendanceRecord).filter(
            AttendanceRecord.employee_id == employee_id,
            AttendanceRecord.date == day,
        ).first()

    def _set_check_in_time(self, record: AttendanceRecord, check_in_time: datetime) -> AttendanceRecord:
        record.check_in_time = check_in_time
        self.db.commit()
        self.db.refresh(record)
        logger.info("Attendance %s check-in set to %s", record.id, isoformat_utc(check_in_time))
        return record


def attendance_to_dict(record: AttendanceRecord) -> dict:
    return {
        "id": record.id,
        "employee_id": record.employee_id,
        "date": record.date.isoformat(),
        "check_in_time": isoformat_utc(record.check_in_time),
    }
