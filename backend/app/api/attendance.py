"""Attendance API: record check-ins, correct them, list them.

POST /attendance is an upsert on (employee_id, date): a second check-in for the
same employee and day replaces check_in_time on the existing record.
"""
import logging
from datetime import date
from typing import Literal, Optional

from fastapi import APIRouter, Depends, Path, Query, status

from app.api.deps import get_attendance_service
from app.core import responses
from app.core.config import settings
from app.core.pagination import page_request
from app.core.security import get_current_user
from app.models.user import HRUser
from app.schemas.attendance import AttendanceCreate, AttendanceUpdate
from app.services.attendance import AttendanceService, attendance_to_dict

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/attendance", tags=["attendance"])


@router.post("", status_code=status.HTTP_201_CREATED)
def create_or_update_attendance(
    body: AttendanceCreate,
    current_user: HRUser = Depends(get_current_user),
    service: AttendanceService = Depends(get_attendance_service),
):
    """Record a check-in; updates the existing record for that employee and day."""
    record = service.record_check_in(body.employee_id, body.date, body.check_in_time)
    return responses.success(
        "Attendance recorded successfully",
        attendance_to_dict(record),
        status_code=status.HTTP_201_CREATED,
    )


@router.get("")
def list_attendance(
    employee_id: Optional[int] = Query(None, gt=0),
    day: Optional[date] = Query(None, alias="date", description="Exact date, YYYY-MM-DD"),
    start_date: Optional[date] = Query(None, description="Range start; requires end_date"),
    end_date: Optional[date] = Query(None, description="Range end; requires start_date"),
    page: int = Query(1, ge=1),
    limit: int = Query(settings.DEFAULT_PAGE_SIZE),
    sortBy: Literal["date", "check_in_time", "employee_id"] = Query("date"),
    sortOrder: Literal["asc", "desc"] = Query("desc"),
    current_user: HRUser = Depends(get_current_user),
    service: AttendanceService = Depends(get_attendance_service),
):
    """List attendance with optional employee, date or date-range filters."""
    paging = page_request(page, limit, settings.DEFAULT_PAGE_SIZE, settings.MAX_PAGE_SIZE)
    records, total = service.list_attendance(
        paging,
        employee_id=employee_id,
        day=day,
        start_date=start_date,
        end_date=end_date,
        sort_by=sortBy,
        sort_order=sortOrder,
    )
    return responses.success(
        "Attendance records retrieved successfully",
        [attendance_to_dict(r) for r in records],
        meta=responses.pagination_meta(paging.page, paging.limit, total),
    )


@router.put("/{attendance_id}")
def update_attendance(
    body: AttendanceUpdate,
    attendance_id: int = Path(..., gt=0),
    current_user: HRUser = Depends(get_current_user),
    service: AttendanceService = Depends(get_attendance_service),
):
    """Correct the check-in time of an existing record. employee_id and date never change."""
    record = service.update_check_in(attendance_id, body.check_in_time)
    logger.info("HR user %s corrected attendance %s", current_user.id, record.id)
    return responses.success("Attendance updated successfully", attendance_to_dict(record))
