"""Reports API: monthly attendance summary per employee."""
from typing import Literal, Optional

from fastapi import APIRouter, Depends, Query

from app.api.deps import get_report_service
from app.core import responses
from app.core.config import settings
from app.core.pagination import page_request
from app.core.security import get_current_user
from app.models.user import HRUser
from app.schemas.report import MonthlyAttendanceReport
from app.services.reports import ReportService

router = APIRouter(prefix="/reports", tags=["reports"])


@router.get("/attendance")
def attendance_report(
    month: Optional[str] = Query(None, description="YYYY-MM, e.g. 2025-01"),
    employee_id: Optional[int] = Query(None, gt=0),
    page: int = Query(1, ge=1),
    limit: int = Query(settings.DEFAULT_PAGE_SIZE),
    sortBy: Literal["name", "employee_id", "days_present", "times_late"] = Query("name"),
    sortOrder: Literal["asc", "desc"] = Query("asc"),
    current_user: HRUser = Depends(get_current_user),
    service: ReportService = Depends(get_report_service),
):
    """Days present and late arrivals (after 09:45 UTC) per employee for one month."""
    paging = page_request(page, limit, settings.DEFAULT_PAGE_SIZE, settings.MAX_PAGE_SIZE)
    report = service.get_monthly_report(
        month,
        paging,
        employee_id=employee_id,
        sort_by=sortBy,
        sort_order=sortOrder,
    )
    return responses.success(
        "Attendance report retrieved successfully",
        MonthlyAttendanceReport(**report),
        meta=responses.pagination_meta(paging.page, paging.limit, report["total_employees"]),
    )
