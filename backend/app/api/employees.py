"""Employees API: HR-managed employee profiles with a JPEG photo (multipart forms)."""
import logging
from typing import Literal, Optional

from fastapi import APIRouter, Depends, File, Form, Path, Query, UploadFile, status
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError as SchemaValidationError

from app.api.deps import get_employee_service
from app.core import responses
from app.core.config import settings
from app.core.pagination import page_request
from app.core.security import get_current_user
from app.models.user import HRUser
from app.schemas.employee import EmployeeCreate, EmployeeUpdate
from app.services.employees import EmployeeService, employee_to_dict

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/employees", tags=["employees"])


def _parse(schema, **fields):
    try:
        return schema(**fields)
    except SchemaValidationError as e:
        raise RequestValidationError(e.errors())


@router.post("", status_code=status.HTTP_201_CREATED)
def create_employee(
    name: str = Form(...),
    designation: str = Form(...),
    hiring_date: str = Form(...),
    date_of_birth: str = Form(...),
    salary: str = Form(...),
    photo: Optional[UploadFile] = File(None),
    current_user: HRUser = Depends(get_current_user),
    service: EmployeeService = Depends(get_employee_service),
):
    data = _parse(
        EmployeeCreate,
        name=name.strip(),
        designation=designation.strip(),
        hiring_date=hiring_date,
        date_of_birth=date_of_birth,
        salary=salary,
    )
    employee = service.create_employee(data, photo)
    logger.info("HR user %s created employee %s", current_user.id, employee.id)
    return responses.success(
        "Employee created successfully",
        employee_to_dict(employee),
        status_code=status.HTTP_201_CREATED,
    )


@router.get("")
def list_employees(
    name: Optional[str] = Query(None, description="Case-insensitive name search"),
    page: int = Query(1, ge=1),
    limit: int = Query(settings.DEFAULT_PAGE_SIZE),
    sortBy: Literal[
        "name", "age", "designation", "hiring_date", "date_of_birth", "salary", "created_at"
    ] = Query("created_at"),
    sortOrder: Literal["asc", "desc"] = Query("desc"),
    current_user: HRUser = Depends(get_current_user),
    service: EmployeeService = Depends(get_employee_service),
):
    paging = page_request(page, limit, settings.DEFAULT_PAGE_SIZE, settings.MAX_PAGE_SIZE)
    employees, total = service.list_employees(paging, name=name, sort_by=sortBy, sort_order=sortOrder)
    return responses.success(
        "Employees retrieved successfully",
        [employee_to_dict(e) for e in employees],
        meta=responses.pagination_meta(paging.page, paging.limit, total),
    )


@router.get("/{employee_id}")
def get_employee(
    employee_id: int = Path(..., gt=0),
    current_user: HRUser = Depends(get_current_user),
    service: EmployeeService = Depends(get_employee_service),
):
    employee = service.get_employee(employee_id)
    return responses.success("Employee retrieved successfully", employee_to_dict(employee))


@router.put("/{employee_id}")
def update_employee(
    employee_id: int = Path(..., gt=0),
    name: Optional[str] = Form(None),
    designation: Optional[str] = Form(None),
    hiring_date: Optional[str] = Form(None),
    date_of_birth: Optional[str] = Form(None),
    salary: Optional[str] = Form(None),
    photo: Optional[UploadFile] = File(None),
    current_user: HRUser = Depends(get_current_user),
    service: EmployeeService = Depends(get_employee_service),
):
    """Partial update; only the fields sent are changed. A new photo replaces the old one."""
    changes = _parse(
        EmployeeUpdate,
        name=name.strip() if name is not None else None,
        designation=designation.strip() if designation is not None else None,
        hiring_date=hiring_date or None,
        date_of_birth=date_of_birth or None,
        salary=salary or None,
    )
    if photo is not None and not photo.filename:
        photo = None
    employee = service.update_employee(employee_id, changes.model_dump(exclude_none=True), photo)
    return responses.success("Employee updated successfully", employee_to_dict(employee))
