"""Employee directory: profile CRUD plus the existence checks attendance and reports rely on."""
import logging
from datetime import date
from decimal import Decimal
from pathlib import Path
from typing import Optional, Dict, Any

from dateutil.relativedelta import relativedelta
from fastapi import UploadFile
from sqlalchemy.orm import Session

from app.core.clock import Clock, utcnow
from app.core.errors import AppError, ErrorCode, FileUploadError, NotFoundError, ValidationError
from app.core.pagination import PageRequest
from app.models.employee import Employee
from app.schemas.employee import EmployeeCreate

logger = logging.getLogger(__name__)

MIN_AGE = 18
MAX_AGE = 70
JPEG_MIME_TYPES = ("image/jpeg", "image/jpg")

SORT_COLUMNS = {
    "name": Employee.name,
    "age": Employee.age,
    "designation": Employee.designation,
    "hiring_date": Employee.hiring_date,
    "date_of_birth": Employee.date_of_birth,
    "salary": Employee.salary,
    "created_at": Employee.created_at,
}


def calculate_age(date_of_birth: date, today: date) -> int:
    had_birthday = (today.month, today.day) >= (date_of_birth.month, date_of_birth.day)
    return today.year - date_of_birth.year - (0 if had_birthday else 1)


class EmployeeService:

    def __init__(
        self,
        db: Session,
        upload_dir: str = "./uploads",
        max_upload_size: int = 5 * 1024 * 1024,
        clock: Clock = utcnow,
    ):
        self.db = db
        self.upload_dir = Path(upload_dir)
        self.max_upload_size = max_upload_size
        self.clock = clock

    # ── Directory contract ───────────────────────────────────────────

    def find_by_id(self, employee_id: int) -> Optional[Employee]:
        return self.db.query(Employee).filter(Employee.id == employee_id).first()

    def exists(self, employee_id: int) -> bool:
        return self.db.query(Employee.id).filter(Employee.id == employee_id).first() is not None

    # ── CRUD ─────────────────────────────────────────────────────────

    def get_employee(self, employee_id: int) -> Employee:
        employee = self.find_by_id(employee_id)
        if not employee:
            raise NotFoundError("Employee not found")
        return employee

    def create_employee(self, data: EmployeeCreate, photo: Optional[UploadFile]) -> Employee:
        content = self._read_photo(photo)
        today = self.clock().date()
        age = self._validate_date_of_birth(data.date_of_birth, today)
        self._validate_hiring_date(data.hiring_date, today)
        self._validate_hiring_eligibility(data.date_of_birth, data.hiring_date)

        employee = Employee(
            name=data.name,
            age=age,
            designation=data.designation,
            hiring_date=data.hiring_date,
            date_of_birth=data.date_of_birth,
            salary=data.salary,
        )
        written: Optional[Path] = None
        try:
            self.db.add(employee)
            self.db.flush()
            written = self._save_photo(employee.id, content)
            employee.photo_path = written.name
            self.db.commit()
        except Exception:
            self.db.rollback()
            if written is not None:
                self._remove_file(written)
            raise

        self.db.refresh(employee)
        logger.info("Employee %s created (%s)", employee.id, employee.name)
        return employee

    def update_employee(self, employee_id: int, changes: Dict[str, Any], photo: Optional[UploadFile] = None) -> Employee:
        changes = {k: v for k, v in changes.items() if v is not None}
        if not changes and photo is None:
            raise ValidationError("At least one field must be provided for update", status_code=422)

        employee = self.get_employee(employee_id)
        today = self.clock().date()

        if "date_of_birth" in changes:
            changes["age"] = self._validate_date_of_birth(changes["date_of_birth"], today)
        if "hiring_date" in changes:
            self._validate_hiring_date(changes["hiring_date"], today)
        if "date_of_birth" in changes or "hiring_date" in changes:
            self._validate_hiring_eligibility(
                changes.get("date_of_birth", employee.date_of_birth),
                changes.get("hiring_date", employee.hiring_date),
            )

        content = self._read_photo(photo) if photo is not None else None
        old_photo = employee.photo_path
        try:
            for field, value in changes.items():
                setattr(employee, field, value)
            if content is not None:
                written = self._save_photo(employee.id, content)
                employee.photo_path = written.name
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        if content is not None and old_photo and old_photo != employee.photo_path:
            self._remove_file(self.upload_dir / old_photo)

        self.db.refresh(employee)
        logger.info("Employee %s updated (%s)", employee.id, ", ".join(sorted(changes)) or "photo")
        return employee

    def list_employees(
        self,
        page: PageRequest,
        name: Optional[str] = None,
        sort_by: str = "created_at",
        sort_order: str = "desc",
    ):
        query = self.db.query(Employee)
        if name and name.strip():
            query = query.filter(Employee.name.ilike(f"%{name.strip()}%"))

        total = query.count()
        column = SORT_COLUMNS.get(sort_by, Employee.created_at)
        ordering = column.asc() if sort_order == "asc" else column.desc()
        employees = (
            query.order_by(ordering, Employee.id.asc())
            .offset(page.offset)
            .limit(page.limit)
            .all()
        )
        return employees, total

    # ── Validation ───────────────────────────────────────────────────

    def _validate_date_of_birth(self, date_of_birth: date, today: date) -> int:
        age = calculate_age(date_of_birth, today)
        if age < MIN_AGE:
            raise ValidationError("Employee must be at least 18 years old")
        if age > MAX_AGE:
            raise ValidationError("Employee must be 70 years old or younger")
        return age

    def _validate_hiring_date(self, hiring_date: date, today: date):
        if hiring_date > today:
            raise ValidationError("Hiring date must be in the past or today")

    def _validate_hiring_eligibility(self, date_of_birth: date, hiring_date: date):
        if hiring_date < date_of_birth + relativedelta(years=MIN_AGE):
            raise ValidationError("Employee must be at least 18 years old at the time of hiring")

    # ── Photo storage ────────────────────────────────────────────────

    def _read_photo(self, photo: Optional[UploadFile]) -> bytes:
        if photo is None or not photo.filename:
            raise ValidationError("Photo is required")
        if (photo.content_type or "").lower() not in JPEG_MIME_TYPES:
            raise FileUploadError("Invalid file type. Only JPEG images are allowed.")
        content = photo.file.read()
        if len(content) > self.max_upload_size:
            raise FileUploadError(f"File too large. Maximum size is {self.max_upload_size} bytes.")
        return content

    def _save_photo(self, employee_id: int, content: bytes) -> Path:
        target = self.upload_dir / f"employee-{employee_id}.jpg"
        try:
            self.upload_dir.mkdir(parents=True, exist_ok=True)
            target.write_bytes(content)
        except OSError as e:
            logger.error("Failed to save photo for employee %s: %s", employee_id, e)
            raise AppError("Failed to save photo", status_code=500, error_code=ErrorCode.FILE_UPLOAD_ERROR)
        return target

    def _remove_file(self, path: Path):
        # Best effort: a stale photo on disk is not worth failing the request over
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            logger.warning("Failed to delete photo file %s: %s", path, e)


def employee_to_dict(e: Employee) -> dict:
    return {
        "id": e.id,
        "name": e.name,
        "age": e.age,
        "designation": e.designation,
        "hiring_date": e.hiring_date.isoformat(),
        "date_of_birth": e.date_of_birth.isoformat(),
        "salary": float(e.salary) if isinstance(e.salary, Decimal) else e.salary,
        "photo_path": e.photo_path,
        "created_at": e.created_at.isoformat() if e.created_at else None,
        "updated_at": e.updated_at.isoformat() if e.updated_at else None,
    }
