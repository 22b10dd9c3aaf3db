import os
from datetime import date, datetime, timezone
from decimal import Decimal

# Cheap hashes for tests; must be set before app settings load
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("ENVIRONMENT", "test")

import pytest
from fastapi.testclient import TestClient

from app.api.deps import get_clock
from app.core.config import settings
from app.core.database import Database
from app.main import create_app
from app.models.attendance import AttendanceRecord
from app.models.employee import Employee
from app.services.auth import AuthService

NOW = datetime(2026, 2, 8, 12, 0, tzinfo=timezone.utc)

HR_EMAIL = "hr@acme-corp.com"
HR_PASSWORD = "secret123"


def fixed_clock():
    return NOW


@pytest.fixture
def database():
    db = Database("sqlite://")
    yield db
    db.dispose()


@pytest.fixture
def upload_dir(tmp_path, monkeypatch):
    path = tmp_path / "uploads"
    monkeypatch.setattr(settings, "UPLOAD_DIR", str(path))
    return path


@pytest.fixture
def api_app(database, upload_dir, monkeypatch):
    monkeypatch.setattr(settings, "SEED_DEFAULT_ADMIN", False)
    application = create_app(database=database)
    application.dependency_overrides[get_clock] = lambda: fixed_clock
    return application


@pytest.fixture
def client(api_app):
    with TestClient(api_app) as c:
        yield c


@pytest.fixture
def db_session(client, database):
    session = database.session()
    yield session
    session.close()


@pytest.fixture
def hr_user(db_session):
    return AuthService(db_session).create_user(HR_EMAIL, HR_PASSWORD, "HR Admin")


@pytest.fixture
def auth_headers(client, hr_user):
    resp = client.post("/api/v1/auth/login", json={"email": HR_EMAIL, "password": HR_PASSWORD})
    assert resp.status_code == 200
    return {"Authorization": f"Bearer {resp.json()['data']['accessToken']}"}


@pytest.fixture
def make_employee(db_session):
    def _make(name="John Doe", date_of_birth=date(1990, 5, 20), hiring_date=date(2020, 1, 15)):
        employee = Employee(
            name=name,
            age=35,
            designation="Engineer",
            hiring_date=hiring_date,
            date_of_birth=date_of_birth,
            salary=Decimal("50000.00"),
            photo_path=None,
        )
        db_session.add(employee)
        db_session.commit()
        db_session.refresh(employee)
        return employee.id

    return _make


@pytest.fixture
def make_attendance(db_session):
    def _make(employee_id, day, hour=9, minute=0):
        record = AttendanceRecord(
            employee_id=employee_id,
            date=day,
            check_in_time=datetime(day.year, day.month, day.day, hour, minute, tzinfo=timezone.utc),
        )
        db_session.add(record)
        db_session.commit()
        db_session.refresh(record)
        return record.id

    return _make
