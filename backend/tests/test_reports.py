from datetime import date, timedelta

import pytest

from app.services.reports import month_bounds

URL = "/api/v1/reports/attendance"


def january_weekdays(count):
    day = date(2026, 1, 1)
    days = []
    while len(days) < count:
        if day.weekday() < 5:
            days.append(day)
        day += timedelta(days=1)
    return days


def test_month_bounds():
    assert month_bounds("2024-02") == (date(2024, 2, 1), date(2024, 2, 29))
    assert month_bounds("2025-12") == (date(2025, 12, 1), date(2025, 12, 31))


def test_employee_without_attendance_gets_zero_row(client, auth_headers, make_employee):
    employee_id = make_employee(name="Idle Ivan")

    resp = client.get(URL, params={"month": "2026-01"}, headers=auth_headers)
    assert resp.status_code == 200
    body = resp.json()
    assert body["message"] == "Attendance report retrieved successfully"
    assert body["data"]["month"] == "2026-01"
    assert body["data"]["total_working_days"] == 0
    assert body["data"]["summary"] == [
        {"employee_id": employee_id, "name": "Idle Ivan", "days_present": 0, "times_late": 0}
    ]
    assert body["meta"]["total"] == 1


def test_days_present_and_times_late(client, auth_headers, make_employee, make_attendance):
    alice = make_employee(name="Alice Adams")
    bob = make_employee(name="Bob Brown")

    days = january_weekdays(20)
    late = {days[0]: (9, 46), days[5]: (10, 30), days[10]: (13, 0)}
    for day in days:
        hour, minute = late.get(day, (9, 0))
        make_attendance(alice, day, hour=hour, minute=minute)
    # Exactly 09:45 is on time
    make_attendance(bob, days[1], hour=9, minute=45)
    # Outside the month
    make_attendance(bob, date(2026, 2, 2), hour=11)

    data = client.get(URL, params={"month": "2026-01"}, headers=auth_headers).json()["data"]
    assert data["total_working_days"] == 20
    assert data["total_employees"] == 2
    assert data["summary"] == [
        {"employee_id": alice, "name": "Alice Adams", "days_present": 20, "times_late": 3},
        {"employee_id": bob, "name": "Bob Brown", "days_present": 1, "times_late": 0},
    ]


def test_sort_and_filter(client, auth_headers, make_employee, make_attendance):
    alice = make_employee(name="Alice Adams")
    bob = make_employee(name="Bob Brown")
    make_attendance(bob, date(2026, 1, 5))

    by_presence = client.get(
        URL,
        params={"month": "2026-01", "sortBy": "days_present", "sortOrder": "desc"},
        headers=auth_headers,
    ).json()
    assert [r["employee_id"] for r in by_presence["data"]["summary"]] == [bob, alice]

    only_alice = client.get(URL, params={"month": "2026-01", "employee_id": alice}, headers=auth_headers).json()
    assert [r["employee_id"] for r in only_alice["data"]["summary"]] == [alice]
    assert only_alice["meta"]["total"] == 1
    # Working days still count every employee's check-ins
    assert only_alice["data"]["total_working_days"] == 1


def test_pagination(client, auth_headers, make_employee):
    for name in ("Anna", "Bert", "Cleo"):
        make_employee(name=name)

    body = client.get(URL, params={"month": "2026-01", "limit": 2, "page": 2}, headers=auth_headers).json()
    assert [r["name"] for r in body["data"]["summary"]] == ["Cleo"]
    assert body["meta"] == {"page": 2, "limit": 2, "total": 3, "totalPages": 2}


@pytest.mark.parametrize("month,message", [
    (None, "Month is required"),
    ("2026-1", "Month must be in YYYY-MM format (e.g., 2025-01)"),
    ("2026-13", "Month must be in YYYY-MM format (e.g., 2025-01)"),
    ("0000-01", "Month must be in YYYY-MM format (e.g., 2025-01)"),
    ("2026-03", "Month cannot be in the future"),
])
def test_month_validation(client, auth_headers, month, message):
    params = {"month": month} if month is not None else {}
    resp = client.get(URL, params=params, headers=auth_headers)
    assert resp.status_code == 422
    assert resp.json()["message"] == message


def test_current_month_is_allowed(client, auth_headers):
    resp = client.get(URL, params={"month": "2026-02"}, headers=auth_headers)
    assert resp.status_code == 200


def test_unknown_employee(client, auth_headers):
    resp = client.get(URL, params={"month": "2026-01", "employee_id": 999}, headers=auth_headers)
    assert resp.status_code == 404
    assert resp.json()["message"] == "Employee not found"
