"""
Database initialization script
Run this to create tables and seed initial data
"""
import random
import sys
from datetime import datetime, time, timedelta, timezone
from decimal import Decimal
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent))

from app.core.clock import utcnow
from app.core.config import settings
from app.core.database import Database
from app.core.security import get_password_hash
from app.models.attendance import AttendanceRecord
from app.models.employee import Employee
from app.models.user import HRUser
from app.services.employees import calculate_age
from dateutil.relativedelta import relativedelta


SAMPLE_EMPLOYEES = [
    ("John Doe", "Software Engineer", 28, 3, Decimal("75000.00")),
    ("Jane Smith", "Product Manager", 34, 5, Decimal("92000.00")),
    ("Alice Johnson", "HR Specialist", 41, 8, Decimal("61000.00")),
    ("Bob Williams", "QA Engineer", 25, 1, Decimal("58000.00")),
    ("Carol Martinez", "Designer", 30, 2, Decimal("67000.00")),
]

# Share of seeded check-ins that land after 09:45 UTC
LATE_RATIO = 0.25


def init_db(db: Database):
    """Initialize database with tables"""
    print("Creating database tables...")
    db.create_all()
    print("✓ Tables created successfully")


def seed_data(db: Database, days: int = 30):
    """Seed the admin user, sample employees and recent weekday attendance"""
    session = db.session()
    now = utcnow()
    today = now.date()

    try:
        print("\nSeeding initial data...")

        admin = session.query(HRUser).filter(HRUser.email == "admin@hrmanagement.com").first()
        if not admin:
            session.add(HRUser(
                email="admin@hrmanagement.com",
                password_hash=get_password_hash("password123"),
                name="System Administrator",
            ))
            print("✓ Admin user created (admin@hrmanagement.com / password123)")

        employees = []
        for name, designation, age, years_employed, salary in SAMPLE_EMPLOYEES:
            employee = session.query(Employee).filter(Employee.name == name).first()
            if not employee:
                date_of_birth = today - relativedelta(years=age, months=2)
                employee = Employee(
                    name=name,
                    age=calculate_age(date_of_birth, today),
                    designation=designation,
                    hiring_date=today - relativedelta(years=years_employed),
                    date_of_birth=date_of_birth,
                    salary=salary,
                )
                session.add(employee)
                print(f"✓ Created employee {name}")
            employees.append(employee)
        session.flush()

        created = 0
        for offset in range(1, days + 1):
            day = today - timedelta(days=offset)
            if day.weekday() >= 5:
                continue
            for employee in employees:
                exists = session.query(AttendanceRecord).filter(
                    AttendanceRecord.employee_id == employee.id,
                    AttendanceRecord.date == day,
                ).first()
                if exists:
                    continue
                if random.random() < LATE_RATIO:
                    check_in = time(9, random.randint(46, 59))
                else:
                    check_in = time(random.randint(7, 8), random.randint(0, 59))
                session.add(AttendanceRecord(
                    employee_id=employee.id,
                    date=day,
                    check_in_time=datetime.combine(day, check_in, tzinfo=timezone.utc),
                ))
                created += 1

        session.commit()
        print(f"✓ Created {created} attendance records")
        print("\n✓ Database seeded successfully!")

    except Exception as e:
        print(f"\n✗ Error seeding data: {e}")
        session.rollback()
        raise
    finally:
        session.close()


if __name__ == "__main__":
    print("=" * 60)
    print(f"{settings.APP_NAME} - Database Initialization")
    print("=" * 60)

    database = Database.from_settings(settings)
    init_db(database)
    seed_data(database)
    database.dispose()

    print("\n" + "=" * 60)
    print("Initialization complete!")
    print("=" * 60)
    print("\nYou can now access:")
    print(f"  - API: http://localhost:8000{settings.API_V1_PREFIX}")
    print("  - API Docs: http://localhost:8000/docs")
    print("\nDefault credentials:")
    print("  HR admin - email: admin@hrmanagement.com, password: password123")
    print("=" * 60)
