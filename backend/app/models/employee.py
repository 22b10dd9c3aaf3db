from sqlalchemy import Column, Integer, String, DateTime, Date, Numeric, CheckConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.core.database import Base


class Employee(Base):
    __tablename__ = "employees"
    __table_args__ = (
        CheckConstraint("age >= 18 AND age <= 70", name="ck_employees_age"),
    )

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False, index=True)

    # Stored at write time, recomputed whenever date_of_birth changes
    age = Column(Integer, nullable=False)

    designation = Column(String(255), nullable=False)
    hiring_date = Column(Date, nullable=False, index=True)
    date_of_birth = Column(Date, nullable=False)
    salary = Column(Numeric(10, 2), nullable=False)

    # File name inside UPLOAD_DIR, e.g. employee-12.jpg
    photo_path = Column(String(500), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    # Relationships
    attendance = relationship(
        "AttendanceRecord",
        back_populates="employee",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
