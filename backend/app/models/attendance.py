"""Attendance model: one check-in per employee per calendar day.

(employee_id, date) is unique; a second check-in for the same day updates
check_in_time in place. check_in_time is stored in UTC and its UTC calendar
date always equals `date`.
"""
from sqlalchemy import Column, Integer, DateTime, Date, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from app.core.database import Base


class AttendanceRecord(Base):
    __tablename__ = "attendance"
    __table_args__ = (
        UniqueConstraint("employee_id", "date", name="uq_attendance_employee_date"),
    )

    id = Column(Integer, primary_key=True, index=True)
    employee_id = Column(
        Integer,
        ForeignKey("employees.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    date = Column(Date, nullable=False, index=True)
    check_in_time = Column(DateTime(timezone=True), nullable=False)

    # Relationships
    employee = relationship("Employee", back_populates="attendance")
