"""
Staff roster models: employees, their shift requests and per-day schedules
"""
import enum
import uuid

from sqlalchemy import Column, Integer, String, ForeignKey
from sqlalchemy.orm import relationship

from stockflow.database.base import Base


class ShiftType(str, enum.Enum):
    MORNING = "Morning"  # 9AM - 7PM
    NOON_1 = "Noon 1"    # 1PM - 11PM
    NOON_2 = "Noon 2"    # 3PM - 1AM
    NIGHT = "Night"
    OFF = "OFF"
    AL = "AL"            # annual leave


SHIFT_VALUES = [s.value for s in ShiftType]


class Employee(Base):
    """Staff record with an optional fixed rotation shift"""
    __tablename__ = "employees"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String(100), nullable=False, index=True)
    primary_shift = Column(String(20), nullable=True)

    requests = relationship(
        "EmployeeRequest",
        back_populates="employee",
        cascade="all, delete-orphan",
        order_by="EmployeeRequest.day",
    )

    def __repr__(self):
        return f"<Employee {self.name} ({self.primary_shift})>"

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "primary_shift": self.primary_shift,
            "requests": [r.to_dict() for r in self.requests],
        }


class EmployeeRequest(Base):
    """Date-specific shift request (e.g. OFF on 2025-12-24)"""
    __tablename__ = "employee_requests"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    employee_id = Column(String(36), ForeignKey("employees.id"), nullable=False, index=True)
    day = Column(String(10), nullable=False)  # YYYY-MM-DD
    shift = Column(String(20), nullable=False)

    employee = relationship("Employee", back_populates="requests")

    def to_dict(self):
        return {"id": self.id, "day": self.day, "shift": self.shift}


class DaySchedule(Base):
    """Roster for one calendar day"""
    __tablename__ = "day_schedules"

    day = Column(String(10), primary_key=True)  # YYYY-MM-DD

    assignments = relationship(
        "ShiftAssignment",
        back_populates="schedule",
        cascade="all, delete-orphan",
        order_by="ShiftAssignment.id",
    )

    def __repr__(self):
        return f"<DaySchedule {self.day}: {len(self.assignments)} assignments>"

    def to_dict(self):
        return {
            "day": self.day,
            "assignments": [a.to_dict() for a in self.assignments],
        }


class ShiftAssignment(Base):
    """
    One employee's shift on one day.

    employee_id is matched informally; deleting an employee leaves
    past assignments in place.
    """
    __tablename__ = "shift_assignments"

    id = Column(Integer, primary_key=True, autoincrement=True)
    day = Column(String(10), ForeignKey("day_schedules.day"), nullable=False, index=True)
    employee_id = Column(String(36), nullable=False)
    employee_name = Column(String(100), nullable=False)
    shift = Column(String(20), nullable=False)

    schedule = relationship("DaySchedule", back_populates="assignments")

    def to_dict(self):
        return {
            "employee_id": self.employee_id,
            "employee_name": self.employee_name,
            "shift": self.shift,
        }
