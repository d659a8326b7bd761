"""
Database models
"""
# Import all models here so create_all sees them
from stockflow.models.user import User, UserRole, View
from stockflow.models.inventory import StockItem, TransactionType, AccountStatus
from stockflow.models.staff import Employee, EmployeeRequest, DaySchedule, ShiftAssignment, ShiftType
from stockflow.models.note import Note

__all__ = [
    "User",
    "UserRole",
    "View",
    "StockItem",
    "TransactionType",
    "AccountStatus",
    "Employee",
    "EmployeeRequest",
    "DaySchedule",
    "ShiftAssignment",
    "ShiftType",
    "Note",
]
