"""
User model for authentication and authorization
"""
import enum
import uuid

from sqlalchemy import Column, String, DateTime, Enum, JSON
from sqlalchemy.sql import func

from stockflow.database.base import Base


class UserRole(str, enum.Enum):
    """User roles for role-based access control"""
    ADMIN = "admin"  # every screen, user management, backup
    STAFF = "staff"  # screens listed in permissions


class View(str, enum.Enum):
    """Screens a staff account can be granted"""
    DASHBOARD = "dashboard"
    LIST = "list"
    REPORTS = "reports"
    TRANSACTION_ENTRY = "transaction_entry"
    TRANSACTION_REPORT = "transaction_report"
    SCHEDULE = "schedule"
    NOTES = "notes"
    USERS = "users"


DEFAULT_STAFF_PERMISSIONS = [View.DASHBOARD.value, View.LIST.value, View.SCHEDULE.value, View.NOTES.value]


class User(Base):
    """
    User table for authentication and authorization

    Roles:
    - admin: Full access, user management, backup/restore/reset
    - staff: Dashboard plus the views granted in permissions
    """
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    username = Column(String(100), unique=True, index=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    name = Column(String(100), nullable=False)
    role = Column(Enum(UserRole), default=UserRole.STAFF, nullable=False)
    permissions = Column(JSON, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    def __repr__(self):
        return f"<User {self.username} ({self.role})>"

    @property
    def is_admin(self) -> bool:
        """Check if user is admin"""
        return self.role == UserRole.ADMIN

    def can_access(self, view: str) -> bool:
        """Check if user may open the given view"""
        view = View(view).value
        if self.is_admin:
            return True
        if view == View.USERS.value:
            return False
        if view == View.DASHBOARD.value:
            return True
        return view in (self.permissions or [])
