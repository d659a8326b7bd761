"""
First-run data: default administrator and staff roster
"""
import os
from typing import Dict

from dotenv import load_dotenv
from sqlalchemy.orm import Session

from stockflow.auth.security import get_password_hash
from stockflow.models.staff import Employee, ShiftType
from stockflow.models.user import User, UserRole
from stockflow.utils.logger import setup_logger

load_dotenv()
logger = setup_logger(__name__)

DEFAULT_STAFF_NAMES = [
    "Weng GPC 0012",
    "Ailsa GPC 0081",
    "Teong GPC 0082",
    "Brooke GPC",
    "Eunice GPC 0087",
    "Valerie GPC 0041",
    "Gemini GPC 0043",
]


def create_default_admin(db: Session) -> bool:
    """Create the administrator account when there are no users at all"""
    if db.query(User).first() is not None:
        return False

    username = os.getenv("DEFAULT_ADMIN_USERNAME", "admin")
    admin = User(
        username=username,
        password_hash=get_password_hash(os.getenv("DEFAULT_ADMIN_PASSWORD", "admin1234!")),
        name=os.getenv("DEFAULT_ADMIN_NAME", "Administrator"),
        role=UserRole.ADMIN,
        permissions=None,
    )
    db.add(admin)
    db.commit()
    logger.warning(f"Default admin created: {username} (change the password)")
    return True


def create_default_employees(db: Session) -> bool:
    """Create the default roster when the employee table is empty"""
    if db.query(Employee).first() is not None:
        return False

    for name in DEFAULT_STAFF_NAMES:
        db.add(Employee(name=name, primary_shift=ShiftType.NOON_2.value, requests=[]))
    db.commit()
    logger.info(f"Default employees created: {len(DEFAULT_STAFF_NAMES)}")
    return True


def seed_defaults(db: Session) -> Dict[str, bool]:
    return {
        "admin": create_default_admin(db),
        "employees": create_default_employees(db),
    }
