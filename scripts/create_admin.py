"""
Admin account creation script

Usage:
    python scripts/create_admin.py [username] [password] [name]
"""
import sys
from pathlib import Path

# add the project root to the Python path
project_root = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(project_root))

from sqlalchemy import func

from stockflow.database.config import SessionLocal, init_db
from stockflow.models.user import User, UserRole
from stockflow.auth.security import get_password_hash


def create_admin(username: str = "admin", password: str = "admin1234!", name: str = "Administrator"):
    """Create an administrator account unless the username is taken"""
    init_db()
    db = SessionLocal()

    try:
        admin = db.query(User).filter(func.lower(User.username) == username.lower()).first()

        if admin:
            print("WARNING: Account already exists.")
            print(f"   Username: {admin.username}")
            print(f"   Name: {admin.name}")
            print(f"   Role: {admin.role.value}")
            return

        admin = User(
            username=username,
            password_hash=get_password_hash(password),
            name=name,
            role=UserRole.ADMIN,
            permissions=None,
        )

        db.add(admin)
        db.commit()
        db.refresh(admin)

        print("SUCCESS: Admin account created!")
        print(f"   Username: {admin.username}")
        print(f"   Name: {admin.name}")
        print("\nWARNING: Please change the password after first login!")

    except Exception as e:
        db.rollback()
        print(f"ERROR: {e}")
        raise
    finally:
        db.close()


if __name__ == "__main__":
    create_admin(*sys.argv[1:4])
