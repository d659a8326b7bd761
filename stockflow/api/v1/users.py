"""
User management API endpoints (Admin only)
"""
from typing import List
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import func
from sqlalchemy.orm import Session

from stockflow.database.config import get_db
from stockflow.models.user import User, UserRole
from stockflow.auth.dependencies import require_admin
from stockflow.auth.schemas import UserCreate, UserResponse
from stockflow.auth.security import get_password_hash
from stockflow.utils.logger import setup_logger

logger = setup_logger(__name__)

router = APIRouter()


@router.get("/", response_model=List[UserResponse])
def list_users(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    """List all users (Admin only)"""
    return db.query(User).order_by(User.username).all()


@router.post("/", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def create_user(
    user_data: UserCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    """Create an account (Admin only)"""
    username = user_data.username.strip()
    password = user_data.password.strip()
    name = user_data.name.strip()
    if not username or not password or not name:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="All fields are required.")

    existing = db.query(User).filter(func.lower(User.username) == username.lower()).first()
    if existing:
        logger.warning(f"Username already exists: {username}")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Username already exists.")

    new_user = User(
        username=username,
        password_hash=get_password_hash(password),
        name=name,
        role=user_data.role,
        permissions=None if user_data.role == UserRole.ADMIN else [p.value for p in user_data.permissions],
    )
    db.add(new_user)
    db.commit()
    db.refresh(new_user)

    logger.info(f"User created: {new_user.username} ({new_user.role}) by {current_user.username}")
    return new_user


@router.delete("/{user_id}")
def delete_user(
    user_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    """Delete an account (Admin only, never your own)"""
    if user_id == current_user.id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="You cannot delete your own account.")

    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")

    username = user.username
    db.delete(user)
    db.commit()
    logger.info(f"User deleted: {username} by {current_user.username}")
    return {"status": "success", "message": f"User '{username}' deleted"}
