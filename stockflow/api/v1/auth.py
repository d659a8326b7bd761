"""
Authentication API endpoints
"""
from datetime import timedelta
from typing import Dict
from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy import func
from sqlalchemy.orm import Session

from stockflow.database.config import get_db
from stockflow.models.user import User
from stockflow.auth.security import verify_password, create_access_token, JWT_EXPIRE_MINUTES
from stockflow.auth.dependencies import get_current_user
from stockflow.auth.schemas import Token, UserResponse
from stockflow.utils.logger import setup_logger

logger = setup_logger(__name__)

router = APIRouter()


@router.post("/login", response_model=Token)
def login(
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: Session = Depends(get_db)
):
    """
    User login

    Usernames match case-insensitively. Returns a JWT access token.
    """
    logger.info(f"Login attempt: {form_data.username}")

    user = (
        db.query(User)
        .filter(func.lower(User.username) == form_data.username.strip().lower())
        .first()
    )

    if not user or not verify_password(form_data.password, user.password_hash):
        logger.warning(f"Login failed: {form_data.username}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid username or password.",
            headers={"WWW-Authenticate": "Bearer"},
        )

    access_token = create_access_token(
        data={"sub": user.id},
        expires_delta=timedelta(minutes=JWT_EXPIRE_MINUTES)
    )

    logger.info(f"Login success: {user.username} ({user.role})")
    return {"access_token": access_token, "token_type": "bearer"}


@router.get("/me", response_model=UserResponse)
def get_me(current_user: User = Depends(get_current_user)):
    """Get current user information"""
    return current_user


@router.post("/logout")
def logout(current_user: User = Depends(get_current_user)) -> Dict[str, str]:
    """
    User logout

    JWT tokens are stateless; the client drops the token. This endpoint only logs.
    """
    logger.info(f"Logout: {current_user.username}")
    return {"message": "Logged out"}
