"""
Authentication module
"""
from stockflow.auth.security import verify_password, get_password_hash, create_access_token
from stockflow.auth.dependencies import get_current_user, require_admin, require_view
from stockflow.auth.schemas import Token, UserCreate, UserResponse

__all__ = [
    "verify_password",
    "get_password_hash",
    "create_access_token",
    "get_current_user",
    "require_admin",
    "require_view",
    "Token",
    "UserCreate",
    "UserResponse",
]
