"""
Pydantic schemas for authentication and user management
"""
from typing import List, Optional
from pydantic import BaseModel, Field

from stockflow.models.user import UserRole, View, DEFAULT_STAFF_PERMISSIONS


class Token(BaseModel):
    """Token response schema"""
    access_token: str
    token_type: str = "bearer"


class UserCreate(BaseModel):
    """User creation schema"""
    username: str = Field(..., min_length=1, max_length=100)
    password: str = Field(..., min_length=1, max_length=72)
    name: str = Field(..., min_length=1, max_length=100)
    role: UserRole = UserRole.STAFF
    permissions: List[View] = Field(default_factory=lambda: [View(p) for p in DEFAULT_STAFF_PERMISSIONS])


class UserResponse(BaseModel):
    """User response schema (without password)"""
    id: str
    username: str
    name: str
    role: UserRole
    permissions: Optional[List[str]] = None

    class Config:
        from_attributes = True
