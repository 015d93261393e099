"""
Authentication schemas.
"""
import uuid
from typing import Optional
from datetime import datetime
from pydantic import BaseModel, EmailStr, Field


class RegisterRequest(BaseModel):
    """User registration request."""
    email: EmailStr
    password: str = Field(min_length=8)
    first_name: str = Field(min_length=1)
    last_name: str = Field(min_length=1)
    company: str = Field(min_length=1)

    class Config:
        json_schema_extra = {
            "example": {
                "email": "user@company.com",
                "password": "securepassword123",
                "first_name": "Jane",
                "last_name": "Doe",
                "company": "Acme Corp"
            }
        }


class LoginRequest(BaseModel):
    """User login request."""
    email: EmailStr
    password: str = Field(min_length=1)

    class Config:
        json_schema_extra = {
            "example": {
                "email": "user@company.com",
                "password": "securepassword123"
            }
        }


class UserRead(BaseModel):
    """Public user profile."""
    id: uuid.UUID
    email: str
    first_name: str
    last_name: str
    company: Optional[str]
    role: str
    is_verified: bool
    created_at: datetime

    class Config:
        from_attributes = True
