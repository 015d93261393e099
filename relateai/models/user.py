"""
User model.
Every business record is owned by a user.
"""
import uuid
from datetime import datetime
from typing import Optional

from sqlmodel import SQLModel, Field

from relateai.models.base import utcnow


class User(SQLModel, table=True):
    """
    User model with authentication and profile info.
    """
    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)

    # Auth
    email: str = Field(unique=True, index=True)
    password_hash: str

    # Profile
    first_name: str
    last_name: str
    company: Optional[str] = None
    role: str = Field(default="user")  # user, admin

    # Status
    is_verified: bool = Field(default=False)
    is_active: bool = Field(default=True)

    # Timestamps
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)
    last_login_at: Optional[datetime] = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()
