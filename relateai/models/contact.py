"""
Contact model - a person at an Account.
"""
import uuid
from datetime import datetime
from typing import Optional, List

from sqlmodel import SQLModel, Field
from sqlalchemy import Column

from relateai.models.base import JSONType, utcnow

CONTACT_STATUSES = ("active", "inactive", "prospect", "customer", "partner")


class Contact(SQLModel, table=True):
    """
    Contact entity. Belongs to exactly one Account.
    """
    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    user_id: uuid.UUID = Field(foreign_key="user.id", index=True)
    account_id: uuid.UUID = Field(foreign_key="account.id", index=True)

    # Identity
    first_name: str
    last_name: str
    email: str = Field(unique=True, index=True)
    company: str
    phone: Optional[str] = None
    title: Optional[str] = None

    # Social
    linkedin_url: Optional[str] = None
    twitter_url: Optional[str] = None

    notes: Optional[str] = None
    status: str = Field(default="prospect", index=True)
    tags: List[str] = Field(default_factory=list, sa_column=Column(JSONType))

    # Scores: {"score": 0-100, "reasons": [...]}
    persona_match: Optional[dict] = Field(default=None, sa_column=Column(JSONType))
    icp_fit: Optional[dict] = Field(default=None, sa_column=Column(JSONType))

    # Append-only: [{"date": iso, "description": str, "source": str}]
    recent_activities: List[dict] = Field(default_factory=list, sa_column=Column(JSONType))
    last_contact_date: Optional[datetime] = None

    # Timestamps
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()
