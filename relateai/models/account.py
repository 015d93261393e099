"""
Account model - a target company.
"""
import uuid
from datetime import datetime
from typing import Optional, List

from sqlmodel import SQLModel, Field
from sqlalchemy import Column

from relateai.models.base import JSONType, utcnow

ACCOUNT_STATUSES = (
    "Researching", "Contacted", "Engaged", "Qualifying",
    "Negotiating", "Closed Won", "Closed Lost",
)


class Account(SQLModel, table=True):
    """
    Account entity - a company being researched and sold to.
    Scoped to its owning user.
    """
    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    owner_id: uuid.UUID = Field(foreign_key="user.id", index=True)

    # Company profile
    name: str = Field(index=True, max_length=200)
    website: Optional[str] = None
    industry: Optional[str] = Field(default=None, index=True)
    description: Optional[str] = None
    size: Optional[str] = None
    location: Optional[str] = None
    revenue: Optional[str] = None
    phone: Optional[str] = None
    notes: Optional[str] = None

    # Ordered string lists
    technologies: List[str] = Field(default_factory=list, sa_column=Column(JSONType))
    tags: List[str] = Field(default_factory=list, sa_column=Column(JSONType))

    # Qualification
    icp_score: int = Field(default=0, index=True)  # 0-100
    status: str = Field(default="Researching", index=True)

    # Timestamps
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)
