"""
LinkedIn integration models.
OAuth credentials per user, contact connections, and messages.
"""
import uuid
from datetime import datetime
from typing import Optional

from sqlmodel import SQLModel, Field
from sqlalchemy import Column, UniqueConstraint

from relateai.models.base import JSONType, utcnow


class LinkedInIntegration(SQLModel, table=True):
    """
    Stores a user's LinkedIn OAuth credentials and cached profile.
    """
    __tablename__ = "linkedin_integration"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    user_id: uuid.UUID = Field(foreign_key="user.id", unique=True, index=True)

    # OAuth tokens
    access_token: str
    refresh_token: Optional[str] = None
    expires_at: datetime

    # LinkedIn profile info (cached)
    linkedin_id: str
    profile_url: str
    first_name: str
    last_name: str
    headline: Optional[str] = None
    industry: Optional[str] = None
    email: Optional[str] = None
    picture_url: Optional[str] = None

    last_sync_at: Optional[datetime] = None

    # Timestamps
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    def is_token_expired(self) -> bool:
        return self.expires_at <= utcnow()


class LinkedInConnection(SQLModel, table=True):
    """
    Links a Contact to a LinkedIn profile.
    """
    __tablename__ = "linkedin_connection"
    __table_args__ = (UniqueConstraint("user_id", "contact_id"),)

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    user_id: uuid.UUID = Field(foreign_key="user.id", index=True)
    contact_id: uuid.UUID = Field(foreign_key="contact.id", index=True)

    # Profile
    linkedin_id: str = Field(index=True)
    profile_url: str
    first_name: str
    last_name: str
    headline: Optional[str] = None
    industry: Optional[str] = None
    picture_url: Optional[str] = None
    position: Optional[str] = None
    company: Optional[str] = None
    connection_degree: int = Field(default=1)  # 1, 2, 3

    # Interaction tracking
    connection_date: Optional[datetime] = None
    last_interaction_date: Optional[datetime] = None
    last_message_sent: Optional[datetime] = None
    last_message_received: Optional[datetime] = None
    notes: Optional[str] = None

    # Timestamps
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


class LinkedInMessage(SQLModel, table=True):
    """
    Message sent to or received from a LinkedIn connection.
    """
    __tablename__ = "linkedin_message"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    user_id: uuid.UUID = Field(foreign_key="user.id", index=True)
    contact_id: uuid.UUID = Field(foreign_key="contact.id", index=True)
    connection_id: uuid.UUID = Field(foreign_key="linkedin_connection.id", index=True)

    message_id: str = Field(index=True)  # Provider id
    content: str
    direction: str  # inbound, outbound
    status: str  # sent, delivered, read, failed

    sent_at: datetime
    delivered_at: Optional[datetime] = None
    read_at: Optional[datetime] = None
    failed_reason: Optional[str] = None
    meta_data: dict = Field(default_factory=dict, sa_column=Column(JSONType))

    # Timestamps
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)
