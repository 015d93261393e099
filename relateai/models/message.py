"""
Message model - outbound and inbound communication with a Contact.
"""
import uuid
from datetime import datetime
from typing import Optional, List

from sqlmodel import SQLModel, Field
from sqlalchemy import Column

from relateai.models.base import JSONType, utcnow

MESSAGE_CHANNELS = ("email", "linkedin", "twitter", "sms", "other")
MESSAGE_DIRECTIONS = ("outbound", "inbound")
MESSAGE_STATUSES = ("draft", "sent", "delivered", "opened", "replied", "bounced", "failed")


class Message(SQLModel, table=True):
    """
    Message entity.
    Replies point at their parent, forming a tree within a thread.
    """
    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    user_id: uuid.UUID = Field(foreign_key="user.id", index=True)
    contact_id: uuid.UUID = Field(foreign_key="contact.id", index=True)
    account_id: uuid.UUID = Field(foreign_key="account.id", index=True)

    # Content
    subject: Optional[str] = Field(default=None, max_length=200)
    content: str
    channel: str = Field(index=True)
    direction: str = Field(default="outbound", index=True)

    # Status: draft -> sent -> delivered -> opened -> replied (bounced/failed)
    status: str = Field(default="draft", index=True)
    sent_at: Optional[datetime] = Field(default=None, index=True)
    delivered_at: Optional[datetime] = None
    opened_at: Optional[datetime] = None
    replied_at: Optional[datetime] = None

    # AI generation
    ai_generated: bool = Field(default=False)
    ai_prompt: Optional[dict] = Field(default=None, sa_column=Column(JSONType))

    attachments: List[dict] = Field(default_factory=list, sa_column=Column(JSONType))

    # Threading
    thread_id: Optional[str] = Field(default=None, index=True)
    parent_id: Optional[uuid.UUID] = Field(default=None, foreign_key="message.id")

    tags: List[str] = Field(default_factory=list, sa_column=Column(JSONType))
    meta_data: dict = Field(default_factory=dict, sa_column=Column(JSONType))

    # Timestamps
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)
