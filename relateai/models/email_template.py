"""
Email template model.
"""
import uuid
from datetime import datetime
from typing import Optional, List

from sqlmodel import SQLModel, Field
from sqlalchemy import Column

from relateai.models.base import JSONType, utcnow

TEMPLATE_CATEGORIES = ("introduction", "follow-up", "meeting", "proposal", "custom")


class EmailTemplate(SQLModel, table=True):
    """
    Reusable email with {{variable}} placeholders.
    html and plain_text are regenerated whenever subject or content change.
    """
    __tablename__ = "email_template"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    user_id: uuid.UUID = Field(foreign_key="user.id", index=True)

    name: str = Field(index=True)
    description: Optional[str] = None
    subject: str
    content: str
    category: str = Field(default="custom", index=True)

    # Generated
    html: str
    plain_text: str
    variables: List[str] = Field(default_factory=list, sa_column=Column(JSONType))

    # At most one default per (user, category)
    is_default: bool = Field(default=False, index=True)
    tags: List[str] = Field(default_factory=list, sa_column=Column(JSONType))

    # Timestamps
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)
