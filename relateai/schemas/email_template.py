"""
Email template schemas.
"""
import uuid
from typing import Optional, List, Dict, Literal
from datetime import datetime
from pydantic import BaseModel, Field

from relateai.core.validation import partial
from relateai.schemas.common import PageQuery

TemplateCategory = Literal["introduction", "follow-up", "meeting", "proposal", "custom"]


class TemplateCreate(BaseModel):
    """Create an email template."""
    name: str = Field(min_length=1)
    subject: str = Field(min_length=1)
    content: str = Field(min_length=1)
    category: TemplateCategory = "custom"
    description: Optional[str] = None
    is_default: bool = False
    tags: Optional[List[str]] = None

    class Config:
        json_schema_extra = {
            "example": {
                "name": "Cold intro",
                "subject": "Hello {{firstName}}",
                "content": "Hi {{firstName}}, I noticed {{company}} is hiring...",
                "category": "introduction"
            }
        }


TemplateUpdate = partial(TemplateCreate, "TemplateUpdate")


class TemplatePreview(BaseModel):
    """Values to substitute into a template."""
    variables: Dict[str, str] = {}


class TemplateQuery(PageQuery):
    category: Optional[TemplateCategory] = None
    search: Optional[str] = None


class TemplateRead(BaseModel):
    """Email template response."""
    id: uuid.UUID
    user_id: uuid.UUID
    name: str
    description: Optional[str]
    subject: str
    content: str
    category: str
    html: str
    plain_text: str
    variables: List[str]
    is_default: bool
    tags: List[str]
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
