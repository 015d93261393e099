"""
Contact schemas.
"""
import uuid
from typing import Optional, List, Literal
from datetime import datetime
from pydantic import BaseModel, EmailStr, Field, field_validator

from relateai.core.validation import CsvList, check_link, partial
from relateai.schemas.common import PageQuery

ContactStatus = Literal["active", "inactive", "prospect", "customer", "partner"]
ContactSortKey = Literal["first_name", "last_name", "email", "company", "created_at", "updated_at"]


class ScoreWithReasons(BaseModel):
    score: float = Field(ge=0, le=100)
    reasons: List[str] = []


class ActivityCreate(BaseModel):
    """Append an entry to a contact's activity history."""
    date: Optional[datetime] = None
    description: str = Field(min_length=1)
    source: str = Field(min_length=1)


class ContactBase(BaseModel):
    first_name: str = Field(min_length=1)
    last_name: str = Field(min_length=1)
    email: EmailStr
    company: str = Field(min_length=1)
    phone: Optional[str] = None
    title: Optional[str] = None
    linkedin_url: Optional[str] = None
    twitter_url: Optional[str] = None
    notes: Optional[str] = None
    status: Optional[ContactStatus] = None
    tags: Optional[List[str]] = None

    @field_validator("linkedin_url", "twitter_url")
    @classmethod
    def _check_links(cls, value: Optional[str]) -> Optional[str]:
        return check_link(value)


class ContactCreate(ContactBase):
    """Create a new contact under an account."""
    account_id: uuid.UUID

    class Config:
        json_schema_extra = {
            "example": {
                "first_name": "Jane",
                "last_name": "Smith",
                "email": "jane@acme.com",
                "company": "Acme Corp",
                "account_id": "7f1c2a9e-4a57-4c7e-9a7e-2f55d5d0b1a3",
                "title": "VP Sales",
                "linkedin_url": "https://linkedin.com/in/janesmith"
            }
        }


class ContactUpdate(partial(ContactBase, "ContactFieldsUpdate")):
    """Update a contact. Scores and activity history may be replaced here."""
    recent_activities: Optional[List[ActivityCreate]] = None
    persona_match: Optional[ScoreWithReasons] = None
    icp_fit: Optional[ScoreWithReasons] = None
    last_contact_date: Optional[datetime] = None


class ContactQuery(PageQuery):
    """Contact list filters."""
    account_id: Optional[uuid.UUID] = None
    status: Optional[ContactStatus] = None
    search: Optional[str] = None
    tags: Optional[CsvList] = None
    sort_by: Optional[ContactSortKey] = None


class ContactRead(BaseModel):
    """Contact response."""
    id: uuid.UUID
    user_id: uuid.UUID
    account_id: uuid.UUID
    first_name: str
    last_name: str
    email: str
    company: str
    phone: Optional[str]
    title: Optional[str]
    linkedin_url: Optional[str]
    twitter_url: Optional[str]
    notes: Optional[str]
    status: str
    tags: List[str]
    persona_match: Optional[dict]
    icp_fit: Optional[dict]
    recent_activities: List[dict]
    last_contact_date: Optional[datetime]
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
