"""
LinkedIn integration schemas.
"""
import uuid
from typing import Optional
from datetime import datetime
from pydantic import BaseModel, Field

from relateai.schemas.common import PageQuery


class OAuthCallbackQuery(BaseModel):
    code: str = Field(min_length=1)
    state: str = Field(min_length=1)


class LinkProfileRequest(BaseModel):
    """Link a contact to a LinkedIn profile."""
    linkedin_id: str = Field(min_length=1)
    profile_url: str = Field(min_length=1)
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    headline: Optional[str] = None
    industry: Optional[str] = None
    position: Optional[str] = None
    company: Optional[str] = None


class LinkedInMessageCreate(BaseModel):
    content: str = Field(min_length=1)


class ProfileSearchQuery(BaseModel):
    query: str = Field(min_length=1)


class LinkedInPageQuery(PageQuery):
    pass


class IntegrationRead(BaseModel):
    id: uuid.UUID
    linkedin_id: str
    profile_url: str
    first_name: str
    last_name: str
    headline: Optional[str]
    industry: Optional[str]
    email: Optional[str]
    picture_url: Optional[str]
    expires_at: datetime
    last_sync_at: Optional[datetime]

    class Config:
        from_attributes = True


class ConnectionRead(BaseModel):
    id: uuid.UUID
    contact_id: uuid.UUID
    linkedin_id: str
    profile_url: str
    first_name: str
    last_name: str
    headline: Optional[str]
    industry: Optional[str]
    position: Optional[str]
    company: Optional[str]
    connection_degree: int
    connection_date: Optional[datetime]
    last_interaction_date: Optional[datetime]
    last_message_sent: Optional[datetime]
    last_message_received: Optional[datetime]
    created_at: datetime

    class Config:
        from_attributes = True


class LinkedInMessageRead(BaseModel):
    id: uuid.UUID
    contact_id: uuid.UUID
    connection_id: uuid.UUID
    message_id: str
    content: str
    direction: str
    status: str
    sent_at: datetime

    class Config:
        from_attributes = True
