"""
Account schemas.
"""
import uuid
from typing import Optional, List, Literal
from datetime import datetime
from pydantic import BaseModel, Field, field_validator, model_validator

from relateai.core.validation import CsvList, QueryInt, check_url, partial, refinement_error
from relateai.schemas.common import PageQuery

AccountStatus = Literal[
    "Researching", "Contacted", "Engaged", "Qualifying",
    "Negotiating", "Closed Won", "Closed Lost",
]
AccountSortKey = Literal["name", "created_at", "updated_at", "icp_score"]


class AccountCreate(BaseModel):
    """Create a new account."""
    name: str = Field(min_length=1, max_length=200)
    website: Optional[str] = None
    industry: Optional[str] = None
    description: Optional[str] = None
    size: Optional[str] = None
    location: Optional[str] = None
    revenue: Optional[str] = None
    phone: Optional[str] = None
    notes: Optional[str] = None
    tags: Optional[List[str]] = None
    technologies: Optional[List[str]] = None
    icp_score: Optional[int] = Field(default=None, ge=0, le=100)
    status: Optional[AccountStatus] = None

    @field_validator("website")
    @classmethod
    def _check_website(cls, value: Optional[str]) -> Optional[str]:
        return check_url(value)

    class Config:
        json_schema_extra = {
            "example": {
                "name": "Acme Corp",
                "website": "https://acme.com",
                "industry": "Software",
                "size": "1000+ employees",
                "tags": ["enterprise", "saas"]
            }
        }


AccountUpdate = partial(AccountCreate, "AccountUpdate")


class ResearchRequest(BaseModel):
    """Research a company by website or name."""
    url: Optional[str] = None
    name: Optional[str] = None

    @field_validator("url")
    @classmethod
    def _check_url(cls, value: Optional[str]) -> Optional[str]:
        return check_url(value)

    @model_validator(mode="after")
    def _require_url_or_name(self):
        if not self.url and not self.name:
            raise refinement_error("research", "Either URL or name is required")
        return self


class AccountQuery(PageQuery):
    """Account list filters."""
    search: Optional[str] = None
    industry: Optional[str] = None
    size: Optional[str] = None
    tags: Optional[CsvList] = None
    icp_score_min: Optional[QueryInt] = None
    icp_score_max: Optional[QueryInt] = None
    sort_by: Optional[AccountSortKey] = None


class AccountRead(BaseModel):
    """Account response."""
    id: uuid.UUID
    owner_id: uuid.UUID
    name: str
    website: Optional[str]
    industry: Optional[str]
    description: Optional[str]
    size: Optional[str]
    location: Optional[str]
    revenue: Optional[str]
    phone: Optional[str]
    notes: Optional[str]
    technologies: List[str]
    tags: List[str]
    icp_score: int
    status: str
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
