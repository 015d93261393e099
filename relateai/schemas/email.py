"""
Email schemas - test sends and tracking callbacks.
"""
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from relateai.core.validation import check_link


class SendTestEmail(BaseModel):
    """Send a one-off email through the configured sender."""
    to: EmailStr
    subject: str = Field(min_length=1, max_length=200)
    content: str = Field(min_length=1)

    class Config:
        json_schema_extra = {
            "example": {"to": "me@acme.com", "subject": "Hello", "content": "Checking the mail setup"}
        }


class RedirectQuery(BaseModel):
    """Target of a tracked link."""
    url: str = Field(min_length=1)

    @field_validator("url")
    @classmethod
    def _check_url(cls, value: str) -> str:
        return check_link(value)


class ReplyWebhook(BaseModel):
    """Inbound reply as posted by the mail provider."""
    model_config = ConfigDict(populate_by_name=True)

    subject: Optional[str] = None
    text: Optional[str] = None
    html: Optional[str] = None
    from_email: Optional[str] = Field(default=None, alias="from")
    to: Optional[str] = None
    headers: dict = Field(default_factory=dict)
