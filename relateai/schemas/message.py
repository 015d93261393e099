"""
Message schemas.
"""
import uuid
from typing import Optional, List, Literal
from datetime import datetime
from pydantic import BaseModel, Field, HttpUrl

from relateai.core.validation import partial
from relateai.schemas.common import PageQuery

MessageChannel = Literal["email", "linkedin", "twitter", "sms", "other"]
MessageDirection = Literal["outbound", "inbound"]
MessageStatus = Literal["draft", "sent", "delivered", "opened", "replied", "bounced", "failed"]
MessageSortKey = Literal["created_at", "updated_at", "sent_at", "subject"]


class AiPrompt(BaseModel):
    """Parameters a message was generated from."""
    recipient_type: Optional[str] = None
    message_type: Optional[str] = None
    tone: Optional[str] = None
    length: Optional[str] = None
    custom_instructions: Optional[str] = None


class Attachment(BaseModel):
    name: str = Field(min_length=1)
    url: HttpUrl
    type: str
    size: float = Field(gt=0)


class MessageBase(BaseModel):
    contact_id: uuid.UUID
    account_id: uuid.UUID
    subject: str = Field(min_length=1, max_length=200)
    content: str = Field(min_length=1)
    channel: MessageChannel
    direction: MessageDirection = "outbound"
    ai_generated: bool = False
    tags: Optional[List[str]] = None
    meta_data: Optional[dict] = None


class MessageCreate(MessageBase):
    """Create a message (a draft unless stated otherwise)."""
    status: MessageStatus = "draft"
    ai_prompt: Optional[AiPrompt] = None
    attachments: Optional[List[Attachment]] = None
    thread_id: Optional[str] = None
    parent_id: Optional[uuid.UUID] = None

    class Config:
        json_schema_extra = {
            "example": {
                "contact_id": "0b6f0d64-2b1f-4f4e-8d0e-6f1b1d7f6a10",
                "account_id": "7f1c2a9e-4a57-4c7e-9a7e-2f55d5d0b1a3",
                "subject": "Quick question, {{firstName}}",
                "content": "Hi {{firstName}}, ...",
                "channel": "email"
            }
        }


class MessageUpdate(partial(MessageBase, "MessageFieldsUpdate")):
    """Update a message."""
    status: Optional[MessageStatus] = None


class MessageSend(BaseModel):
    """Send a draft message."""
    message_id: uuid.UUID


class MessageGenerate(BaseModel):
    """Generate a draft message with AI."""
    contact_id: uuid.UUID
    account_id: uuid.UUID
    recipient_type: str = Field(min_length=1)
    message_type: str = Field(min_length=1)
    tone: str = Field(min_length=1)
    length: str = Field(min_length=1)
    custom_instructions: Optional[str] = None
    channel: MessageChannel = "email"


class MessageQuery(PageQuery):
    """Message list filters."""
    contact_id: Optional[uuid.UUID] = None
    account_id: Optional[uuid.UUID] = None
    channel: Optional[MessageChannel] = None
    status: Optional[MessageStatus] = None
    direction: Optional[MessageDirection] = None
    thread_id: Optional[str] = None
    search: Optional[str] = None
    sort_by: Optional[MessageSortKey] = None


class MessageRead(BaseModel):
    """Message response."""
    id: uuid.UUID
    user_id: uuid.UUID
    contact_id: uuid.UUID
    account_id: uuid.UUID
    subject: Optional[str]
    content: str
    channel: str
    direction: str
    status: str
    sent_at: Optional[datetime]
    delivered_at: Optional[datetime]
    opened_at: Optional[datetime]
    replied_at: Optional[datetime]
    ai_generated: bool
    ai_prompt: Optional[dict]
    attachments: List[dict]
    thread_id: Optional[str]
    parent_id: Optional[uuid.UUID]
    tags: List[str]
    meta_data: dict
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class ThreadRead(BaseModel):
    """Messages sharing a thread, oldest first."""
    thread_id: str
    subject: Optional[str]
    messages: List[MessageRead]
    last_updated: datetime
