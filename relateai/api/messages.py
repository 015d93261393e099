"""
Messages API routes.
"""
import uuid
from fastapi import APIRouter, Depends
from sqlmodel.ext.asyncio.session import AsyncSession

from relateai.database import get_session
from relateai.core.rate_limit import email_limiter
from relateai.core.validation import validate
from relateai.services.message_service import MessageService
from relateai.services.ai_service import AIService
from relateai.services.email_service import EmailService
from relateai.schemas.common import PageQuery
from relateai.schemas.message import (
    MessageCreate, MessageUpdate, MessageQuery, MessageRead,
    MessageSend, MessageGenerate, ThreadRead
)
from relateai.api.deps import get_current_user, get_ai, get_email
from relateai.models.user import User

router = APIRouter(prefix="/api/messages", tags=["messages"])


@router.get("")
async def list_messages(
    query: MessageQuery = Depends(validate(MessageQuery, "query")),
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session)
):
    """List messages with filtering and pagination."""
    messages, pagination = await MessageService(session).list(current_user.id, query)
    return {
        "success": True,
        "messages": [MessageRead.model_validate(m) for m in messages],
        "pagination": pagination
    }


@router.post("", status_code=201)
async def create_message(
    data: MessageCreate = Depends(validate(MessageCreate)),
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session)
):
    message = await MessageService(session).create(current_user.id, data)
    return {"success": True, "message": MessageRead.model_validate(message)}


@router.post("/send")
async def send_message(
    data: MessageSend = Depends(validate(MessageSend)),
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
    email_service: EmailService = Depends(get_email)
):
    """Send a draft. Every {{variable}} must resolve against the contact."""
    await email_limiter.hit(str(current_user.id))
    message = await MessageService(session).send(current_user, data.message_id, email_service)
    return {"success": True, "message": MessageRead.model_validate(message)}


@router.post("/generate", status_code=201)
async def generate_message(
    data: MessageGenerate = Depends(validate(MessageGenerate)),
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
    ai: AIService = Depends(get_ai)
):
    """Draft a message with AI."""
    message = await MessageService(session).generate(current_user.id, data, ai)
    return {"success": True, "message": MessageRead.model_validate(message)}


@router.get("/history/{contact_id}")
async def message_history(
    contact_id: uuid.UUID,
    query: PageQuery = Depends(validate(PageQuery, "query")),
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session)
):
    """A contact's messages grouped into threads."""
    threads, pagination = await MessageService(session).history(
        current_user.id, contact_id, query.page, query.limit
    )
    return {
        "success": True,
        "threads": [ThreadRead(**thread) for thread in threads],
        "pagination": pagination
    }


@router.get("/{message_id}")
async def get_message(
    message_id: uuid.UUID,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session)
):
    message = await MessageService(session).get(current_user.id, message_id)
    return {"success": True, "message": MessageRead.model_validate(message)}


@router.put("/{message_id}")
async def update_message(
    message_id: uuid.UUID,
    data: MessageUpdate = Depends(validate(MessageUpdate)),
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session)
):
    message = await MessageService(session).update(current_user.id, message_id, data)
    return {"success": True, "message": MessageRead.model_validate(message)}


@router.delete("/{message_id}")
async def delete_message(
    message_id: uuid.UUID,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session)
):
    await MessageService(session).delete(current_user.id, message_id)
    return {"success": True, "message": "Message deleted successfully"}
