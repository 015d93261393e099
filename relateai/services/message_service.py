"""
Message service - drafts, sending, AI generation and threaded history.
"""
import uuid
import logging
from collections import OrderedDict
from typing import Tuple, List, Optional

from sqlmodel.ext.asyncio.session import AsyncSession

from relateai.core.exceptions import ExternalServiceError, raise_bad_request, raise_not_found
from relateai.core.pagination import paginate_query
from relateai.models.base import utcnow
from relateai.models.contact import Contact
from relateai.models.message import Message
from relateai.models.user import User
from relateai.repositories.account_repo import AccountRepository
from relateai.repositories.contact_repo import ContactRepository
from relateai.repositories.message_repo import MessageRepository
from relateai.schemas.message import MessageCreate, MessageGenerate, MessageQuery, MessageRead
from relateai.services.ai_service import AIService
from relateai.services.email_service import EmailService
from relateai.services.research_service import draft_message
from relateai.services.templating import UnresolvedVariablesError, contact_variables, render_strict
from relateai.services.tracking_service import add_tracking, create_tracking_id

logger = logging.getLogger(__name__)


class MessageService:
    """Service for message operations."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.message_repo = MessageRepository(session)
        self.contact_repo = ContactRepository(session)
        self.account_repo = AccountRepository(session)

    async def list(self, owner_id: uuid.UUID, query: MessageQuery) -> Tuple[List[Message], dict]:
        filters = {
            "contact_id": query.contact_id,
            "account_id": query.account_id,
            "channel": query.channel,
            "status": query.status,
            "direction": query.direction,
            "thread_id": query.thread_id,
        }
        return await self.message_repo.search(
            owner_id,
            filters=filters,
            search=query.search,
            page=query.page or 1,
            limit=query.limit or 20,
            sort_by=query.sort_by or "created_at",
            sort_order=query.sort_order or "desc",
        )

    async def get(self, owner_id: uuid.UUID, message_id: uuid.UUID) -> Message:
        message = await self.message_repo.get(message_id, owner_id)
        if not message:
            raise_not_found("Message", str(message_id))
        return message

    async def _get_contact(self, owner_id: uuid.UUID, contact_id: uuid.UUID) -> Contact:
        contact = await self.contact_repo.get(contact_id, owner_id)
        if not contact:
            raise_not_found("Contact", str(contact_id))
        return contact

    async def _check_account(self, owner_id: uuid.UUID, account_id: uuid.UUID):
        account = await self.account_repo.get(account_id, owner_id)
        if not account:
            raise_not_found("Account", str(account_id))
        return account

    async def create(self, owner_id: uuid.UUID, data: MessageCreate) -> Message:
        await self._get_contact(owner_id, data.contact_id)
        await self._check_account(owner_id, data.account_id)

        values = data.model_dump(mode="json", exclude_none=True)
        values["contact_id"] = data.contact_id
        values["account_id"] = data.account_id
        values["user_id"] = owner_id

        # Replies join their parent's thread
        if data.parent_id:
            parent = await self.get(owner_id, data.parent_id)
            values["parent_id"] = parent.id
            values["thread_id"] = data.thread_id or parent.thread_id or str(parent.id)

        if values.get("status", "draft") != "draft":
            values.setdefault("sent_at", utcnow())

        return await self.message_repo.create(values)

    async def update(self, owner_id: uuid.UUID, message_id: uuid.UUID, data) -> Message:
        message = await self.get(owner_id, message_id)
        values = self.message_repo.without_cleared(data.model_dump(mode="json", exclude_unset=True))

        for key in ("contact_id", "account_id"):
            if values.get(key):
                values[key] = getattr(data, key)
        if values.get("contact_id"):
            await self._get_contact(owner_id, values["contact_id"])
        if values.get("account_id"):
            await self._check_account(owner_id, values["account_id"])

        new_status = values.get("status")
        if new_status and new_status != message.status:
            if message.status == "draft":
                raise_bad_request("Draft messages can only be sent through the send action")
            if new_status == "draft":
                raise_bad_request("A sent message cannot return to draft")
            stamp = {"delivered": "delivered_at", "opened": "opened_at", "replied": "replied_at"}.get(new_status)
            if stamp:
                values[stamp] = utcnow()

        return await self.message_repo.update(message, values)

    async def delete(self, owner_id: uuid.UUID, message_id: uuid.UUID) -> None:
        message = await self.get(owner_id, message_id)
        await self.message_repo.delete(message)

    async def send(self, user: User, message_id: uuid.UUID, email_service: EmailService) -> Message:
        """
        Send a draft. Placeholders must all resolve against the contact.
        Email goes out through the email service; other channels are recorded as sent.
        """
        message = await self.get(user.id, message_id)
        if message.status != "draft":
            raise_bad_request(f"Message has already been sent (status: {message.status})")

        contact = await self._get_contact(user.id, message.contact_id)
        account = await self.account_repo.get(message.account_id, user.id)

        try:
            rendered = render_strict(message.subject or "", message.content, contact_variables(contact, account, user))
        except UnresolvedVariablesError as e:
            raise_bad_request(str(e))

        changes = {}
        if message.channel == "email":
            tracking_id = create_tracking_id(message.id)
            html = add_tracking(rendered.html, tracking_id)
            delivered = await email_service.send_email(contact.email, rendered.subject, rendered.text, html)
            if not delivered:
                logger.error("Email delivery failed for message %s", message.id)
                raise ExternalServiceError("Email service")
            changes["meta_data"] = {**(message.meta_data or {}), "tracking_id": tracking_id}

        now = utcnow()
        message = await self.message_repo.update(message, {
            **changes,
            "subject": rendered.subject or message.subject,
            "content": rendered.content,
            "status": "sent",
            "sent_at": now,
        })

        activity = {"date": now.isoformat(), "description": f"{message.channel} message sent: {message.subject or ''}".strip(), "source": "relateai"}
        await self.contact_repo.update(contact, {
            "recent_activities": [*(contact.recent_activities or []), activity],
            "last_contact_date": now,
        })

        logger.info("Message %s sent via %s", message.id, message.channel)
        return message

    async def generate(self, owner_id: uuid.UUID, params: MessageGenerate, ai: AIService) -> Message:
        """Draft a message with AI and store it."""
        contact = await self._get_contact(owner_id, params.contact_id)
        account = await self._check_account(owner_id, params.account_id)

        draft = await draft_message(ai, contact, account, params)
        return await self.message_repo.create({
            "user_id": owner_id,
            "contact_id": contact.id,
            "account_id": account.id,
            "subject": draft["subject"],
            "content": draft["content"],
            "channel": params.channel,
            "direction": "outbound",
            "status": "draft",
            "ai_generated": True,
            "ai_prompt": {
                "recipient_type": params.recipient_type,
                "message_type": params.message_type,
                "tone": params.tone,
                "length": params.length,
                "custom_instructions": params.custom_instructions,
            },
        })

    async def history(
        self,
        owner_id: uuid.UUID,
        contact_id: uuid.UUID,
        page: Optional[int] = None,
        limit: Optional[int] = None
    ) -> Tuple[List[dict], dict]:
        """
        A contact's messages (newest page first) grouped into threads.
        Each thread is oldest-first; threads are ordered by latest activity.
        """
        await self._get_contact(owner_id, contact_id)

        query = (
            self.message_repo.scoped(owner_id)
            .where(Message.contact_id == contact_id)
            .order_by(Message.created_at.desc())
        )
        messages, pagination = await paginate_query(self.session, query, page or 1, limit or 20)

        threads: "OrderedDict[str, List[Message]]" = OrderedDict()
        for message in messages:
            key = message.thread_id or str(message.id)
            threads.setdefault(key, []).append(message)

        result = []
        for thread_id, items in threads.items():
            items.sort(key=lambda m: m.created_at)
            result.append({
                "thread_id": thread_id,
                "subject": items[0].subject,
                "messages": [MessageRead.model_validate(m) for m in items],
                "last_updated": items[-1].created_at,
            })
        result.sort(key=lambda thread: thread["last_updated"], reverse=True)
        return result, pagination
