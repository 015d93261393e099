"""
Email tracking - signed tracking ids, open pixel, link redirects and replies.

Every email a message sends carries a tracking id: a signed token naming the
message. The pixel and redirect endpoints use it to record opens and clicks,
and the reply webhook uses it to thread inbound replies under the original.
"""
import base64
import logging
import re
import uuid
from typing import Optional
from urllib.parse import quote

from sqlmodel.ext.asyncio.session import AsyncSession

from relateai.config import settings
from relateai.core.exceptions import raise_bad_request, raise_not_found
from relateai.core.security import create_token, verify_token
from relateai.models.base import utcnow
from relateai.models.message import Message
from relateai.repositories.message_repo import MessageRepository
from relateai.schemas.email import ReplyWebhook

logger = logging.getLogger(__name__)

# 1x1 transparent GIF
TRANSPARENT_GIF = base64.b64decode("R0lGODlhAQABAIAAAAAAAP///yH5BAEAAAAALAAAAAABAAEAAAIBRAA7")

_LINK_PATTERN = re.compile(r"""(<a\s+(?:[^>]*?\s+)?href=)["']([^"']*)["']""", re.IGNORECASE)

# Statuses an open or a reply may advance from
OPENABLE_STATUSES = ("sent", "delivered")
REPLYABLE_STATUSES = ("sent", "delivered", "opened")

MAX_CLICKED_LINKS = 50


def create_tracking_id(message_id: uuid.UUID) -> str:
    return create_token({"message_id": str(message_id)}, "email_tracking")


def read_tracking_id(tracking_id: str) -> Optional[uuid.UUID]:
    """The message id inside a valid tracking id, else None."""
    payload = verify_token(tracking_id, "email_tracking")
    if not payload:
        return None
    try:
        return uuid.UUID(payload.get("message_id", ""))
    except ValueError:
        return None


def add_tracking(html: str, tracking_id: str, base_url: Optional[str] = None) -> str:
    """Route http(s) links through the redirect endpoint and append the open pixel."""
    base = (base_url or settings.EMAIL_TRACKING_URL).rstrip("/")

    def wrap(match: re.Match) -> str:
        prefix, url = match.group(1), match.group(2)
        if not url.startswith(("http://", "https://")) or url.startswith(base):
            return match.group(0)
        return f'{prefix}"{base}/redirect/{tracking_id}?url={quote(url, safe="")}"'

    pixel = f'<img src="{base}/pixel/{tracking_id}" alt="" width="1" height="1" style="display:none;" />'
    return _LINK_PATTERN.sub(wrap, html) + pixel


def _opened(message: Message, now) -> dict:
    if message.status in OPENABLE_STATUSES:
        return {"status": "opened", "opened_at": now}
    return {}


class TrackingService:
    """Applies tracking events to the messages they name."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.message_repo = MessageRepository(session)

    async def _tracked_message(self, tracking_id: str) -> Optional[Message]:
        message_id = read_tracking_id(tracking_id)
        if message_id is None:
            logger.warning("Ignoring invalid tracking id")
            return None
        return await self.message_repo.get(message_id)

    async def record_open(self, tracking_id: str) -> Optional[Message]:
        message = await self._tracked_message(tracking_id)
        if message is None:
            return None

        now = utcnow()
        meta = dict(message.meta_data or {})
        meta["opens"] = meta.get("opens", 0) + 1
        meta["last_opened"] = now.isoformat()
        return await self.message_repo.update(message, {"meta_data": meta, **_opened(message, now)})

    async def record_click(self, tracking_id: str, url: str) -> Optional[Message]:
        """A click also counts as an open."""
        message = await self._tracked_message(tracking_id)
        if message is None:
            return None

        now = utcnow()
        meta = dict(message.meta_data or {})
        meta["clicks"] = meta.get("clicks", 0) + 1
        meta["last_clicked"] = now.isoformat()
        links = [*meta.get("clicked_links", []), {"url": url, "timestamp": now.isoformat()}]
        meta["clicked_links"] = links[-MAX_CLICKED_LINKS:]
        return await self.message_repo.update(message, {"meta_data": meta, **_opened(message, now)})

    async def record_reply(self, tracking_id: str, reply: ReplyWebhook) -> Message:
        """
        Mark the original as replied and store the reply as an inbound
        message in the same thread. Returns the inbound message.
        """
        message_id = read_tracking_id(tracking_id)
        if message_id is None:
            raise_bad_request("Invalid tracking ID")
        original = await self.message_repo.get(message_id)
        if original is None:
            raise_not_found("Message", str(message_id))

        now = utcnow()
        meta = dict(original.meta_data or {})
        meta["replies"] = meta.get("replies", 0) + 1
        meta["last_replied"] = now.isoformat()
        changes = {"meta_data": meta}
        if original.status in REPLYABLE_STATUSES:
            changes.update({"status": "replied", "replied_at": now})
        original = await self.message_repo.update(original, changes)

        subject = reply.subject or f"Re: {original.subject or ''}".strip()
        inbound = await self.message_repo.create({
            "user_id": original.user_id,
            "contact_id": original.contact_id,
            "account_id": original.account_id,
            "subject": subject[:200],
            "content": reply.text or reply.html or "",
            "channel": "email",
            "direction": "inbound",
            "status": "delivered",
            "delivered_at": now,
            "parent_id": original.id,
            "thread_id": original.thread_id or str(original.id),
            "meta_data": {
                "received_at": now.isoformat(),
                "from_email": reply.from_email,
                "original_recipient": reply.to,
                "headers": reply.headers,
            },
        })
        logger.info("Reply to message %s stored as %s", original.id, inbound.id)
        return inbound
