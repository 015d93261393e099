"""
Email API routes - tracking callbacks and test sends.

The pixel and redirect routes are public: they are hit by mail clients
rendering a tracked email. The reply webhook is authenticated by a shared
secret in the ``x-webhook-secret`` header.
"""
import secrets
from typing import Optional

from fastapi import APIRouter, Depends, Header
from fastapi.responses import RedirectResponse, Response
from sqlmodel.ext.asyncio.session import AsyncSession

from relateai.database import get_session
from relateai.config import settings
from relateai.core.exceptions import ExternalServiceError, ForbiddenError
from relateai.core.rate_limit import email_limiter
from relateai.core.validation import validate
from relateai.services.email_service import EmailService, generate_template
from relateai.services.tracking_service import TRANSPARENT_GIF, TrackingService
from relateai.schemas.email import RedirectQuery, ReplyWebhook, SendTestEmail
from relateai.schemas.message import MessageRead
from relateai.api.deps import get_current_user, get_email
from relateai.models.user import User

router = APIRouter(prefix="/api/email", tags=["email"])

NO_CACHE_HEADERS = {
    "Cache-Control": "no-cache, no-store, must-revalidate",
    "Pragma": "no-cache",
    "Expires": "0",
}


@router.get("/pixel/{tracking_id}")
async def track_open(tracking_id: str, session: AsyncSession = Depends(get_session)):
    """Record an open and answer with a 1x1 transparent GIF."""
    await TrackingService(session).record_open(tracking_id)
    return Response(content=TRANSPARENT_GIF, media_type="image/gif", headers=NO_CACHE_HEADERS)


@router.get("/redirect/{tracking_id}")
async def track_click(
    tracking_id: str,
    query: RedirectQuery = Depends(validate(RedirectQuery, "query")),
    session: AsyncSession = Depends(get_session)
):
    """Record a click, then send the reader on to the original link."""
    await TrackingService(session).record_click(tracking_id, query.url)
    return RedirectResponse(query.url, status_code=302)


@router.post("/webhook/reply/{tracking_id}")
async def handle_reply(
    tracking_id: str,
    data: ReplyWebhook = Depends(validate(ReplyWebhook)),
    webhook_secret: Optional[str] = Header(default=None, alias="x-webhook-secret"),
    session: AsyncSession = Depends(get_session)
):
    """Store an inbound reply under the message it answers."""
    if not webhook_secret or not secrets.compare_digest(webhook_secret, settings.EMAIL_WEBHOOK_SECRET):
        raise ForbiddenError("Invalid webhook secret")

    reply = await TrackingService(session).record_reply(tracking_id, data)
    return {"success": True, "message": MessageRead.model_validate(reply)}


@router.post("/test")
async def send_test_email(
    data: SendTestEmail = Depends(validate(SendTestEmail)),
    current_user: User = Depends(get_current_user),
    email_service: EmailService = Depends(get_email)
):
    """Send a one-off email to check the mail setup."""
    await email_limiter.hit(str(current_user.id))

    layout = generate_template("basic", {
        "subject": data.subject,
        "content": data.content,
        "signature": "RelateAI Test Email",
    })
    if not await email_service.send_email(data.to, data.subject, layout["text"], layout["html"]):
        raise ExternalServiceError("Email service")

    return {"success": True, "message": "Test email sent successfully"}
