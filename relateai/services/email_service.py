"""
Email service - handles sending emails.
Currently supports: Mock (development) and SMTP (production ready).
"""
import logging
import smtplib
from collections import deque
from email.mime.text import MIMEText
from email.mime.multipart import MIMEMultipart
from typing import Optional
from abc import ABC, abstractmethod

from fastapi.concurrency import run_in_threadpool

from relateai.config import settings

logger = logging.getLogger(__name__)


# =============================================================================
# LAYOUTS
# =============================================================================

def generate_template(template_name: str, data: dict) -> dict:
    """
    Wrap content in one of the email layouts.

    Returns {"html": str, "text": str}.
    """
    content = data.get("content") or ""
    signature = data.get("signature") or settings.EMAIL_SIGNATURE

    if template_name == "basic":
        html = f"""
          <div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
            <h1 style="color: #333;">{data.get("subject") or "Message from RelateAI"}</h1>
            <div style="margin: 20px 0; line-height: 1.5;">
              {content}
            </div>
            <div style="margin-top: 30px; padding-top: 15px; border-top: 1px solid #eee; font-size: 12px; color: #666;">
              {signature}
            </div>
          </div>
        """
        text = content
    elif template_name == "follow_up":
        html = f"""
          <div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
            <h1 style="color: #333;">Following up</h1>
            <p>I wanted to follow up on our previous conversation.</p>
            <div style="margin: 20px 0; line-height: 1.5;">
              {content}
            </div>
            <div style="margin-top: 30px; padding-top: 15px; border-top: 1px solid #eee; font-size: 12px; color: #666;">
              {signature}
            </div>
          </div>
        """
        text = f"Following up\n\nI wanted to follow up on our previous conversation.\n\n{content}"
    else:
        html = f"<div>{content}</div>"
        text = content

    return {"html": html, "text": text}


# =============================================================================
# SENDERS
# =============================================================================

class EmailService(ABC):
    """Base email service interface."""

    @abstractmethod
    async def send_email(
        self,
        to: str,
        subject: str,
        body: str,
        html: Optional[str] = None
    ) -> bool:
        """Send an email. Returns False when delivery failed."""
        pass


class MockEmailService(EmailService):
    """
    Mock email service for development.
    Logs emails instead of sending.
    """

    def __init__(self, max_kept: int = 100):
        # Most recent sent emails, for testing/debugging
        self.sent_emails: deque = deque(maxlen=max_kept)

    async def send_email(
        self,
        to: str,
        subject: str,
        body: str,
        html: Optional[str] = None
    ) -> bool:
        """Mock send - logs and stores for debugging."""
        self.sent_emails.append({"to": to, "subject": subject, "body": body, "html": html})
        logger.info("Mock email to %s: %s", to, subject)
        return True

    def get_last_email(self) -> Optional[dict]:
        """Get the last sent email (for testing)."""
        return self.sent_emails[-1] if self.sent_emails else None


class SMTPEmailService(EmailService):
    """
    SMTP email service for production.
    Configured from SMTP_HOST, SMTP_PORT, SMTP_USER, SMTP_PASSWORD, EMAIL_FROM.
    """

    def __init__(self):
        self.host = settings.SMTP_HOST
        self.port = settings.SMTP_PORT
        self.user = settings.SMTP_USER
        self.password = settings.SMTP_PASSWORD
        self.from_email = settings.EMAIL_FROM
        self.timeout = settings.SMTP_TIMEOUT

    async def send_email(
        self,
        to: str,
        subject: str,
        body: str,
        html: Optional[str] = None
    ) -> bool:
        """Send email via SMTP, off the event loop."""
        msg = MIMEMultipart('alternative')
        msg['Subject'] = subject
        msg['From'] = self.from_email
        msg['To'] = to

        msg.attach(MIMEText(body, 'plain'))
        if html:
            msg.attach(MIMEText(html, 'html'))

        try:
            await run_in_threadpool(self._deliver, to, msg.as_string())
            logger.info("Email sent to %s: %s", to, subject)
            return True

        except (smtplib.SMTPException, OSError) as e:
            logger.error("Failed to send email to %s: %s", to, e)
            return False

    def _deliver(self, to: str, raw_message: str) -> None:
        with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as server:
            server.starttls()
            if self.user and self.password:
                server.login(self.user, self.password)
            server.sendmail(self.from_email, to, raw_message)


# =============================================================================
# EMAIL SERVICE SINGLETON
# =============================================================================

_email_service: Optional[EmailService] = None


def get_email_service() -> EmailService:
    """Get the email service instance."""
    global _email_service

    if _email_service is None:
        if settings.SMTP_HOST:
            logger.info("Using SMTP email service")
            _email_service = SMTPEmailService()
        else:
            logger.info("Using mock email service (emails are logged)")
            _email_service = MockEmailService()

    return _email_service

