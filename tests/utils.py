"""
Test doubles and data helpers shared by the API tests.
"""
import uuid
from typing import Dict, Optional

from httpx import AsyncClient

from relateai.services.ai_service import AIServiceError
from relateai.services.email_service import MockEmailService


class FakeAI:
    """
    Stands in for AIService. Replies are matched on a prompt substring;
    with ``fail=True`` (or no matching reply) every call raises AIServiceError.
    """

    def __init__(self, replies: Optional[Dict[str, dict]] = None, fail: bool = False):
        self.replies = replies or {}
        self.fail = fail
        self.prompts = []

    def generate_json(self, prompt: str) -> dict:
        self.prompts.append(prompt)
        if self.fail:
            raise AIServiceError("provider unavailable")
        for key, reply in self.replies.items():
            if key in prompt:
                return reply
        raise AIServiceError("no reply configured")


class FailingEmailService(MockEmailService):
    async def send_email(self, to, subject, body, html=None) -> bool:
        return False


async def register(client: AsyncClient, email: Optional[str] = None, password: str = "password123") -> dict:
    """Register a user; returns the response body (token + user)."""
    response = await client.post("/api/auth/register", json={
        "email": email or f"rep-{uuid.uuid4().hex[:8]}@acme.com",
        "password": password,
        "first_name": "Riley",
        "last_name": "Rep",
        "company": "RelateAI"
    })
    assert response.status_code == 201, response.text
    return response.json()


async def create_account(client: AsyncClient, headers: dict, **fields) -> dict:
    response = await client.post("/api/accounts", json={"name": "Acme Corp", **fields}, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()["account"]


async def create_contact(client: AsyncClient, headers: dict, account_id: str, **fields) -> dict:
    payload = {
        "first_name": "Jane",
        "last_name": "Smith",
        "email": f"jane-{uuid.uuid4().hex[:8]}@acme.com",
        "company": "Acme Corp",
        "account_id": account_id,
        **fields
    }
    response = await client.post("/api/contacts", json=payload, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()["contact"]


async def create_message(client: AsyncClient, headers: dict, contact: dict, **fields) -> dict:
    payload = {
        "contact_id": contact["id"],
        "account_id": contact["account_id"],
        "subject": "Hello {{firstName}}",
        "content": "Hi {{firstName}}, quick question about {{company}}.",
        "channel": "email",
        **fields
    }
    response = await client.post("/api/messages", json=payload, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()["message"]
