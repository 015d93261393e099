"""
Client-side entity stores.

Each store keeps a local copy of one entity collection plus ``loading`` and
``error`` flags. Local state only changes after a request succeeds; a failed
request leaves it exactly as it was and raises an error notification.
Concurrent mutations of the same record resolve as last response wins.
"""
import logging
from typing import Any, Dict, List, Optional, Tuple

import httpx

from relateai.client.api import ApiClient, ApiError
from relateai.client.notify import Notifier

logger = logging.getLogger(__name__)

Record = Dict[str, Any]


class Store:
    """Request plumbing shared by every store: loading, error, notifications."""

    def __init__(self, api: ApiClient, notifier: Optional[Notifier] = None):
        self.api = api
        self.notifier = notifier or Notifier()
        self.loading = False
        self.error: Optional[str] = None

    async def _call(
        self,
        method: str,
        path: str,
        failure: str,
        expect: Tuple[str, ...] = (),
        quiet_statuses: Tuple[int, ...] = (),
        **kwargs: Any
    ) -> Optional[dict]:
        """
        Run one request; on failure record the error, notify and return None.

        A success envelope missing any of the ``expect`` keys counts as a failure.
        """
        self.loading = True
        self.error = None
        try:
            payload = await self.api.request(method, path, **kwargs)
        except (ApiError, httpx.HTTPError) as e:
            self._fail(failure, e, notify=getattr(e, "status_code", None) not in quiet_statuses)
            return None
        finally:
            self.loading = False

        missing = [key for key in expect if not isinstance(payload, dict) or key not in payload]
        if missing:
            self._fail(failure, f"response has no {', '.join(missing)}")
            return None
        return payload

    def _fail(self, failure: str, reason: Any, notify: bool = True) -> None:
        logger.warning("%s: %s", failure, reason)
        self.error = failure
        if notify:
            self.notifier.error(failure)


class EntityStore(Store):
    """
    Generic store over a REST collection.
    Subclasses set the URL segment and the envelope keys.
    """
    resource: str = ""
    entity_key: str = ""
    collection_key: str = ""
    label: str = ""

    def __init__(self, api: ApiClient, notifier: Optional[Notifier] = None):
        super().__init__(api, notifier)
        self.items: List[Record] = []

    def _path(self, *parts: Any) -> str:
        return "/" + "/".join(str(p) for p in (self.resource, *parts))

    def _replace(self, record: Record) -> None:
        self.items = [record if item.get("id") == record.get("id") else item for item in self.items]

    def _append(self, record: Record) -> None:
        self.items = [*self.items, record]

    def get_local(self, record_id: str) -> Optional[Record]:
        return next((item for item in self.items if item.get("id") == record_id), None)

    # -------------------------------------------------------------------------
    # CRUD
    # -------------------------------------------------------------------------

    async def fetch_all(self, params: Optional[dict] = None) -> List[Record]:
        payload = await self._call(
            "GET", self._path(), f"Failed to fetch {self.label}s",
            expect=(self.collection_key,), params=params
        )
        if payload is not None:
            self.items = list(payload[self.collection_key])
        return self.items

    async def get_one(self, record_id: str) -> Optional[Record]:
        payload = await self._call(
            "GET", self._path(record_id), f"Failed to fetch {self.label}",
            expect=(self.entity_key,)
        )
        return payload[self.entity_key] if payload is not None else None

    async def create(self, data: dict) -> Optional[Record]:
        payload = await self._call(
            "POST", self._path(), f"Failed to create {self.label}",
            expect=(self.entity_key,), json=data
        )
        if payload is None:
            return None
        record = payload[self.entity_key]
        self._append(record)
        self.notifier.success(f"{self.label.capitalize()} created successfully")
        return record

    async def update(self, record_id: str, data: dict) -> Optional[Record]:
        payload = await self._call(
            "PUT", self._path(record_id), f"Failed to update {self.label}",
            expect=(self.entity_key,), json=data
        )
        if payload is None:
            return None
        record = payload[self.entity_key]
        self._replace(record)
        self.notifier.success(f"{self.label.capitalize()} updated successfully")
        return record

    async def delete(self, record_id: str) -> bool:
        payload = await self._call("DELETE", self._path(record_id), f"Failed to delete {self.label}")
        if payload is None:
            return False
        self.items = [item for item in self.items if item.get("id") != record_id]
        self.notifier.success(f"{self.label.capitalize()} deleted successfully")
        return True


class AccountStore(EntityStore):
    resource = "accounts"
    entity_key = "account"
    collection_key = "accounts"
    label = "account"

    async def research(self, url: Optional[str] = None, name: Optional[str] = None) -> Optional[Record]:
        """Research a company and add the resulting account."""
        data = {key: value for key, value in {"url": url, "name": name}.items() if value}
        payload = await self._call(
            "POST", "/research/account", "Failed to research account",
            expect=("account",), json=data
        )
        if payload is None:
            return None
        record = payload["account"]
        self._append(record)
        self.notifier.success("Account researched and created successfully")
        return record

    async def calculate_icp_score(self, record_id: str) -> Optional[int]:
        payload = await self._call(
            "POST", f"/research/icp/{record_id}", "Failed to calculate ICP score",
            expect=("account", "icp_score")
        )
        if payload is None:
            return None
        self._replace(payload["account"])
        self.notifier.success("ICP score calculated successfully")
        return payload["icp_score"]


class ContactStore(EntityStore):
    resource = "contacts"
    entity_key = "contact"
    collection_key = "contacts"
    label = "contact"

    async def add_activity(self, record_id: str, description: str, source: str = "manual") -> Optional[Record]:
        payload = await self._call(
            "POST",
            self._path(record_id, "activities"),
            "Failed to add activity",
            expect=("contact",),
            json={"description": description, "source": source}
        )
        if payload is None:
            return None
        record = payload["contact"]
        self._replace(record)
        self.notifier.success("Activity added successfully")
        return record


class MessageStore(EntityStore):
    resource = "messages"
    entity_key = "message"
    collection_key = "messages"
    label = "message"

    async def send(self, record_id: str) -> Optional[Record]:
        """Send a draft; the local copy moves to status sent."""
        payload = await self._call(
            "POST", "/messages/send", "Failed to send message",
            expect=("message",), json={"message_id": record_id}
        )
        if payload is None:
            return None
        record = payload["message"]
        self._replace(record)
        self.notifier.success("Message sent successfully")
        return record

    async def generate(self, params: dict) -> Optional[Record]:
        payload = await self._call(
            "POST", "/messages/generate", "Failed to generate message",
            expect=("message",), json=params
        )
        if payload is None:
            return None
        record = payload["message"]
        self._append(record)
        self.notifier.success("Message generated successfully")
        return record

    async def history(self, contact_id: str, params: Optional[dict] = None) -> Optional[List[dict]]:
        """Threaded history for a contact. Does not touch the collection."""
        payload = await self._call(
            "GET", f"/messages/history/{contact_id}", "Failed to fetch message history",
            expect=("threads",), params=params
        )
        return payload["threads"] if payload is not None else None


class TemplateStore(EntityStore):
    resource = "email-templates"
    entity_key = "template"
    collection_key = "templates"
    label = "email template"

    async def preview(self, record_id: str, variables: Optional[Dict[str, str]] = None) -> Optional[dict]:
        payload = await self._call(
            "POST", self._path(record_id, "preview"), "Failed to preview email template",
            expect=("preview",), json={"variables": variables or {}}
        )
        return payload["preview"] if payload is not None else None

    async def defaults(self) -> Optional[List[Record]]:
        payload = await self._call(
            "GET", self._path("defaults"), "Failed to fetch default templates",
            expect=("templates",)
        )
        return payload["templates"] if payload is not None else None


class MeddppiccStore(Store):
    """
    Holds the assessment of the account being viewed.
    A missing assessment (404) is an expected state: it sets ``error`` silently.
    """

    def __init__(self, api: ApiClient, notifier: Optional[Notifier] = None):
        super().__init__(api, notifier)
        self.current: Optional[Record] = None

    async def _assessment(self, method: str, path: str, failure: str, success: Optional[str] = None, **kwargs) -> Optional[Record]:
        payload = await self._call(method, path, failure, expect=("assessment",), **kwargs)
        if payload is None:
            return None
        self.current = payload["assessment"]
        if success:
            self.notifier.success(success)
        return self.current

    async def get(self, account_id: str) -> Optional[Record]:
        return await self._assessment(
            "GET", f"/meddppicc/{account_id}", "Failed to fetch MEDDPPICC assessment", quiet_statuses=(404,)
        )

    async def create(self, account_id: str, data: dict) -> Optional[Record]:
        return await self._assessment(
            "POST", f"/meddppicc/{account_id}", "Failed to create MEDDPPICC assessment",
            "MEDDPPICC assessment created successfully", json=data
        )

    async def update(self, account_id: str, data: dict) -> Optional[Record]:
        return await self._assessment(
            "PUT", f"/meddppicc/{account_id}", "Failed to update MEDDPPICC assessment",
            "MEDDPPICC assessment updated successfully", json=data
        )

    async def delete(self, account_id: str) -> bool:
        payload = await self._call("DELETE", f"/meddppicc/{account_id}", "Failed to delete MEDDPPICC assessment")
        if payload is None:
            return False
        self.current = None
        self.notifier.success("MEDDPPICC assessment deleted successfully")
        return True

    async def generate(self, account_id: str) -> Optional[Record]:
        return await self._assessment(
            "POST", f"/research/meddppicc/{account_id}", "Failed to generate MEDDPPICC assessment",
            "MEDDPPICC assessment generated successfully"
        )

    async def add_next_step(self, account_id: str, text: str, due_date: str) -> Optional[Record]:
        return await self._assessment(
            "POST", f"/meddppicc/{account_id}/next-steps", "Failed to add next step",
            "Next step added successfully", json={"text": text, "due_date": due_date}
        )

    async def update_next_step(self, account_id: str, index: int, data: dict) -> Optional[Record]:
        return await self._assessment(
            "PUT", f"/meddppicc/{account_id}/next-steps/{index}", "Failed to update next step",
            "Next step updated successfully", json=data
        )
