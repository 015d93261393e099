"""
Transient user notifications (the toasts of the web client).
"""
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List, Literal, Optional

logger = logging.getLogger(__name__)

Level = Literal["success", "error"]

# Older notifications are dropped past this many
MAX_NOTIFICATIONS = 50


@dataclass
class Notification:
    level: Level
    message: str
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class Notifier:
    """Collects the most recent notifications and logs each one."""

    def __init__(self, max_items: int = MAX_NOTIFICATIONS):
        self.max_items = max_items
        self.notifications: List[Notification] = []

    def notify(self, level: Level, message: str) -> Notification:
        notification = Notification(level, message)
        self.notifications.append(notification)
        del self.notifications[:-self.max_items]
        log = logger.warning if level == "error" else logger.info
        log("[%s] %s", level, message)
        return notification

    def success(self, message: str) -> Notification:
        return self.notify("success", message)

    def error(self, message: str) -> Notification:
        return self.notify("error", message)

    @property
    def last(self) -> Optional[Notification]:
        return self.notifications[-1] if self.notifications else None
