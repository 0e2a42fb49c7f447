"""
MODULE OVERVIEW:
In-memory notification storage for the development backend.

WHAT IS HAPPENING HERE:
In production this is a document store; here a dict of per-user lists is enough to
exercise the client end to end. Feeds are returned newest first, and the order is the
server's business: the client never re-sorts.
"""
import random
from datetime import datetime, timedelta, timezone
from uuid import uuid4

from loguru import logger
from pydantic import BaseModel, ConfigDict, Field


class StoredNotification(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(alias="_id", default_factory=lambda: uuid4().hex[:24])
    user_id: str = Field(alias="userId")
    type: str
    content: str = ""
    source_user_id: str | None = Field(default=None, alias="sourceUserId")
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


SAMPLE_ACTIVITY = [
    ("like", "alice liked your post"),
    ("comment", "bob commented: \"Great shot!\""),
    ("follow", "carol started following you"),
    ("post", "dave published a new post"),
    ("message", "erin sent you a message"),
]


class NotificationRepository:
    def __init__(self):
        self._by_user: dict[str, list[StoredNotification]] = {}

    def add(self, notification: StoredNotification) -> StoredNotification:
        self._by_user.setdefault(notification.user_id, []).append(notification)
        logger.debug(f"op=store user_id={notification.user_id} id={notification.id} type={notification.type}")
        return notification

    def for_user(self, user_id: str) -> list[StoredNotification]:
        return sorted(self._by_user.get(user_id, []), key=lambda n: n.timestamp, reverse=True)

    def delete(self, notification_id: str) -> bool:
        for user_id, items in self._by_user.items():
            for i, n in enumerate(items):
                if n.id == notification_id:
                    del items[i]
                    logger.debug(f"op=delete user_id={user_id} id={notification_id}")
                    return True
        return False

    def seed(self, user_id: str, count: int = 5) -> None:
        now = datetime.now(timezone.utc)
        for i in range(count):
            kind, content = random.choice(SAMPLE_ACTIVITY)
            self.add(StoredNotification(
                user_id=user_id,
                type=kind,
                content=content,
                timestamp=now - timedelta(minutes=random.randint(1, 120)),
            ))
