from datetime import datetime, timezone
from typing import Iterable, Iterator

from insyd_feed.shared.models import Notification


class FeedStore:
    """
    The locally cached feed: one mutable cell, last writer wins.

    Starts empty with `loading` set. A successful poll replaces the whole snapshot;
    a confirmed delete removes one entry. Nothing else writes here.
    """

    def __init__(self):
        self._notifications: tuple[Notification, ...] = ()
        self.loading = True
        self.last_synced_at: datetime | None = None

    @property
    def notifications(self) -> tuple[Notification, ...]:
        return self._notifications

    def replace(self, notifications: Iterable[Notification]) -> None:
        self._notifications = tuple(notifications)
        self.loading = False
        self.last_synced_at = datetime.now(timezone.utc)

    def remove(self, notification_id: str) -> bool:
        remaining = tuple(n for n in self._notifications if n.id != notification_id)
        removed = len(remaining) != len(self._notifications)
        self._notifications = remaining
        return removed

    def __iter__(self) -> Iterator[Notification]:
        return iter(self._notifications)

    def __len__(self) -> int:
        return len(self._notifications)

    def __contains__(self, notification_id: object) -> bool:
        return any(n.id == notification_id for n in self._notifications)
