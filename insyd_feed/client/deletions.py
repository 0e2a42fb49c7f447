"""
MODULE OVERVIEW:
The Mutation Coordinator: confirmed (non-optimistic) deletion of notifications.

WHAT IS HAPPENING HERE:
A row is marked in flight before the DELETE goes out and is only removed from the
FeedStore once the server answers 200. Anything else leaves the row exactly where it
was. In-flight ids live in a set, so deleting two rows at once marks both of them.

A poll landing while a delete is outstanding replaces the whole feed and can bring
the row back for a moment. That flicker is accepted; the next poll after the server
confirms settles it.
"""
from urllib.parse import quote

import httpx
from loguru import logger

from insyd_feed.client.feed_store import FeedStore
from insyd_feed.shared.errors import DeleteError
from insyd_feed.shared.scope import SessionScope


class DeletionCoordinator:
    def __init__(self, http: httpx.AsyncClient, store: FeedStore, scope: SessionScope):
        self.http = http
        self.store = store
        self.scope = scope
        self.in_flight: set[str] = set()

    def is_deleting(self, notification_id: str) -> bool:
        return notification_id in self.in_flight

    async def delete_notification(self, notification_id: str) -> bool:
        """
        Delete one notification and drop it locally once the server confirms.

        Returns True when the row was confirmed and removed, False when nothing was
        done (a delete for this id is already running, or the session was torn down
        before the answer came back). Raises DeleteError on any failure.
        """
        if notification_id in self.in_flight:
            logger.debug(f"op=delete id={notification_id} event=skipped reason=in_flight")
            return False

        self.in_flight.add(notification_id)
        try:
            await self._send_delete(notification_id)
        except DeleteError as e:
            if self.scope.cancelled:
                self.scope.discard("delete", id=notification_id, kind=e.kind.value)
                return False
            logger.warning(f"op=delete id={notification_id} kind={e.kind.value} reason='{e}'")
            raise
        finally:
            self.in_flight.discard(notification_id)

        if self.scope.cancelled:
            self.scope.discard("delete", id=notification_id)
            return False

        self.store.remove(notification_id)
        logger.info(f"op=delete id={notification_id} event=confirmed")
        return True

    async def _send_delete(self, notification_id: str) -> None:
        try:
            response = await self.http.delete(f"/notifications/{quote(notification_id, safe='')}")
        except httpx.RequestError as e:
            raise DeleteError.transport(e) from e
        if response.status_code != 200:
            raise DeleteError.from_response(response)
