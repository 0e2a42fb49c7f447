"""
MODULE OVERVIEW:
The Feed Poller: keeps the local FeedStore in step with the server.

WHAT IS HAPPENING HERE:
Classic short polling. A timer fires every `poll_interval_s` and each tick spawns its
own refresh task, so a hung request never holds up the timer. Ticks may overlap, and
whichever response resolves last wins, because every success replaces the whole
snapshot. A failed fetch leaves the stale feed in place; a stale feed beats an empty one.
"""
import asyncio
from urllib.parse import quote

import httpx
from loguru import logger
from pydantic import ValidationError

from insyd_feed.client.feed_store import FeedStore
from insyd_feed.shared.config import ClientConfig
from insyd_feed.shared.errors import ErrorKind, FetchError
from insyd_feed.shared.models import FEED_ADAPTER, Notification
from insyd_feed.shared.scope import SessionScope


class FeedPoller:
    def __init__(self, config: ClientConfig, http: httpx.AsyncClient, store: FeedStore, scope: SessionScope):
        self.config = config
        self.http = http
        self.store = store
        self.scope = scope

        self._timer: asyncio.Task | None = None
        self._in_flight: set[asyncio.Task] = set()

    @property
    def running(self) -> bool:
        return self._timer is not None and not self._timer.done()

    async def refresh(self, user_id: str | None = None) -> tuple[Notification, ...]:
        user_id = user_id or self.config.user_id
        try:
            notifications = await self._fetch(user_id)
        except FetchError as e:
            if self.scope.cancelled:
                self.scope.discard("fetch", user_id=user_id, kind=e.kind.value)
                return self.store.notifications
            self.store.loading = False
            logger.warning(f"op=fetch user_id={user_id} kind={e.kind.value} reason='{e}'")
            raise

        if self.scope.cancelled:
            self.scope.discard("fetch", user_id=user_id)
            return self.store.notifications

        self.store.replace(notifications)
        logger.debug(f"op=fetch user_id={user_id} count={len(notifications)}")
        return self.store.notifications

    async def _fetch(self, user_id: str) -> list[Notification]:
        try:
            response = await self.http.get(f"/notifications/{quote(user_id, safe='')}")
        except httpx.RequestError as e:
            raise FetchError.transport(e) from e

        if not response.is_success:
            raise FetchError.from_response(response)

        try:
            return FEED_ADAPTER.validate_json(response.content)
        except ValidationError as e:
            raise FetchError(
                f"malformed feed payload: {e.error_count()} error(s)",
                kind=ErrorKind.MALFORMED,
                status_code=response.status_code,
            ) from e

    def start(self) -> None:
        if self.running:
            return
        self._timer = asyncio.create_task(self._run(), name="feed-poller")

    async def stop(self) -> None:
        tasks = list(self._in_flight)
        if self._timer is not None:
            tasks.append(self._timer)
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        self._timer = None

    async def _run(self) -> None:
        # First tick fires immediately, then one per interval.
        while not self.scope.cancelled:
            task = asyncio.create_task(self._tick())
            self._in_flight.add(task)
            task.add_done_callback(self._in_flight.discard)
            await asyncio.sleep(self.config.poll_interval_s)

    async def _tick(self) -> None:
        try:
            await self.refresh()
        except FetchError:
            # Already logged by refresh(); the stale feed stays until the next tick.
            pass
