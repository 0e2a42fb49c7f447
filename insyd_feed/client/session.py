"""
MODULE OVERVIEW:
The Feed Session: one consumer's lifetime, wired together.

WHAT IS HAPPENING HERE:
A session owns one HTTP client, one FeedStore and one cancellation scope, and hands
the explicit `ClientConfig` to every component that issues requests. Entering the
session starts the poller; leaving it cancels the scope, stops the timer and closes
the HTTP client (only if the session created it).
"""
import httpx
from loguru import logger

from insyd_feed.client.deletions import DeletionCoordinator
from insyd_feed.client.event_submitter import EventForm, EventSubmitter
from insyd_feed.client.feed_poller import FeedPoller
from insyd_feed.client.feed_store import FeedStore
from insyd_feed.client.projection import project
from insyd_feed.shared.config import ClientConfig
from insyd_feed.shared.models import FeedFilter, Notification
from insyd_feed.shared.scope import SessionScope


class FeedSession:
    def __init__(self, config: ClientConfig, http: httpx.AsyncClient | None = None):
        self.config = config
        self.scope = SessionScope(name=f"feed:{config.user_id}")
        self._owns_http = http is None
        self.http = http if http is not None else httpx.AsyncClient(base_url=config.base_url)

        self.store = FeedStore()
        self.filter = FeedFilter.ALL
        self.poller = FeedPoller(config, self.http, self.store, self.scope)
        self.deletions = DeletionCoordinator(self.http, self.store, self.scope)
        self.submitter = EventSubmitter(config, self.http, self.scope)

    def visible(self) -> list[Notification]:
        return project(self.store, self.filter)

    def new_form(self) -> EventForm:
        return EventForm(target_user_id=self.config.user_id)

    async def start(self) -> None:
        logger.info(f"op=session event=start base_url={self.config.base_url} user_id={self.config.user_id}")
        self.poller.start()

    async def close(self) -> None:
        self.scope.cancel()
        await self.poller.stop()
        if self._owns_http:
            await self.http.aclose()
        logger.info(f"op=session event=closed user_id={self.config.user_id}")

    async def __aenter__(self) -> "FeedSession":
        await self.start()
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()
