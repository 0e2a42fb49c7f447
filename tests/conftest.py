import httpx
import pytest

from insyd_feed.client.feed_store import FeedStore
from insyd_feed.shared.config import ClientConfig
from insyd_feed.shared.models import Notification
from insyd_feed.shared.scope import SessionScope

BASE_URL = "http://api.test"


def wire(id: str, type: str = "like", content: str = "", timestamp: str = "2025-01-01T10:00:00.000Z") -> dict:
    return {"_id": id, "type": type, "content": content, "timestamp": timestamp}


def notification(id: str, type: str = "like", content: str = "") -> Notification:
    return Notification.model_validate(wire(id, type, content))


def mock_http(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(base_url=BASE_URL, transport=httpx.MockTransport(handler))


@pytest.fixture
def config() -> ClientConfig:
    return ClientConfig(base_url=BASE_URL, user_id="user123", poll_interval_s=0.01)


@pytest.fixture
def scope() -> SessionScope:
    return SessionScope(name="test")


@pytest.fixture
def store() -> FeedStore:
    return FeedStore()
