"""
MODULE OVERVIEW:
The typed data structures shared by the feed client and the development backend,
powered by Pydantic v2.

WHAT IS HAPPENING HERE:
The backend speaks Mongo-flavoured JSON (`_id`, `type`, `timestamp`). We keep those
wire names as aliases and expose Pythonic attribute names. The raw `type` string is
kept verbatim so a category we do not know yet still shows up in the feed, it just
lands in the `unrecognized` bucket.
"""
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator


class Category(str, Enum):
    LIKE = "like"
    COMMENT = "comment"
    FOLLOW = "follow"
    POST = "post"
    MESSAGE = "message"
    UNRECOGNIZED = "unrecognized"

    @classmethod
    def from_raw(cls, raw: str) -> "Category":
        try:
            return cls(raw)
        except ValueError:
            return cls.UNRECOGNIZED

    @property
    def label(self) -> str:
        return self.value.capitalize()


# Categories a user can pick when creating an event, in display order.
KNOWN_CATEGORIES: tuple[Category, ...] = (
    Category.LIKE,
    Category.COMMENT,
    Category.FOLLOW,
    Category.POST,
    Category.MESSAGE,
)


class FeedFilter(str, Enum):
    ALL = "all"
    LIKE = "like"
    COMMENT = "comment"
    FOLLOW = "follow"
    POST = "post"
    MESSAGE = "message"


class Notification(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="ignore")

    id: str = Field(alias="_id")
    raw_type: str = Field(alias="type")
    content: str = ""
    created_at: datetime = Field(alias="timestamp")

    @field_validator("content", mode="before")
    @classmethod
    def _null_content(cls, value: Any) -> Any:
        # One row with "content": null must not sink the whole feed.
        return "" if value is None else value

    @property
    def category(self) -> Category:
        return Category.from_raw(self.raw_type)

    @property
    def local_time(self) -> datetime:
        """`created_at` converted to the machine's local timezone for display."""
        return self.created_at.astimezone()


# The feed endpoint returns a bare JSON array.
FEED_ADAPTER = TypeAdapter(list[Notification])


def isoformat_z(moment: datetime) -> str:
    """UTC ISO-8601 with millisecond precision and a `Z` suffix."""
    return moment.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class EventDraft(BaseModel):
    """A new activity event, built fresh for every submission and thrown away after."""

    category: Category
    source_user_id: str
    target_user_id: str
    content: str = ""
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @field_validator("category")
    @classmethod
    def _known_category(cls, value: Category) -> Category:
        if value is Category.UNRECOGNIZED:
            raise ValueError("events must use one of the known categories")
        return value

    def to_payload(self) -> dict[str, Any]:
        return {
            "type": self.category.value,
            "sourceUserId": self.source_user_id,
            "targetUserId": self.target_user_id,
            "data": {"content": self.content},
            "timestamp": isoformat_z(self.timestamp),
        }
