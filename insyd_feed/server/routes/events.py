"""
MODULE OVERVIEW:
POST /events: the activity ingestion endpoint of the development backend.

WHAT IS HAPPENING HERE:
An event is "someone did something to someone". We turn it straight into a
notification for the target user; the client will pick it up on its next poll.
"""
from datetime import datetime
from typing import Literal

from fastapi import APIRouter, Depends, status
from loguru import logger
from pydantic import BaseModel, Field

from insyd_feed.server.repository import NotificationRepository, StoredNotification
from insyd_feed.server.routes.notifications import get_repository

router = APIRouter()


class EventData(BaseModel):
    content: str = ""


class EventIn(BaseModel):
    type: Literal["like", "comment", "follow", "post", "message"]
    source_user_id: str = Field(alias="sourceUserId", min_length=1)
    target_user_id: str = Field(alias="targetUserId", min_length=1)
    data: EventData = Field(default_factory=EventData)
    timestamp: datetime


@router.post("/events", status_code=status.HTTP_201_CREATED)
async def create_event(event: EventIn, repository: NotificationRepository = Depends(get_repository)):
    notification = repository.add(StoredNotification(
        user_id=event.target_user_id,
        type=event.type,
        content=event.data.content,
        source_user_id=event.source_user_id,
        timestamp=event.timestamp,
    ))
    logger.info(f"op=event type={event.type} source={event.source_user_id} target={event.target_user_id} id={notification.id}")
    return {"message": "Event created", "notification": notification.model_dump(by_alias=True, mode="json")}
