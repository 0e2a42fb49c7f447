from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from insyd_feed.server.repository import NotificationRepository

router = APIRouter()


def get_repository(request: Request) -> NotificationRepository:
    return request.app.state.repository


@router.get("/notifications/{user_id}")
async def list_notifications(user_id: str, repository: NotificationRepository = Depends(get_repository)):
    return [n.model_dump(by_alias=True, mode="json") for n in repository.for_user(user_id)]


@router.delete("/notifications/{notification_id}")
async def delete_notification(notification_id: str, repository: NotificationRepository = Depends(get_repository)):
    if not repository.delete(notification_id):
        return JSONResponse({"message": "Notification not found"}, status_code=404)
    return {"message": "Notification deleted", "_id": notification_id}
