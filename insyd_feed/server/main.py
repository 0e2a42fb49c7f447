"""
MODULE OVERVIEW:
The FastAPI application factory for the development backend.

WHAT IS HAPPENING HERE:
Three endpoints over an in-memory repository, enough for the feed client to poll,
delete and submit against something real. Validation errors are reshaped into
`{"message": ...}` bodies, which is what the client shows to the user.
"""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger

from insyd_feed.server.middleware import TimingMiddleware
from insyd_feed.server.repository import NotificationRepository
from insyd_feed.server.routes import events, notifications
from insyd_feed.shared.config import settings


async def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    first = errors[0] if errors else {}
    field = ".".join(str(part) for part in first.get("loc", ())[1:]) or "body"
    message = f"Invalid {field}: {first.get('msg', 'validation failed')}"
    logger.debug(f"{request.method} {request.url.path} rejected: {message}")
    return JSONResponse({"message": message}, status_code=422)


def create_app(repository: NotificationRepository | None = None, seed_user_id: str | None = None) -> FastAPI:
    if repository is None:
        repository = NotificationRepository()
        if seed_user_id:
            repository.seed(seed_user_id)

    app = FastAPI(
        title="Insyd Activity Feed (dev backend)",
        description="In-memory notification backend for the feed client",
        version="1.0.0",
    )
    app.state.repository = repository

    app.add_middleware(TimingMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(RequestValidationError, validation_error_handler)

    app.include_router(notifications.router, tags=["Notifications"])
    app.include_router(events.router, tags=["Events"])

    @app.get("/healthz", tags=["Ops"])
    async def health_check():
        return {"status": "ok"}

    return app


app = create_app(seed_user_id=settings.USER_ID)
