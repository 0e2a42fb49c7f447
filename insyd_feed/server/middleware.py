"""
MODULE OVERVIEW:
Request timing for the development backend.

WHAT IS HAPPENING HERE:
Every response carries `X-Process-Time-Ms`. Feed reads arrive from every client on a
fixed cadence, so they are logged at TRACE; deletes and event posts, which change
state, go out at DEBUG together with their status code.
"""

import time
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from loguru import logger

QUIET_PREFIXES = ("/notifications/", "/healthz")


def log_level_for(method: str, path: str) -> str:
    if method == "GET" and path.startswith(QUIET_PREFIXES):
        return "TRACE"
    return "DEBUG"


class TimingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000

        response.headers["X-Process-Time-Ms"] = f"{elapsed_ms:.2f}"
        logger.log(
            log_level_for(request.method, request.url.path),
            f"method={request.method} path={request.url.path} status={response.status_code} elapsed_ms={elapsed_ms:.2f}",
        )
        return response
