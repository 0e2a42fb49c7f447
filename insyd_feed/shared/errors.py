from enum import Enum

import httpx


class ErrorKind(str, Enum):
    TRANSPORT = "transport"  # no response received
    SERVER = "server"  # non-success status, maybe with a message
    MALFORMED = "malformed"  # response body failed validation


def extract_server_message(response: httpx.Response) -> str | None:
    """The `message` field of a JSON error body, if the server sent one."""
    try:
        body = response.json()
    except ValueError:
        return None
    if isinstance(body, dict):
        message = body.get("message")
        if isinstance(message, str) and message:
            return message
    return None


class FeedClientError(Exception):
    action: str = "request"

    def __init__(
        self,
        detail: str,
        kind: ErrorKind = ErrorKind.SERVER,
        status_code: int | None = None,
        server_message: str | None = None,
    ):
        super().__init__(detail)
        self.detail = detail
        self.kind = kind
        self.status_code = status_code
        self.server_message = server_message

    @classmethod
    def transport(cls, exc: httpx.RequestError):
        return cls(f"{cls.action} failed: {exc!r}", kind=ErrorKind.TRANSPORT)

    @classmethod
    def from_response(cls, response: httpx.Response):
        message = extract_server_message(response)
        detail = f"{cls.action} rejected with status {response.status_code}"
        if message:
            detail += f": {message}"
        return cls(detail, kind=ErrorKind.SERVER, status_code=response.status_code, server_message=message)


class FetchError(FeedClientError):
    action = "fetch"


class DeleteError(FeedClientError):
    action = "delete"


class SubmissionError(FeedClientError):
    action = "submit"
