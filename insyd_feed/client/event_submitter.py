"""
MODULE OVERVIEW:
The Event Submitter: turns the user's form fields into a POST /events request.

WHAT IS HAPPENING HERE:
One attempt per submission, no retry and no backoff. On success only the content field
is cleared so the same event type can be fired at the same target again quickly. On
failure the draft is kept and the server's own message is shown when it sent one.
The submitter never touches the feed; a created event shows up on the next poll.
"""
from dataclasses import dataclass
from enum import Enum

import httpx
from loguru import logger

from insyd_feed.shared.config import ClientConfig
from insyd_feed.shared.errors import SubmissionError
from insyd_feed.shared.models import Category, EventDraft
from insyd_feed.shared.scope import SessionScope

SUCCESS_MESSAGE = "Event sent successfully!"
FALLBACK_MESSAGE = "Failed to send event. Please try again."


class SubmissionState(str, Enum):
    IDLE = "idle"
    PENDING = "pending"


@dataclass
class EventForm:
    target_user_id: str
    category: Category = Category.LIKE
    content: str = ""
    status: str = ""
    state: SubmissionState = SubmissionState.IDLE

    @property
    def status_is_success(self) -> bool:
        return "success" in self.status.lower()


@dataclass(frozen=True)
class SubmissionResult:
    ok: bool
    message: str
    status_code: int | None = None


class EventSubmitter:
    def __init__(self, config: ClientConfig, http: httpx.AsyncClient, scope: SessionScope):
        self.config = config
        self.http = http
        self.scope = scope

    def build_draft(self, form: EventForm) -> EventDraft:
        return EventDraft(
            category=form.category,
            source_user_id=self.config.user_id,
            target_user_id=form.target_user_id,
            content=form.content,
        )

    async def send(self, draft: EventDraft) -> httpx.Response:
        try:
            response = await self.http.post("/events", json=draft.to_payload())
        except httpx.RequestError as e:
            raise SubmissionError.transport(e) from e
        if not response.is_success:
            raise SubmissionError.from_response(response)
        return response

    async def submit(self, form: EventForm) -> SubmissionResult | None:
        """
        Submit the form once and write the outcome into `form.status`.

        Returns None without sending when the form is already pending, or when the
        session was torn down before the answer arrived (content and status are left
        alone, the form just drops back to idle).
        """
        if form.state is SubmissionState.PENDING:
            logger.debug("op=submit event=skipped reason=pending")
            return None

        draft = self.build_draft(form)
        form.state = SubmissionState.PENDING
        form.status = ""
        logger.debug(f"op=submit type={draft.category.value} target={draft.target_user_id}")

        try:
            try:
                response = await self.send(draft)
            except SubmissionError as e:
                if self.scope.cancelled:
                    self.scope.discard("submit", kind=e.kind.value)
                    return None
                logger.error(f"op=submit kind={e.kind.value} status={e.status_code} reason='{e}'")
                form.status = e.server_message or FALLBACK_MESSAGE
                return SubmissionResult(ok=False, message=form.status, status_code=e.status_code)

            if self.scope.cancelled:
                self.scope.discard("submit", status=response.status_code)
                return None

            form.content = ""
            form.status = SUCCESS_MESSAGE
            logger.info(f"op=submit type={draft.category.value} target={draft.target_user_id} status={response.status_code}")
            return SubmissionResult(ok=True, message=SUCCESS_MESSAGE, status_code=response.status_code)
        finally:
            # The form can outlive the session; never leave it stuck in pending.
            form.state = SubmissionState.IDLE
