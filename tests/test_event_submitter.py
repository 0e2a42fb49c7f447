import asyncio
import json
from datetime import datetime

import httpx
import pytest

from insyd_feed.client.event_submitter import (
    FALLBACK_MESSAGE,
    SUCCESS_MESSAGE,
    EventForm,
    EventSubmitter,
    SubmissionState,
)
from insyd_feed.shared.models import Category

from conftest import mock_http


def post_form(**overrides) -> EventForm:
    fields = {"target_user_id": "u9", "category": Category.POST, "content": "hi"}
    fields.update(overrides)
    return EventForm(**fields)


async def test_success_clears_content_only(config, scope):
    bodies = []

    def handler(request):
        bodies.append((request.method, request.url.path, json.loads(request.content)))
        return httpx.Response(201, json={"message": "Event created"})

    form = post_form()
    result = await EventSubmitter(config, mock_http(handler), scope).submit(form)

    assert result.ok is True
    assert result.message == SUCCESS_MESSAGE
    assert form.content == ""
    assert form.status == SUCCESS_MESSAGE
    assert form.status_is_success
    assert form.category is Category.POST
    assert form.target_user_id == "u9"
    assert form.state is SubmissionState.IDLE

    method, path, body = bodies[0]
    assert (method, path) == ("POST", "/events")
    assert body["type"] == "post"
    assert body["sourceUserId"] == "user123"
    assert body["targetUserId"] == "u9"
    assert body["data"] == {"content": "hi"}
    assert body["timestamp"].endswith("Z")
    datetime.fromisoformat(body["timestamp"].replace("Z", "+00:00"))


async def test_plain_200_counts_as_success(config, scope):
    form = post_form()
    result = await EventSubmitter(config, mock_http(lambda r: httpx.Response(200)), scope).submit(form)
    assert result.ok and result.status_code == 200
    assert form.content == ""


async def test_server_message_is_surfaced(config, scope):
    form = post_form()
    submitter = EventSubmitter(config, mock_http(lambda r: httpx.Response(429, json={"message": "rate limited"})), scope)
    result = await submitter.submit(form)

    assert result.ok is False
    assert result.status_code == 429
    assert form.status == "rate limited"
    assert form.content == "hi"
    assert not form.status_is_success
    assert form.state is SubmissionState.IDLE


@pytest.mark.parametrize("response", [
    httpx.Response(500),
    httpx.Response(400, json={"error": "bad"}),
    httpx.Response(400, text="not json"),
])
async def test_fallback_message_without_server_message(config, scope, response):
    form = post_form()
    await EventSubmitter(config, mock_http(lambda r: response), scope).submit(form)
    assert form.status == FALLBACK_MESSAGE
    assert form.content == "hi"


async def test_transport_failure_uses_fallback(config, scope):
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    form = post_form()
    result = await EventSubmitter(config, mock_http(handler), scope).submit(form)
    assert result.ok is False and result.status_code is None
    assert form.status == FALLBACK_MESSAGE
    assert form.content == "hi"


async def test_one_attempt_per_submission(config, scope):
    calls = []

    def handler(request):
        calls.append(request)
        return httpx.Response(503)

    await EventSubmitter(config, mock_http(handler), scope).submit(post_form())
    assert len(calls) == 1


async def test_pending_form_is_not_resubmitted(config, scope):
    release = asyncio.Event()
    calls = []

    async def handler(request):
        calls.append(request)
        await release.wait()
        return httpx.Response(201)

    form = post_form()
    submitter = EventSubmitter(config, mock_http(handler), scope)
    pending = asyncio.create_task(submitter.submit(form))
    await asyncio.sleep(0.01)

    assert form.state is SubmissionState.PENDING
    assert form.status == ""
    assert await submitter.submit(form) is None

    release.set()
    await pending
    assert len(calls) == 1
    assert form.state is SubmissionState.IDLE


async def test_previous_status_cleared_on_new_submission(config, scope):
    form = post_form(status="rate limited")
    release = asyncio.Event()

    async def handler(request):
        await release.wait()
        return httpx.Response(201)

    pending = asyncio.create_task(EventSubmitter(config, mock_http(handler), scope).submit(form))
    await asyncio.sleep(0.01)
    assert form.status == ""
    release.set()
    await pending


async def test_late_response_after_cancel_leaves_form_alone(config, scope):
    release = asyncio.Event()

    async def handler(request):
        await release.wait()
        return httpx.Response(201)

    form = post_form()
    pending = asyncio.create_task(EventSubmitter(config, mock_http(handler), scope).submit(form))
    await asyncio.sleep(0.01)

    scope.cancel()
    release.set()

    assert await pending is None
    assert form.content == "hi"
    assert form.status == ""


async def test_late_response_after_cancel_returns_form_to_idle(config, scope):
    release = asyncio.Event()

    async def handler(request):
        await release.wait()
        return httpx.Response(201)

    form = post_form()
    submitter = EventSubmitter(config, mock_http(handler), scope)
    pending = asyncio.create_task(submitter.submit(form))
    await asyncio.sleep(0.01)
    assert form.state is SubmissionState.PENDING

    scope.cancel()
    release.set()
    await pending

    assert form.state is SubmissionState.IDLE
    assert form.content == "hi"


async def test_late_failure_after_cancel_returns_form_to_idle(config, scope):
    release = asyncio.Event()

    async def handler(request):
        await release.wait()
        return httpx.Response(429, json={"message": "rate limited"})

    form = post_form()
    pending = asyncio.create_task(EventSubmitter(config, mock_http(handler), scope).submit(form))
    await asyncio.sleep(0.01)

    scope.cancel()
    release.set()

    assert await pending is None
    assert form.state is SubmissionState.IDLE
    assert form.status == ""
