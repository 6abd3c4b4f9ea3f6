"""Tests for the API client's error parsing and flows."""

import httpx
import pytest

from contentforge.client.api import ApiError, ContentForgeClient
from contentforge.client.polling import video_flow
from contentforge.domain.enums import JobStatus
from contentforge.domain.errors import ErrorCode
from contentforge.domain.models import JobHandle


def make_client(handler) -> ContentForgeClient:  # type: ignore[no-untyped-def]
    http_client = httpx.AsyncClient(base_url="http://api.test", transport=httpx.MockTransport(handler))
    return ContentForgeClient(http_client, token="token-alice")


@pytest.mark.asyncio
async def test_structured_error_raised() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            400,
            json={"error": "Invalid request", "code": "VALIDATION_ERROR", "details": {"fieldErrors": {"prompt": ["x"]}}},
        )

    client = make_client(handler)

    with pytest.raises(ApiError) as exc_info:
        await client.generate_text(prompt="hi")

    assert exc_info.value.status_code == 400
    assert exc_info.value.code is ErrorCode.VALIDATION_ERROR
    assert exc_info.value.details == {"fieldErrors": {"prompt": ["x"]}}


@pytest.mark.asyncio
async def test_unstructured_error_is_internal() -> None:
    client = make_client(lambda request: httpx.Response(502, text="Bad Gateway"))

    with pytest.raises(ApiError) as exc_info:
        await client.get_generation("gen-1")

    assert exc_info.value.code is ErrorCode.INTERNAL_ERROR
    assert exc_info.value.message == "Bad Gateway"


@pytest.mark.asyncio
async def test_video_flow_polls_with_generation() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"status": "processing", "progress": 0.3})

    flow = video_flow(make_client(handler))

    result = await flow.poll(JobHandle(job_id="task-1", generation_id="gen-1"))

    assert result.status is JobStatus.PROCESSING
    assert result.progress == pytest.approx(0.3)
    request = seen[0]
    assert request.url.path == "/api/v1/generate/video/poll"
    assert dict(request.url.params) == {"taskId": "task-1", "generationId": "gen-1"}
    assert request.headers["Authorization"] == "Bearer token-alice"


@pytest.mark.asyncio
async def test_poll_omits_missing_generation() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"status": "completed", "videoUrl": "https://cdn.test/a.mp4"})

    data = await make_client(handler).poll_avatar("vid-1")

    assert data["videoUrl"] == "https://cdn.test/a.mp4"
    assert dict(seen[0].url.params) == {"videoId": "vid-1"}


@pytest.mark.asyncio
async def test_unreadable_success_body_is_internal() -> None:
    client = make_client(lambda request: httpx.Response(200, text="<html>proxy</html>"))

    with pytest.raises(ApiError) as exc_info:
        await client.poll_video("task-1")

    assert exc_info.value.status_code == 200
    assert exc_info.value.code is ErrorCode.INTERNAL_ERROR


@pytest.mark.asyncio
async def test_dashboard_stats_path() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"contentCount": 1})

    data = await make_client(handler).get_dashboard_stats()

    assert data == {"contentCount": 1}
    assert seen[0].url.path == "/api/v1/dashboard/stats"
