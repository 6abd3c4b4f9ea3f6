"""Async HTTP client for the ContentForge API."""

from typing import Any

import httpx

from contentforge.domain.errors import ErrorCode
from contentforge.logging import get_logger

logger = get_logger(__name__)


class ApiError(Exception):
    """Structured error response from the API."""

    def __init__(
        self,
        status_code: int,
        code: ErrorCode,
        message: str,
        details: Any | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.code = code
        self.message = message
        self.details = details


class ContentForgeClient:
    """Thin wrapper over the ``/api/v1`` endpoints.

    Errors with a ``{error, code}`` body are raised as :class:`ApiError`, and so
    is a success response whose body is not JSON.
    Transport failures propagate as ``httpx.HTTPError``.
    """

    def __init__(self, http_client: httpx.AsyncClient, token: str | None = None) -> None:
        self.http_client = http_client
        self.token = token

    def _headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self.token}"} if self.token else {}

    async def _request(
        self,
        method: str,
        path: str,
        json: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
    ) -> Any:
        response = await self.http_client.request(
            method,
            f"/api/v1{path}",
            json=json,
            params={k: v for k, v in (params or {}).items() if v is not None},
            headers=self._headers(),
        )
        if response.is_success:
            try:
                return response.json()
            except ValueError as e:
                # e.g. an HTML page from a proxy in front of the API
                logger.warning("api_unreadable_response", path=path, status_code=response.status_code)
                raise ApiError(
                    status_code=response.status_code,
                    code=ErrorCode.INTERNAL_ERROR,
                    message="Unexpected response from the server",
                ) from e

        try:
            body = response.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {}

        try:
            code = ErrorCode(body.get("code"))
        except ValueError:
            code = ErrorCode.INTERNAL_ERROR
        logger.debug("api_error_response", path=path, status_code=response.status_code, code=code.value)
        raise ApiError(
            status_code=response.status_code,
            code=code,
            message=body.get("error") or response.reason_phrase,
            details=body.get("details"),
        )

    # Generation

    async def generate_text(self, **body: Any) -> dict[str, Any]:
        return await self._request("POST", "/generate/text", json=body)

    async def generate_image(self, **body: Any) -> dict[str, Any]:
        return await self._request("POST", "/generate/image", json=body)

    async def generate_voice(self, **body: Any) -> dict[str, Any]:
        return await self._request("POST", "/generate/voice", json=body)

    async def submit_video(self, **body: Any) -> dict[str, Any]:
        return await self._request("POST", "/generate/video", json=body)

    async def poll_video(self, task_id: str, generation_id: str | None = None) -> dict[str, Any]:
        return await self._request(
            "GET", "/generate/video/poll", params={"taskId": task_id, "generationId": generation_id}
        )

    async def submit_avatar(self, **body: Any) -> dict[str, Any]:
        return await self._request("POST", "/generate/avatar", json=body)

    async def poll_avatar(self, video_id: str, generation_id: str | None = None) -> dict[str, Any]:
        return await self._request(
            "GET", "/generate/avatar/poll", params={"videoId": video_id, "generationId": generation_id}
        )

    # Library

    async def get_generation(self, generation_id: str) -> dict[str, Any]:
        return await self._request("GET", f"/library/generations/{generation_id}")

    async def get_dashboard_stats(self) -> dict[str, Any]:
        return await self._request("GET", "/dashboard/stats")
