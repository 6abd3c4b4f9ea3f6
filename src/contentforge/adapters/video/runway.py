"""Runway video generation provider."""

import httpx

from contentforge.adapters.base import JobPollResult, JobSubmission
from contentforge.adapters.video.base import VideoProvider, VideoRequest
from contentforge.domain.enums import JobStatus
from contentforge.domain.errors import JobNotFoundError, ProviderHTTPError
from contentforge.logging import get_logger

logger = get_logger(__name__)

RUNWAY_API_VERSION = "2024-11-06"

# Runway task status -> normalized status; anything else maps to processing
STATUS_MAP: dict[str, JobStatus] = {
    "PENDING": JobStatus.PENDING,
    "THROTTLED": JobStatus.PENDING,
    "RUNNING": JobStatus.PROCESSING,
    "SUCCEEDED": JobStatus.COMPLETED,
    "FAILED": JobStatus.FAILED,
    "CANCELLED": JobStatus.FAILED,
}


def normalize_status(native: str | None) -> JobStatus:
    """Map a Runway task status onto the shared status set."""
    return STATUS_MAP.get(native or "", JobStatus.PROCESSING)


class RunwayVideoProvider(VideoProvider):
    """Runway (Gen-3 / Gen-4 Turbo) video generation provider.

    Submission returns a task id immediately; the task is then polled through
    ``/tasks/{id}`` until it succeeds or fails.
    """

    key_setting = "RUNWAY_API_KEY"

    def __init__(
        self,
        api_key: str | None,
        http_client: httpx.AsyncClient,
        base_url: str = "https://api.dev.runwayml.com/v1",
    ) -> None:
        super().__init__(api_key, http_client)
        self.base_url = base_url

    @property
    def name(self) -> str:
        return "runway"

    def _headers(self, api_key: str) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {api_key}",
            "Content-Type": "application/json",
            "X-Runway-Version": RUNWAY_API_VERSION,
        }

    async def submit(self, request: VideoRequest) -> JobSubmission:
        """Submit a Runway generation task."""
        api_key = self.require_api_key()

        logger.info(
            "runway_generation_started",
            prompt_length=len(request.prompt),
            model=request.model,
            ratio=request.ratio,
            duration=request.duration,
        )

        response = await self.http_client.post(
            f"{self.base_url}/image_to_video",
            headers=self._headers(api_key),
            json={
                "promptText": request.prompt,
                "model": request.model,
                "ratio": request.ratio,
                "duration": request.duration,
            },
        )
        self.check_response(response)
        data = response.json()

        task_id = data.get("id")
        if not task_id:
            raise ProviderHTTPError(self.name, response.status_code, "No task ID returned from Runway")

        logger.info("runway_task_submitted", task_id=task_id)

        return JobSubmission(
            job_id=task_id,
            status=JobStatus.PENDING,
            cost=self.estimate_cost(request.duration),
        )

    async def poll(self, job_id: str) -> JobPollResult:
        """Fetch a Runway task and normalize its status."""
        api_key = self.require_api_key()

        response = await self.http_client.get(
            f"{self.base_url}/tasks/{job_id}",
            headers=self._headers(api_key),
        )
        if response.status_code == 404:
            raise JobNotFoundError(f"Runway task {job_id} not found")
        self.check_response(response)
        data = response.json()

        native_status = data.get("status")
        status = normalize_status(native_status)
        output = data.get("output") or []
        video_url = output[0] if output else None

        logger.debug(
            "runway_poll_status",
            task_id=job_id,
            native_status=native_status,
            status=status,
        )

        return JobPollResult(
            status=status,
            artifact_url=video_url,
            progress=data.get("progress"),
        )
