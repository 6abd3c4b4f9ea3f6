"""Stub video generation provider for local development."""

from uuid import uuid4

import httpx

from contentforge.adapters.base import JobPollResult, JobSubmission
from contentforge.adapters.video.base import VideoProvider, VideoRequest
from contentforge.domain.enums import JobStatus
from contentforge.domain.errors import JobNotFoundError
from contentforge.logging import get_logger

logger = get_logger(__name__)


class StubVideoProvider(VideoProvider):
    """Simulates a queued task that completes after a fixed number of polls."""

    key_setting = "RUNWAY_API_KEY"

    def __init__(
        self,
        api_key: str | None = None,
        http_client: httpx.AsyncClient | None = None,
        polls_until_complete: int = 3,
    ) -> None:
        super().__init__(api_key, http_client)
        self.polls_until_complete = polls_until_complete
        self._polls: dict[str, int] = {}

    @property
    def name(self) -> str:
        return "stub"

    def require_api_key(self) -> str:
        return "stub"

    async def submit(self, request: VideoRequest) -> JobSubmission:
        task_id = f"stub-{uuid4()}"
        self._polls[task_id] = 0
        logger.info("stub_video_submitted", task_id=task_id)
        return JobSubmission(
            job_id=task_id,
            status=JobStatus.PENDING,
            cost=self.estimate_cost(request.duration),
        )

    async def poll(self, job_id: str) -> JobPollResult:
        if job_id not in self._polls:
            raise JobNotFoundError(f"Stub task {job_id} not found")

        self._polls[job_id] += 1
        count = self._polls[job_id]
        if count >= self.polls_until_complete:
            return JobPollResult(
                status=JobStatus.COMPLETED,
                artifact_url=f"https://example.com/stub/{job_id}.mp4",
                progress=1.0,
            )
        return JobPollResult(
            status=JobStatus.PROCESSING,
            progress=count / self.polls_until_complete,
        )
