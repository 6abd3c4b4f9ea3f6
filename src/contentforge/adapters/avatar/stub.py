"""Stub avatar provider for local development."""

from uuid import uuid4

import httpx

from contentforge.adapters.avatar.base import AvatarProvider, AvatarRequest
from contentforge.adapters.base import JobPollResult, JobSubmission
from contentforge.domain.enums import JobStatus
from contentforge.domain.errors import JobNotFoundError
from contentforge.logging import get_logger

logger = get_logger(__name__)


class StubAvatarProvider(AvatarProvider):
    """Simulates an avatar render that completes after a fixed number of polls."""

    key_setting = "HEYGEN_API_KEY"

    def __init__(
        self,
        api_key: str | None = None,
        http_client: httpx.AsyncClient | None = None,
        polls_until_complete: int = 2,
    ) -> None:
        super().__init__(api_key, http_client)
        self.polls_until_complete = polls_until_complete
        self._polls: dict[str, int] = {}

    @property
    def name(self) -> str:
        return "stub"

    def require_api_key(self) -> str:
        return "stub"

    async def submit(self, request: AvatarRequest) -> JobSubmission:
        video_id = uuid4().hex
        self._polls[video_id] = 0
        logger.info("stub_avatar_submitted", video_id=video_id)
        return JobSubmission(job_id=video_id, status=JobStatus.PENDING, cost=self.estimate_cost())

    async def poll(self, job_id: str) -> JobPollResult:
        if job_id not in self._polls:
            raise JobNotFoundError(f"Stub video {job_id} not found")

        self._polls[job_id] += 1
        if self._polls[job_id] >= self.polls_until_complete:
            return JobPollResult(
                status=JobStatus.COMPLETED,
                artifact_url=f"https://example.com/stub/{job_id}.mp4",
            )
        return JobPollResult(status=JobStatus.PROCESSING)
