"""HeyGen talking-avatar provider."""

import httpx

from contentforge.adapters.avatar.base import DIMENSIONS, AvatarProvider, AvatarRequest
from contentforge.adapters.base import JobPollResult, JobSubmission
from contentforge.domain.enums import JobStatus
from contentforge.domain.errors import JobNotFoundError, ProviderHTTPError
from contentforge.logging import get_logger

logger = get_logger(__name__)

STATUS_MAP: dict[str, JobStatus] = {
    "pending": JobStatus.PENDING,
    "waiting": JobStatus.PENDING,
    "processing": JobStatus.PROCESSING,
    "completed": JobStatus.COMPLETED,
    "failed": JobStatus.FAILED,
}

BACKGROUND_COLOR = "#0f172a"


def normalize_status(native: str | None) -> JobStatus:
    """Map a HeyGen video status onto the shared status set."""
    return STATUS_MAP.get(native or "", JobStatus.PROCESSING)


class HeyGenAvatarProvider(AvatarProvider):
    """HeyGen avatar video provider.

    Renders are queued on HeyGen's side; ``poll`` reads
    ``/v1/video_status.get`` until the video is completed or failed.
    """

    key_setting = "HEYGEN_API_KEY"

    def __init__(
        self,
        api_key: str | None,
        http_client: httpx.AsyncClient,
        base_url: str = "https://api.heygen.com",
    ) -> None:
        super().__init__(api_key, http_client)
        self.base_url = base_url

    @property
    def name(self) -> str:
        return "heygen"

    def build_payload(self, request: AvatarRequest) -> dict:
        return {
            "video_inputs": [
                {
                    "character": {
                        "type": "avatar",
                        "avatar_id": request.avatar_id,
                        "avatar_style": "normal",
                    },
                    "voice": {
                        "type": "text",
                        "input_text": request.text,
                        "voice_id": request.voice_id,
                        "speed": 1.0,
                    },
                    "background": {
                        "type": "color",
                        "value": BACKGROUND_COLOR,
                    },
                }
            ],
            "dimension": DIMENSIONS[request.dimension],
            "aspect_ratio": request.dimension,
        }

    async def submit(self, request: AvatarRequest) -> JobSubmission:
        """Submit an avatar video render."""
        api_key = self.require_api_key()

        logger.info(
            "heygen_generation_started",
            text_length=len(request.text),
            avatar_id=request.avatar_id,
            dimension=request.dimension,
        )

        response = await self.http_client.post(
            f"{self.base_url}/v2/video/generate",
            headers={"X-Api-Key": api_key, "Content-Type": "application/json"},
            json=self.build_payload(request),
        )
        self.check_response(response)
        data = response.json().get("data") or {}

        video_id = data.get("video_id")
        if not video_id:
            raise ProviderHTTPError(self.name, response.status_code, "No video ID returned from HeyGen")

        logger.info("heygen_video_submitted", video_id=video_id)

        return JobSubmission(job_id=video_id, status=JobStatus.PENDING, cost=self.estimate_cost())

    async def poll(self, job_id: str) -> JobPollResult:
        """Fetch a HeyGen video status and normalize it."""
        api_key = self.require_api_key()

        response = await self.http_client.get(
            f"{self.base_url}/v1/video_status.get",
            params={"video_id": job_id},
            headers={"X-Api-Key": api_key},
        )
        if response.status_code == 404:
            raise JobNotFoundError(f"HeyGen video {job_id} not found")
        self.check_response(response)
        data = response.json().get("data") or {}

        native_status = data.get("status")
        status = normalize_status(native_status)

        logger.debug(
            "heygen_poll_status",
            video_id=job_id,
            native_status=native_status,
            status=status,
        )

        return JobPollResult(status=status, artifact_url=data.get("video_url") or None)
