"""Stub image generation provider for local development."""

from uuid import uuid4

from contentforge.adapters.image.base import ImageProvider, ImageRequest, ImageResult
from contentforge.logging import get_logger

logger = get_logger(__name__)


class StubImageProvider(ImageProvider):
    """Returns a placeholder image URL without external calls."""

    key_setting = "OPENAI_API_KEY"

    @property
    def name(self) -> str:
        return "stub"

    def require_api_key(self) -> str:
        return "stub"

    async def submit(self, request: ImageRequest) -> ImageResult:
        width, height = request.size.split("x")
        image_url = f"https://placehold.co/{width}x{height}/png?id={uuid4().hex[:8]}"

        logger.info("stub_image_generation", size=request.size)

        return ImageResult(
            image_url=image_url,
            revised_prompt=request.prompt,
            cost=self.estimate_cost(request.quality, request.size),
        )
