"""OpenAI DALL-E 3 image generation provider."""

import httpx

from contentforge.adapters.image.base import ImageProvider, ImageRequest, ImageResult
from contentforge.domain.errors import ContentPolicyError, ProviderHTTPError
from contentforge.logging import get_logger

logger = get_logger(__name__)


class DalleImageProvider(ImageProvider):
    """DALL-E 3 image generation via OpenAI API.

    Cost: $0.04-$0.08 per image (standard) or $0.08-$0.12 per image (HD),
    depending on size.
    """

    key_setting = "OPENAI_API_KEY"

    def __init__(
        self,
        api_key: str | None,
        http_client: httpx.AsyncClient,
        model: str = "dall-e-3",
        base_url: str = "https://api.openai.com/v1",
    ) -> None:
        super().__init__(api_key, http_client)
        self.model = model
        self.base_url = base_url

    @property
    def name(self) -> str:
        return "dalle3"

    def check_response(self, response: httpx.Response) -> None:
        """Surface content policy rejections as their own classification."""
        if response.status_code == 400:
            try:
                error = response.json().get("error") or {}
            except ValueError:
                error = {}
            if error.get("code") == "content_policy_violation":
                logger.warning("dalle_content_policy_violation", message=error.get("message"))
                raise ContentPolicyError(self.name, response.status_code, response.text)
        super().check_response(response)

    async def submit(self, request: ImageRequest) -> ImageResult:
        """Generate an image using DALL-E 3.

        Args:
            request: Image generation request

        Returns:
            ImageResult with image URL and the prompt DALL-E actually used
        """
        api_key = self.require_api_key()

        logger.info(
            "dalle_generation_started",
            prompt_length=len(request.prompt),
            size=request.size,
            quality=request.quality,
            model=self.model,
        )

        response = await self.http_client.post(
            f"{self.base_url}/images/generations",
            headers={
                "Authorization": f"Bearer {api_key}",
                "Content-Type": "application/json",
            },
            json={
                "model": self.model,
                "prompt": request.prompt,
                "n": 1,
                "size": request.size,
                "quality": request.quality,
                "style": request.style,
            },
        )
        self.check_response(response)
        data = response.json()

        images = data.get("data") or [{}]
        image_url = images[0].get("url")
        if not image_url:
            raise ProviderHTTPError(self.name, response.status_code, "No image URL returned from DALL-E 3")

        revised_prompt = images[0].get("revised_prompt") or request.prompt

        logger.info(
            "dalle_generation_completed",
            image_url_length=len(image_url),
            revised_prompt_length=len(revised_prompt),
        )

        return ImageResult(
            image_url=image_url,
            revised_prompt=revised_prompt,
            cost=self.estimate_cost(request.quality, request.size),
        )
