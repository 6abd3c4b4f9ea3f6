"""Base interface for image generation providers."""

from abc import abstractmethod
from dataclasses import dataclass

from contentforge.adapters.base import FieldErrors, ProviderAdapter

PROMPT_MIN_LENGTH = 5
PROMPT_MAX_LENGTH = 4000

IMAGE_SIZES = ("1024x1024", "1792x1024", "1024x1792")
IMAGE_QUALITIES = ("standard", "hd")
IMAGE_STYLES = ("vivid", "natural")

# DALL-E 3 price per image, keyed by (quality, size)
IMAGE_COST: dict[str, dict[str, float]] = {
    "standard": {
        "1024x1024": 0.04,
        "1792x1024": 0.08,
        "1024x1792": 0.08,
    },
    "hd": {
        "1024x1024": 0.08,
        "1792x1024": 0.12,
        "1024x1792": 0.12,
    },
}
DEFAULT_IMAGE_COST = 0.08


@dataclass
class ImageRequest:
    """Request for image generation."""

    prompt: str
    size: str
    quality: str
    style: str


@dataclass
class ImageResult:
    """Result from image generation."""

    image_url: str
    revised_prompt: str
    cost: float


class ImageProvider(ProviderAdapter):
    """Abstract base class for image generation providers.

    Implementations:
    - DalleImageProvider: DALL-E 3 via OpenAI API
    - StubImageProvider: Returns placeholder image URLs
    """

    def validate(self, request: ImageRequest) -> None:
        errors = FieldErrors()
        errors.check_length("prompt", request.prompt, PROMPT_MIN_LENGTH, PROMPT_MAX_LENGTH)
        errors.check_choice("size", request.size, IMAGE_SIZES)
        errors.check_choice("quality", request.quality, IMAGE_QUALITIES)
        errors.check_choice("style", request.style, IMAGE_STYLES)
        errors.raise_if_any()

    @staticmethod
    def estimate_cost(quality: str, size: str) -> float:
        return IMAGE_COST.get(quality, {}).get(size, DEFAULT_IMAGE_COST)

    @abstractmethod
    async def submit(self, request: ImageRequest) -> ImageResult:
        """Generate one image and return its URL."""
        ...
