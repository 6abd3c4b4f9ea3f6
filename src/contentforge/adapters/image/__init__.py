"""Image generation adapters."""

from contentforge.adapters.image.base import ImageProvider, ImageRequest, ImageResult
from contentforge.adapters.image.openai_dalle import DalleImageProvider
from contentforge.adapters.image.stub import StubImageProvider

__all__ = [
    "ImageProvider",
    "ImageRequest",
    "ImageResult",
    "DalleImageProvider",
    "StubImageProvider",
]
