"""Video generation adapters."""

from contentforge.adapters.video.base import VideoProvider, VideoRequest
from contentforge.adapters.video.runway import RunwayVideoProvider
from contentforge.adapters.video.stub import StubVideoProvider

__all__ = [
    "VideoProvider",
    "VideoRequest",
    "RunwayVideoProvider",
    "StubVideoProvider",
]
