"""Adapters for external generative providers."""

from contentforge.adapters.avatar.base import AvatarProvider
from contentforge.adapters.base import AsyncJobProvider, JobPollResult, JobSubmission, ProviderAdapter
from contentforge.adapters.image.base import ImageProvider
from contentforge.adapters.registry import ProviderRegistry, build_providers
from contentforge.adapters.text.base import TextProvider
from contentforge.adapters.video.base import VideoProvider
from contentforge.adapters.voice.base import VoiceProvider

__all__ = [
    "AsyncJobProvider",
    "AvatarProvider",
    "ImageProvider",
    "JobPollResult",
    "JobSubmission",
    "ProviderAdapter",
    "ProviderRegistry",
    "TextProvider",
    "VideoProvider",
    "VoiceProvider",
    "build_providers",
]
