"""Client for the ContentForge API."""

from contentforge.client.api import ApiError, ContentForgeClient
from contentforge.client.polling import (
    AVATAR_POLICY,
    VIDEO_POLICY,
    LoopState,
    ModalityFlow,
    Notice,
    PollingLoop,
    PollPolicy,
    PollState,
    avatar_flow,
    video_flow,
)

__all__ = [
    "AVATAR_POLICY",
    "ApiError",
    "ContentForgeClient",
    "LoopState",
    "ModalityFlow",
    "Notice",
    "PollPolicy",
    "PollState",
    "PollingLoop",
    "VIDEO_POLICY",
    "avatar_flow",
    "video_flow",
]
