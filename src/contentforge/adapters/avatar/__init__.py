"""Talking-avatar adapters."""

from contentforge.adapters.avatar.base import AvatarProvider, AvatarRequest
from contentforge.adapters.avatar.heygen import HeyGenAvatarProvider
from contentforge.adapters.avatar.stub import StubAvatarProvider

__all__ = [
    "AvatarProvider",
    "AvatarRequest",
    "HeyGenAvatarProvider",
    "StubAvatarProvider",
]
