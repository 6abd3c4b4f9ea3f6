"""Provider registry built once at process start.

Each adapter receives its credential and the shared ``httpx.AsyncClient``
explicitly, so request handlers never reach for global client state.
"""

from dataclasses import dataclass

import httpx

from contentforge.adapters.avatar import AvatarProvider, HeyGenAvatarProvider, StubAvatarProvider
from contentforge.adapters.image import DalleImageProvider, ImageProvider, StubImageProvider
from contentforge.adapters.text import OpenAITextProvider, StubTextProvider, TextProvider
from contentforge.adapters.video import RunwayVideoProvider, StubVideoProvider, VideoProvider
from contentforge.adapters.voice import ElevenLabsVoiceProvider, StubVoiceProvider, VoiceProvider
from contentforge.config import Settings
from contentforge.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class ProviderRegistry:
    """One configured adapter per modality."""

    text: TextProvider
    image: ImageProvider
    voice: VoiceProvider
    video: VideoProvider
    avatar: AvatarProvider

    async def health_check(self) -> dict[str, bool]:
        """Report which modalities have a usable provider configuration."""
        return {
            "text": await self.text.health_check(),
            "image": await self.image.health_check(),
            "voice": await self.voice.health_check(),
            "video": await self.video.health_check(),
            "avatar": await self.avatar.health_check(),
        }


def _is_stub(setting_name: str, value: str, real: str) -> bool:
    provider_name = value.lower()
    if provider_name == "stub":
        return True
    if provider_name != real:
        logger.warning("unknown_provider_setting", setting=setting_name, value=value, using=real)
    return False


def build_providers(settings: Settings, http_client: httpx.AsyncClient) -> ProviderRegistry:
    """Construct every adapter from validated settings."""
    text: TextProvider
    if _is_stub("text_provider", settings.text_provider, "openai"):
        text = StubTextProvider(None, http_client)
    else:
        text = OpenAITextProvider(settings.openai_api_key, http_client, model=settings.openai_model)

    image: ImageProvider
    if _is_stub("image_provider", settings.image_provider, "dalle"):
        image = StubImageProvider(None, http_client)
    else:
        image = DalleImageProvider(settings.openai_api_key, http_client)

    voice: VoiceProvider
    if _is_stub("voice_provider", settings.voice_provider, "elevenlabs"):
        voice = StubVoiceProvider(None, http_client)
    else:
        voice = ElevenLabsVoiceProvider(settings.elevenlabs_api_key, http_client)

    video: VideoProvider
    if _is_stub("video_provider", settings.video_provider, "runway"):
        video = StubVideoProvider(None, http_client)
    else:
        video = RunwayVideoProvider(settings.runway_api_key, http_client)

    avatar: AvatarProvider
    if _is_stub("avatar_provider", settings.avatar_provider, "heygen"):
        avatar = StubAvatarProvider(None, http_client)
    else:
        avatar = HeyGenAvatarProvider(settings.heygen_api_key, http_client)

    registry = ProviderRegistry(text=text, image=image, voice=voice, video=video, avatar=avatar)
    logger.info(
        "provider_registry_initialized",
        text=text.name,
        image=image.name,
        voice=voice.name,
        video=video.name,
        avatar=avatar.name,
    )
    return registry
