"""Voice generation adapters."""

from contentforge.adapters.voice.base import VoiceProvider, VoiceRequest, VoiceResult
from contentforge.adapters.voice.elevenlabs import ElevenLabsVoiceProvider
from contentforge.adapters.voice.stub import StubVoiceProvider

__all__ = [
    "VoiceProvider",
    "VoiceRequest",
    "VoiceResult",
    "ElevenLabsVoiceProvider",
    "StubVoiceProvider",
]
