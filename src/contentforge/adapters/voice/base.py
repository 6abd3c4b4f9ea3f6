"""Base interface for voice (text-to-speech) providers."""

import math
from abc import abstractmethod
from dataclasses import dataclass

from contentforge.adapters.base import FieldErrors, ProviderAdapter

TEXT_MIN_LENGTH = 10
TEXT_MAX_LENGTH = 5000
DEFAULT_MODEL_ID = "eleven_multilingual_v2"

# Speech rate used to estimate duration
CHARS_PER_SECOND = 150
COST_PER_1K_CHARS = 0.3

# Voice IDs offered in the dashboard
VOICES: dict[str, str] = {
    "21m00Tcm4TlvDq8ikWAM": "Rachel",  # calm, professional
    "AZnzlk1XvdvUeBnXmlld": "Domi",  # strong, confident
    "EXAVITQu4vr4xnSDxMaL": "Bella",  # soft, pleasant
    "ErXwobaYiN019PkySvjV": "Antoni",  # well-rounded
    "MF3mGyEYCl7XYWbV9V6O": "Elli",  # young, energetic
    "TxGEqnHWrfWFTfGW9XjX": "Josh",  # deep, warm
    "VR6AewLTigWG4xSOukaG": "Arnold",  # crisp, authoritative
    "pNInz6obpgDQGcFmaJgB": "Adam",  # deep, narrative
}


@dataclass
class VoiceRequest:
    """Request for voice generation."""

    text: str
    voice_id: str
    model_id: str | None = None


@dataclass
class VoiceResult:
    """Result from voice generation."""

    audio_data: bytes
    duration_seconds: int
    model_id: str
    cost: float


class VoiceProvider(ProviderAdapter):
    """Abstract base class for voice providers.

    Implementations:
    - ElevenLabsVoiceProvider: ElevenLabs text-to-speech API
    - StubVoiceProvider: Returns marker bytes for local development
    """

    def validate(self, request: VoiceRequest) -> None:
        errors = FieldErrors()
        errors.check_length("text", request.text, TEXT_MIN_LENGTH, TEXT_MAX_LENGTH)
        errors.check_choice("voiceId", request.voice_id, VOICES)
        errors.raise_if_any()

    @staticmethod
    def estimate_cost(text: str) -> float:
        """ElevenLabs Creator plan: ~$0.30 per 1000 characters."""
        return (len(text) / 1000) * COST_PER_1K_CHARS

    @staticmethod
    def estimate_duration(text: str) -> int:
        return math.ceil(len(text) / CHARS_PER_SECOND)

    @abstractmethod
    async def submit(self, request: VoiceRequest) -> VoiceResult:
        """Synthesize speech and return the raw audio bytes."""
        ...
