"""Stub voice provider for local development."""

from contentforge.adapters.voice.base import (
    DEFAULT_MODEL_ID,
    VoiceProvider,
    VoiceRequest,
    VoiceResult,
)
from contentforge.logging import get_logger

logger = get_logger(__name__)


class StubVoiceProvider(VoiceProvider):
    """Stub provider that simulates speech synthesis without external calls."""

    key_setting = "ELEVENLABS_API_KEY"

    @property
    def name(self) -> str:
        return "stub"

    def require_api_key(self) -> str:
        return "stub"

    async def submit(self, request: VoiceRequest) -> VoiceResult:
        fake_audio = b"STUB_AUDIO_DATA_" + request.text.encode()[:100]

        logger.info("stub_voice_generation", audio_size=len(fake_audio))

        return VoiceResult(
            audio_data=fake_audio,
            duration_seconds=self.estimate_duration(request.text),
            model_id=request.model_id or DEFAULT_MODEL_ID,
            cost=self.estimate_cost(request.text),
        )
