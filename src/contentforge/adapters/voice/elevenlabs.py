"""ElevenLabs voice provider implementation."""

import httpx

from contentforge.adapters.voice.base import (
    DEFAULT_MODEL_ID,
    VoiceProvider,
    VoiceRequest,
    VoiceResult,
)
from contentforge.logging import get_logger

logger = get_logger(__name__)


class ElevenLabsVoiceProvider(VoiceProvider):
    """ElevenLabs API provider for AI voice synthesis."""

    key_setting = "ELEVENLABS_API_KEY"

    def __init__(
        self,
        api_key: str | None,
        http_client: httpx.AsyncClient,
        base_url: str = "https://api.elevenlabs.io/v1",
    ) -> None:
        super().__init__(api_key, http_client)
        self.base_url = base_url

    @property
    def name(self) -> str:
        return "elevenlabs"

    async def submit(self, request: VoiceRequest) -> VoiceResult:
        """Generate speech using the ElevenLabs text-to-speech endpoint."""
        api_key = self.require_api_key()
        model_id = request.model_id or DEFAULT_MODEL_ID

        payload = {
            "text": request.text,
            "model_id": model_id,
            "voice_settings": {
                "stability": 0.5,
                "similarity_boost": 0.75,
                "style": 0.0,
                "use_speaker_boost": True,
            },
        }

        logger.info(
            "elevenlabs_generation_started",
            text_length=len(request.text),
            voice_id=request.voice_id,
            model=model_id,
        )

        response = await self.http_client.post(
            f"{self.base_url}/text-to-speech/{request.voice_id}",
            headers={
                "xi-api-key": api_key,
                "Content-Type": "application/json",
                "Accept": "audio/mpeg",
            },
            json=payload,
        )
        self.check_response(response)
        audio_data = response.content

        duration = self.estimate_duration(request.text)

        logger.info(
            "elevenlabs_generation_completed",
            audio_size=len(audio_data),
            estimated_duration=duration,
        )

        return VoiceResult(
            audio_data=audio_data,
            duration_seconds=duration,
            model_id=model_id,
            cost=self.estimate_cost(request.text),
        )

    async def health_check(self) -> bool:
        """Check if ElevenLabs API is accessible."""
        if not await super().health_check():
            return False

        try:
            response = await self.http_client.get(
                f"{self.base_url}/user",
                headers={"xi-api-key": self.api_key or ""},
            )
            return response.status_code == 200
        except httpx.HTTPError as e:
            logger.error("elevenlabs_health_check_failed", error=str(e))
            return False
