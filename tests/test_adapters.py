"""Tests for provider adapters against a mocked HTTP transport."""

import json

import httpx
import pytest

from contentforge.adapters.avatar import AvatarRequest, HeyGenAvatarProvider, StubAvatarProvider
from contentforge.adapters.avatar import heygen
from contentforge.adapters.base import is_usable_key
from contentforge.adapters.image import DalleImageProvider, ImageRequest
from contentforge.adapters.text import OpenAITextProvider, TextRequest
from contentforge.adapters.video import RunwayVideoProvider, StubVideoProvider, VideoRequest
from contentforge.adapters.video import runway
from contentforge.adapters.voice import ElevenLabsVoiceProvider, StubVoiceProvider, VoiceRequest
from contentforge.domain.enums import JobStatus
from contentforge.domain.errors import (
    ContentPolicyError,
    JobNotFoundError,
    ProviderConfigError,
    ProviderHTTPError,
    RateLimitError,
    ValidationError,
)
from tests.conftest import FakeProviderAPI

VIDEO_REQUEST = VideoRequest(
    prompt="A drone shot over a misty pine forest at sunrise",
    model="gen3a_turbo",
    ratio="1280:720",
    duration=10,
)
AVATAR_REQUEST = AvatarRequest(
    text="Hi team, here is this week's roadmap update.",
    avatar_id="Anna_public_3_20240108",
    voice_id="1bd001e7e50f421d891986aad5158bc8",
    dimension="9:16",
)


class TestCredentials:
    @pytest.mark.parametrize(
        "key, usable",
        [
            (None, False),
            ("", False),
            ("   ", False),
            ("sk-placeholder", False),
            ("your-PLACEHOLDER-key", False),
            ("sk-live-123", True),
        ],
    )
    def test_is_usable_key(self, key: str | None, usable: bool) -> None:
        assert is_usable_key(key) is usable

    @pytest.mark.asyncio
    async def test_placeholder_key_fails_before_network(
        self, provider_api: FakeProviderAPI, http_client: httpx.AsyncClient
    ) -> None:
        provider = RunwayVideoProvider("placeholder", http_client)

        with pytest.raises(ProviderConfigError, match="RUNWAY_API_KEY is not configured"):
            await provider.submit(VIDEO_REQUEST)
        assert provider_api.requests == []

    def test_validation_runs_before_credential_check(self, http_client: httpx.AsyncClient) -> None:
        provider = RunwayVideoProvider(None, http_client)
        bad = VideoRequest(prompt="short", model="gen2", ratio="1:1", duration=7)

        with pytest.raises(ValidationError) as exc_info:
            provider.preflight(bad)

        field_errors = exc_info.value.details["fieldErrors"]
        assert set(field_errors) == {"prompt", "model", "ratio", "duration"}


class TestRunwayVideoProvider:
    @pytest.mark.parametrize(
        "native, expected",
        [
            ("PENDING", JobStatus.PENDING),
            ("THROTTLED", JobStatus.PENDING),
            ("RUNNING", JobStatus.PROCESSING),
            ("SUCCEEDED", JobStatus.COMPLETED),
            ("FAILED", JobStatus.FAILED),
            ("CANCELLED", JobStatus.FAILED),
            ("SOMETHING_NEW", JobStatus.PROCESSING),
            (None, JobStatus.PROCESSING),
        ],
    )
    def test_normalize_status(self, native: str | None, expected: JobStatus) -> None:
        assert runway.normalize_status(native) is expected

    @pytest.mark.asyncio
    async def test_submit_sends_task(
        self, provider_api: FakeProviderAPI, http_client: httpx.AsyncClient
    ) -> None:
        provider_api.respond("POST", "/v1/image_to_video", json={"id": "task-9"})
        provider = RunwayVideoProvider("rw-test", http_client)

        submission = await provider.submit(VIDEO_REQUEST)

        assert submission.job_id == "task-9"
        assert submission.status is JobStatus.PENDING
        assert submission.cost == pytest.approx(0.5)

        request = provider_api.requests[0]
        assert request.url.host == "api.dev.runwayml.com"
        assert request.headers["Authorization"] == "Bearer rw-test"
        assert request.headers["X-Runway-Version"] == runway.RUNWAY_API_VERSION
        assert json.loads(request.content) == {
            "promptText": VIDEO_REQUEST.prompt,
            "model": "gen3a_turbo",
            "ratio": "1280:720",
            "duration": 10,
        }

    @pytest.mark.asyncio
    async def test_poll_reads_output(
        self, provider_api: FakeProviderAPI, http_client: httpx.AsyncClient
    ) -> None:
        provider_api.respond(
            "GET",
            "/v1/tasks/task-9",
            json={"status": "SUCCEEDED", "output": ["https://cdn.runway.test/a.mp4"], "progress": 1},
        )
        provider = RunwayVideoProvider("rw-test", http_client)

        result = await provider.poll("task-9")

        assert result.status is JobStatus.COMPLETED
        assert result.artifact_url == "https://cdn.runway.test/a.mp4"
        assert result.progress == 1

    @pytest.mark.asyncio
    async def test_poll_unknown_task(self, http_client: httpx.AsyncClient) -> None:
        provider = RunwayVideoProvider("rw-test", http_client)

        with pytest.raises(JobNotFoundError):
            await provider.poll("missing")

    @pytest.mark.asyncio
    async def test_rate_limited_submit(
        self, provider_api: FakeProviderAPI, http_client: httpx.AsyncClient
    ) -> None:
        provider_api.respond("POST", "/v1/image_to_video", 429, text="Too Many Requests")
        provider = RunwayVideoProvider("rw-test", http_client)

        with pytest.raises(RateLimitError) as exc_info:
            await provider.submit(VIDEO_REQUEST)
        assert exc_info.value.body == "Too Many Requests"

    @pytest.mark.asyncio
    async def test_missing_task_id(
        self, provider_api: FakeProviderAPI, http_client: httpx.AsyncClient
    ) -> None:
        provider_api.respond("POST", "/v1/image_to_video", json={})
        provider = RunwayVideoProvider("rw-test", http_client)

        with pytest.raises(ProviderHTTPError):
            await provider.submit(VIDEO_REQUEST)


class TestHeyGenAvatarProvider:
    @pytest.mark.parametrize(
        "native, expected",
        [
            ("pending", JobStatus.PENDING),
            ("waiting", JobStatus.PENDING),
            ("processing", JobStatus.PROCESSING),
            ("completed", JobStatus.COMPLETED),
            ("failed", JobStatus.FAILED),
            ("", JobStatus.PROCESSING),
        ],
    )
    def test_normalize_status(self, native: str, expected: JobStatus) -> None:
        assert heygen.normalize_status(native) is expected

    @pytest.mark.asyncio
    async def test_submit_payload(
        self, provider_api: FakeProviderAPI, http_client: httpx.AsyncClient
    ) -> None:
        provider_api.respond("POST", "/v2/video/generate", json={"data": {"video_id": "vid-1"}})
        provider = HeyGenAvatarProvider("hg-test", http_client)

        submission = await provider.submit(AVATAR_REQUEST)

        assert submission.job_id == "vid-1"
        assert submission.cost == pytest.approx(2.4)

        request = provider_api.requests[0]
        assert request.headers["X-Api-Key"] == "hg-test"
        payload = json.loads(request.content)
        video_input = payload["video_inputs"][0]
        assert video_input["character"]["avatar_id"] == "Anna_public_3_20240108"
        assert video_input["voice"]["input_text"] == AVATAR_REQUEST.text
        assert payload["dimension"] == {"width": 720, "height": 1280}

    @pytest.mark.asyncio
    async def test_poll_params(
        self, provider_api: FakeProviderAPI, http_client: httpx.AsyncClient
    ) -> None:
        provider_api.respond(
            "GET",
            "/v1/video_status.get",
            json={"data": {"status": "completed", "video_url": "https://heygen.test/v.mp4"}},
        )
        provider = HeyGenAvatarProvider("hg-test", http_client)

        result = await provider.poll("vid-1")

        assert provider_api.requests[0].url.params["video_id"] == "vid-1"
        assert result.status is JobStatus.COMPLETED
        assert result.artifact_url == "https://heygen.test/v.mp4"
        assert result.progress is None

    def test_unknown_avatar_rejected(self, http_client: httpx.AsyncClient) -> None:
        provider = HeyGenAvatarProvider("hg-test", http_client)
        request = AvatarRequest(text=AVATAR_REQUEST.text, avatar_id="Nobody", voice_id=" ")

        with pytest.raises(ValidationError) as exc_info:
            provider.validate(request)
        assert set(exc_info.value.details["fieldErrors"]) == {"avatarId", "voiceId"}


class TestOpenAITextProvider:
    @pytest.mark.asyncio
    async def test_generates_text(
        self, provider_api: FakeProviderAPI, http_client: httpx.AsyncClient
    ) -> None:
        provider_api.respond(
            "POST",
            "/v1/chat/completions",
            json={
                "choices": [{"message": {"content": "Hello"}, "finish_reason": "stop"}],
                "usage": {"prompt_tokens": 1000, "completion_tokens": 1000, "total_tokens": 2000},
            },
        )
        provider = OpenAITextProvider("sk-test", http_client)
        request = TextRequest(
            prompt="Launch announcement for our new app",
            content_type="REEL",
            tone="inspirational",
            length="long",
        )

        result = await provider.submit(request)

        assert result.text == "Hello"
        assert result.tokens_used == 2000
        assert result.model == "gpt-4o"
        assert result.cost == pytest.approx(0.02)

        sent = json.loads(provider_api.requests[0].content)
        assert sent["max_tokens"] == 3000
        system, user = sent["messages"]
        assert system["role"] == "system"
        assert "motivating" in system["content"]
        assert "short-form video reel" in user["content"]
        assert "approximately 1000 words" in user["content"]

    @pytest.mark.asyncio
    async def test_server_error_classified(
        self, provider_api: FakeProviderAPI, http_client: httpx.AsyncClient
    ) -> None:
        provider_api.respond("POST", "/v1/chat/completions", 503, text="upstream down")
        provider = OpenAITextProvider("sk-test", http_client)
        request = TextRequest(
            prompt="Launch announcement for our new app",
            content_type="POST",
            tone="casual",
            length="medium",
        )

        with pytest.raises(ProviderHTTPError) as exc_info:
            await provider.submit(request)
        assert not isinstance(exc_info.value, RateLimitError)
        assert exc_info.value.status_code == 503


class TestDalleImageProvider:
    @pytest.mark.parametrize(
        "quality, size, cost",
        [
            ("standard", "1024x1024", 0.04),
            ("standard", "1792x1024", 0.08),
            ("hd", "1024x1024", 0.08),
            ("hd", "1024x1792", 0.12),
        ],
    )
    def test_cost_table(self, quality: str, size: str, cost: float) -> None:
        assert DalleImageProvider.estimate_cost(quality, size) == pytest.approx(cost)

    @pytest.mark.asyncio
    async def test_generates_image(
        self, provider_api: FakeProviderAPI, http_client: httpx.AsyncClient
    ) -> None:
        provider_api.respond(
            "POST",
            "/v1/images/generations",
            json={"data": [{"url": "https://oaidalle.test/img.png", "revised_prompt": "A red bike"}]},
        )
        provider = DalleImageProvider("sk-test", http_client)

        result = await provider.submit(
            ImageRequest(prompt="A red bicycle", size="1792x1024", quality="hd", style="natural")
        )

        assert result.image_url == "https://oaidalle.test/img.png"
        assert result.revised_prompt == "A red bike"
        assert result.cost == pytest.approx(0.12)
        sent = json.loads(provider_api.requests[0].content)
        assert sent["model"] == "dall-e-3"
        assert sent["n"] == 1

    @pytest.mark.asyncio
    async def test_content_policy(
        self, provider_api: FakeProviderAPI, http_client: httpx.AsyncClient
    ) -> None:
        provider_api.respond(
            "POST",
            "/v1/images/generations",
            400,
            json={"error": {"code": "content_policy_violation", "message": "rejected"}},
        )
        provider = DalleImageProvider("sk-test", http_client)

        with pytest.raises(ContentPolicyError):
            await provider.submit(
                ImageRequest(prompt="Something odd", size="1024x1024", quality="standard", style="vivid")
            )

    @pytest.mark.asyncio
    async def test_missing_url(
        self, provider_api: FakeProviderAPI, http_client: httpx.AsyncClient
    ) -> None:
        provider_api.respond("POST", "/v1/images/generations", json={"data": []})
        provider = DalleImageProvider("sk-test", http_client)

        with pytest.raises(ProviderHTTPError, match="dalle3 API error"):
            await provider.submit(
                ImageRequest(prompt="A red bicycle", size="1024x1024", quality="standard", style="vivid")
            )


class TestElevenLabsVoiceProvider:
    @pytest.mark.asyncio
    async def test_synthesizes_audio(
        self, provider_api: FakeProviderAPI, http_client: httpx.AsyncClient
    ) -> None:
        provider_api.respond(
            "POST", "/v1/text-to-speech/21m00Tcm4TlvDq8ikWAM", content=b"ID3-audio-bytes"
        )
        provider = ElevenLabsVoiceProvider("el-test", http_client)
        text = "x" * 2000

        result = await provider.submit(VoiceRequest(text=text, voice_id="21m00Tcm4TlvDq8ikWAM"))

        assert result.audio_data == b"ID3-audio-bytes"
        assert result.duration_seconds == 14
        assert result.cost == pytest.approx(0.6)
        assert result.model_id == "eleven_multilingual_v2"

        request = provider_api.requests[0]
        assert request.headers["xi-api-key"] == "el-test"
        assert request.headers["Accept"] == "audio/mpeg"
        assert json.loads(request.content)["model_id"] == "eleven_multilingual_v2"

    @pytest.mark.asyncio
    async def test_stub_marker_audio(self) -> None:
        provider = StubVoiceProvider(None, None)  # type: ignore[arg-type]

        result = await provider.submit(
            VoiceRequest(text="Hello from the stub voice", voice_id="21m00Tcm4TlvDq8ikWAM")
        )

        assert result.audio_data == b"STUB_AUDIO_DATA_Hello from the stub voice"
        assert result.duration_seconds == 1


class TestStubJobProviders:
    @pytest.mark.asyncio
    async def test_stub_video_completes_after_polls(self) -> None:
        provider = StubVideoProvider(polls_until_complete=2)

        submission = await provider.submit(VIDEO_REQUEST)
        first = await provider.poll(submission.job_id)
        second = await provider.poll(submission.job_id)

        assert submission.job_id.startswith("stub-")
        assert first.status is JobStatus.PROCESSING
        assert first.progress == pytest.approx(0.5)
        assert second.status is JobStatus.COMPLETED
        assert second.artifact_url == f"https://example.com/stub/{submission.job_id}.mp4"

    @pytest.mark.asyncio
    async def test_stub_avatar_unknown_job(self) -> None:
        provider = StubAvatarProvider()

        with pytest.raises(JobNotFoundError):
            await provider.poll("nope")
