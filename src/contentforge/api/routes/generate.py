"""Generation endpoints for every modality."""

from typing import Annotated, Literal
from uuid import UUID

from fastapi import APIRouter, Query
from pydantic import Field

from contentforge.adapters.avatar import AvatarRequest
from contentforge.adapters.avatar.base import DEFAULT_DIMENSION
from contentforge.adapters.image import ImageRequest
from contentforge.adapters.text import TextRequest
from contentforge.adapters.video import VideoRequest
from contentforge.adapters.voice import VoiceRequest
from contentforge.api.deps import CurrentUserDep, GenerationServiceDep
from contentforge.api.schemas import CamelModel
from contentforge.domain.enums import ContentType, JobStatus, TextLength, Tone
from contentforge.logging import get_logger

router = APIRouter(prefix="/generate", tags=["Generate"])
logger = get_logger(__name__)


# =============================================================================
# Request bodies
# =============================================================================


class TextGenerationBody(CamelModel):
    prompt: str = Field(..., min_length=10, max_length=2000)
    content_type: ContentType
    tone: Tone
    length: TextLength
    project_id: UUID | None = None
    content_id: UUID | None = None


class ImageGenerationBody(CamelModel):
    prompt: str = Field(..., min_length=5, max_length=4000)
    size: Literal["1024x1024", "1792x1024", "1024x1792"] = "1024x1024"
    quality: Literal["standard", "hd"] = "standard"
    style: Literal["vivid", "natural"] = "vivid"
    project_id: UUID | None = None


class VoiceGenerationBody(CamelModel):
    text: str = Field(..., min_length=10, max_length=5000)
    voice_id: str
    model_id: str | None = None
    project_id: UUID | None = None


class VideoGenerationBody(CamelModel):
    prompt: str = Field(..., min_length=10, max_length=2000)
    model: Literal["gen3a_turbo", "gen4_turbo"] = "gen3a_turbo"
    ratio: Literal["1280:720", "720:1280", "1104:832", "832:1104"] = "1280:720"
    duration: Literal[5, 10] = 5
    project_id: UUID | None = None


class AvatarGenerationBody(CamelModel):
    text: str = Field(..., min_length=10, max_length=3000)
    avatar_id: str
    voice_id: str = Field(..., min_length=1)
    dimension: Literal["16:9", "9:16", "1:1"] = DEFAULT_DIMENSION
    project_id: UUID | None = None


# =============================================================================
# Responses
# =============================================================================


class TextGenerationResponse(CamelModel):
    generation_id: UUID
    content_id: UUID
    result: str
    tokens_used: int
    cost: float


class ImageGenerationResponse(CamelModel):
    generation_id: UUID
    content_id: UUID
    image_url: str
    revised_prompt: str
    cost: float


class VoiceGenerationResponse(CamelModel):
    generation_id: UUID
    content_id: UUID
    audio_base64: str
    duration_seconds: int
    cost: float


class VideoJobResponse(CamelModel):
    generation_id: UUID
    content_id: UUID
    task_id: str
    status: JobStatus
    cost: float


class AvatarJobResponse(CamelModel):
    generation_id: UUID
    content_id: UUID
    video_id: str
    status: JobStatus
    cost: float


class PollResponse(CamelModel):
    status: JobStatus
    video_url: str | None = None
    progress: float | None = None


# =============================================================================
# Synchronous modalities
# =============================================================================


@router.post(
    "/text",
    response_model=TextGenerationResponse,
    summary="Generate text",
    description="Generate written content. Pass contentId to add a new version to existing content.",
)
async def generate_text(
    body: TextGenerationBody,
    user: CurrentUserDep,
    service: GenerationServiceDep,
) -> TextGenerationResponse:
    logger.info("generate_text_requested", user_id=user.id, content_type=body.content_type.value)

    outcome = await service.submit_text(
        user,
        TextRequest(
            prompt=body.prompt,
            content_type=body.content_type.value,
            tone=body.tone.value,
            length=body.length.value,
        ),
        project_id=body.project_id,
        content_id=body.content_id,
    )
    return TextGenerationResponse(
        generation_id=outcome.generation_id,
        content_id=outcome.content_id,
        result=outcome.text,
        tokens_used=outcome.tokens_used,
        cost=outcome.cost,
    )


@router.post("/image", response_model=ImageGenerationResponse, summary="Generate image")
async def generate_image(
    body: ImageGenerationBody,
    user: CurrentUserDep,
    service: GenerationServiceDep,
) -> ImageGenerationResponse:
    logger.info("generate_image_requested", user_id=user.id, size=body.size, quality=body.quality)

    outcome = await service.submit_image(
        user,
        ImageRequest(prompt=body.prompt, size=body.size, quality=body.quality, style=body.style),
        project_id=body.project_id,
    )
    return ImageGenerationResponse(
        generation_id=outcome.generation_id,
        content_id=outcome.content_id,
        image_url=outcome.image_url,
        revised_prompt=outcome.revised_prompt,
        cost=outcome.cost,
    )


@router.post(
    "/voice",
    response_model=VoiceGenerationResponse,
    summary="Generate voice",
    description="Synthesize speech. The audio is returned inline as base64.",
)
async def generate_voice(
    body: VoiceGenerationBody,
    user: CurrentUserDep,
    service: GenerationServiceDep,
) -> VoiceGenerationResponse:
    logger.info("generate_voice_requested", user_id=user.id, voice_id=body.voice_id)

    outcome = await service.submit_voice(
        user,
        VoiceRequest(text=body.text, voice_id=body.voice_id, model_id=body.model_id),
        project_id=body.project_id,
    )
    return VoiceGenerationResponse(
        generation_id=outcome.generation_id,
        content_id=outcome.content_id,
        audio_base64=outcome.audio_base64,
        duration_seconds=outcome.duration_seconds,
        cost=outcome.cost,
    )


# =============================================================================
# Asynchronous modalities
# =============================================================================


@router.post(
    "/video",
    response_model=VideoJobResponse,
    summary="Submit video job",
    description="Queue a video generation task. Poll /generate/video/poll until it completes.",
)
async def generate_video(
    body: VideoGenerationBody,
    user: CurrentUserDep,
    service: GenerationServiceDep,
) -> VideoJobResponse:
    logger.info("generate_video_requested", user_id=user.id, model=body.model, duration=body.duration)

    outcome = await service.submit_video(
        user,
        VideoRequest(prompt=body.prompt, model=body.model, ratio=body.ratio, duration=body.duration),
        project_id=body.project_id,
    )
    return VideoJobResponse(
        generation_id=outcome.generation_id,
        content_id=outcome.content_id,
        task_id=outcome.job_id,
        status=outcome.status,
        cost=outcome.cost,
    )


@router.get(
    "/video/poll",
    response_model=PollResponse,
    response_model_exclude_none=True,
    summary="Poll video job",
)
async def poll_video(
    user: CurrentUserDep,
    service: GenerationServiceDep,
    task_id: Annotated[str, Query(alias="taskId", min_length=1)],
    generation_id: Annotated[UUID | None, Query(alias="generationId")] = None,
) -> PollResponse:
    outcome = await service.poll_video(user, task_id, generation_id)
    return PollResponse(status=outcome.status, video_url=outcome.video_url, progress=outcome.progress)


@router.post(
    "/avatar",
    response_model=AvatarJobResponse,
    summary="Submit avatar job",
    description="Queue a talking-avatar render. Poll /generate/avatar/poll until it completes.",
)
async def generate_avatar(
    body: AvatarGenerationBody,
    user: CurrentUserDep,
    service: GenerationServiceDep,
) -> AvatarJobResponse:
    logger.info("generate_avatar_requested", user_id=user.id, avatar_id=body.avatar_id)

    outcome = await service.submit_avatar(
        user,
        AvatarRequest(
            text=body.text,
            avatar_id=body.avatar_id,
            voice_id=body.voice_id,
            dimension=body.dimension,
        ),
        project_id=body.project_id,
    )
    return AvatarJobResponse(
        generation_id=outcome.generation_id,
        content_id=outcome.content_id,
        video_id=outcome.job_id,
        status=outcome.status,
        cost=outcome.cost,
    )


@router.get(
    "/avatar/poll",
    response_model=PollResponse,
    response_model_exclude_none=True,
    summary="Poll avatar job",
)
async def poll_avatar(
    user: CurrentUserDep,
    service: GenerationServiceDep,
    video_id: Annotated[str, Query(alias="videoId", min_length=1)],
    generation_id: Annotated[UUID | None, Query(alias="generationId")] = None,
) -> PollResponse:
    outcome = await service.poll_avatar(user, video_id, generation_id)
    return PollResponse(status=outcome.status, video_url=outcome.video_url)
