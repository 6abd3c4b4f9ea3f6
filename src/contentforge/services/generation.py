"""Generation job lifecycle: submission, polling and reconciliation.

Every submission follows the same order:

1. preflight (input validation and credential check, nothing persisted yet)
2. owner upsert, best effort
3. Content creation, committed before the provider is called
4. provider submit
5. Generation insert

Asynchronous modalities (video, avatar) store the provider job id as the
Generation result until a poll observes completion with an artifact URL.
"""

import base64
from collections.abc import Callable
from dataclasses import dataclass
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from contentforge.adapters.avatar import AvatarRequest
from contentforge.adapters.base import AsyncJobProvider, JobPollResult, JobSubmission
from contentforge.adapters.image import ImageRequest
from contentforge.adapters.registry import ProviderRegistry
from contentforge.adapters.text import TextRequest
from contentforge.adapters.video import VideoRequest
from contentforge.adapters.voice import VoiceRequest
from contentforge.db.models import ContentModel, GenerationModel, ProjectModel, UserModel
from contentforge.domain.enums import ContentStatus, ContentType, GenerationKind, JobStatus
from contentforge.domain.errors import NotFoundError, ValidationError
from contentforge.domain.models import (
    AuthenticatedUser,
    AvatarMetadata,
    GenerationMetadata,
    ImageMetadata,
    TextMetadata,
    VideoMetadata,
    VoiceMetadata,
    derive_title,
    describe_kind,
    dump_metadata,
    job_handle_of,
    load_metadata,
)
from contentforge.logging import get_logger
from contentforge.services.storage import BlobStorage

logger = get_logger(__name__)


@dataclass
class BestEffortResult:
    """Outcome of a side write that must not fail the primary operation."""

    operation: str
    ok: bool
    error: str | None = None


def best_effort(session: Session, operation: str, write: Callable[[], None]) -> BestEffortResult:
    """Run a database write whose failure is logged and discarded.

    The session is rolled back on failure so the caller can keep using it.
    """
    try:
        write()
    except SQLAlchemyError as e:
        session.rollback()
        logger.warning("best_effort_write_failed", operation=operation, error=str(e))
        return BestEffortResult(operation=operation, ok=False, error=str(e))
    return BestEffortResult(operation=operation, ok=True)


@dataclass
class TextOutcome:
    generation_id: UUID
    content_id: UUID
    text: str
    tokens_used: int
    cost: float


@dataclass
class ImageOutcome:
    generation_id: UUID
    content_id: UUID
    image_url: str
    revised_prompt: str
    cost: float


@dataclass
class VoiceOutcome:
    generation_id: UUID
    content_id: UUID
    audio_base64: str
    duration_seconds: int
    cost: float


@dataclass
class JobOutcome:
    """Handle returned for an asynchronous submission."""

    generation_id: UUID
    content_id: UUID
    job_id: str
    status: JobStatus
    cost: float


@dataclass
class PollOutcome:
    status: JobStatus
    video_url: str | None = None
    progress: float | None = None


AsyncMetadata = VideoMetadata | AvatarMetadata


class GenerationService:
    """Orchestrates provider calls and persistence for one request."""

    def __init__(self, session: Session, providers: ProviderRegistry, storage: BlobStorage) -> None:
        self.session = session
        self.providers = providers
        self.storage = storage

    # ------------------------------------------------------------------
    # Persistence helpers
    # ------------------------------------------------------------------

    def ensure_owner(self, user: AuthenticatedUser) -> BestEffortResult:
        """Idempotently mirror the caller into the users table."""

        def upsert() -> None:
            owner = self.session.get(UserModel, user.id)
            if owner is None:
                self.session.add(UserModel(id=user.id, email=user.email, name=user.name))
            else:
                owner.email = user.email
                if user.name:
                    owner.name = user.name
            self.session.commit()

        # Must not fail the generation: the row usually exists already
        return best_effort(self.session, "owner_upsert", upsert)

    def _check_project(self, user: AuthenticatedUser, project_id: UUID | None) -> None:
        if project_id is None:
            return
        project = self.session.get(ProjectModel, project_id)
        if project is None or project.user_id != user.id:
            raise NotFoundError("Project not found")

    def _owned_content(self, user: AuthenticatedUser, content_id: UUID) -> ContentModel:
        content = self.session.get(ContentModel, content_id)
        if content is None or content.user_id != user.id:
            raise NotFoundError("Content not found")
        return content

    def _open_content(
        self,
        user: AuthenticatedUser,
        kind: GenerationKind,
        prompt: str,
        project_id: UUID | None,
        content_type: ContentType | None = None,
    ) -> ContentModel:
        """Create and commit the draft Content a generation attaches to."""
        descriptor = describe_kind(kind)
        resolved_type = descriptor.content_type or content_type
        assert resolved_type is not None

        content = ContentModel(
            title=derive_title(descriptor.label, prompt),
            type=resolved_type.value,
            status=ContentStatus.DRAFT.value,
            user_id=user.id,
            project_id=project_id,
        )
        self.session.add(content)
        self.session.commit()
        self.session.refresh(content)

        logger.info("content_created", content_id=str(content.id), kind=kind.value, user_id=user.id)
        return content

    def _record_generation(
        self,
        content: ContentModel,
        kind: GenerationKind,
        prompt: str,
        result: str,
        metadata: GenerationMetadata,
        cost: float,
    ) -> GenerationModel:
        generation = GenerationModel(
            kind=kind.value,
            prompt=prompt,
            result=result,
            metadata_=dump_metadata(metadata),
            cost=cost,
            content_id=content.id,
        )
        self.session.add(generation)
        self.session.commit()
        self.session.refresh(generation)

        logger.info(
            "generation_recorded",
            generation_id=str(generation.id),
            content_id=str(content.id),
            kind=kind.value,
            cost=cost,
        )
        return generation

    # ------------------------------------------------------------------
    # Synchronous modalities
    # ------------------------------------------------------------------

    async def submit_text(
        self,
        user: AuthenticatedUser,
        request: TextRequest,
        project_id: UUID | None = None,
        content_id: UUID | None = None,
    ) -> TextOutcome:
        """Generate text, optionally appending to an existing Content's history."""
        provider = self.providers.text
        provider.preflight(request)

        self.ensure_owner(user)
        if content_id is not None:
            content = self._owned_content(user, content_id)
        else:
            self._check_project(user, project_id)
            content = self._open_content(
                user,
                GenerationKind.TEXT,
                request.prompt,
                project_id,
                content_type=ContentType(request.content_type),
            )

        result = await provider.submit(request)

        metadata = TextMetadata(
            content_type=ContentType(request.content_type),
            tone=request.tone,
            length=request.length,
            tokens_used=result.tokens_used,
            model=result.model,
        )
        generation = self._record_generation(
            content, GenerationKind.TEXT, request.prompt, result.text, metadata, result.cost
        )
        return TextOutcome(
            generation_id=generation.id,
            content_id=content.id,
            text=result.text,
            tokens_used=result.tokens_used,
            cost=result.cost,
        )

    async def submit_image(
        self,
        user: AuthenticatedUser,
        request: ImageRequest,
        project_id: UUID | None = None,
    ) -> ImageOutcome:
        provider = self.providers.image
        provider.preflight(request)

        self.ensure_owner(user)
        self._check_project(user, project_id)
        content = self._open_content(user, GenerationKind.IMAGE, request.prompt, project_id)

        result = await provider.submit(request)

        metadata = ImageMetadata(
            size=request.size,
            quality=request.quality,
            style=request.style,
            revised_prompt=result.revised_prompt,
        )
        generation = self._record_generation(
            content, GenerationKind.IMAGE, request.prompt, result.image_url, metadata, result.cost
        )
        return ImageOutcome(
            generation_id=generation.id,
            content_id=content.id,
            image_url=result.image_url,
            revised_prompt=result.revised_prompt,
            cost=result.cost,
        )

    async def submit_voice(
        self,
        user: AuthenticatedUser,
        request: VoiceRequest,
        project_id: UUID | None = None,
    ) -> VoiceOutcome:
        """Synthesize speech and persist it to blob storage when available.

        The stored result is the blob URL, or an inline data URI when the upload
        is unavailable. The response always carries the raw base64 audio.
        """
        provider = self.providers.voice
        provider.preflight(request)

        self.ensure_owner(user)
        self._check_project(user, project_id)
        content = self._open_content(user, GenerationKind.VOICE, request.text, project_id)

        result = await provider.submit(request)

        # Upload failure falls back to inline data and must not fail the request
        artifact = await self.storage.persist_audio(result.audio_data)

        metadata = VoiceMetadata(
            voice_id=request.voice_id,
            model_id=result.model_id,
            duration_seconds=result.duration_seconds,
            blob_stored=artifact.stored,
        )
        generation = self._record_generation(
            content, GenerationKind.VOICE, request.text, artifact.reference, metadata, result.cost
        )
        return VoiceOutcome(
            generation_id=generation.id,
            content_id=content.id,
            audio_base64=base64.b64encode(result.audio_data).decode("ascii"),
            duration_seconds=result.duration_seconds,
            cost=result.cost,
        )

    # ------------------------------------------------------------------
    # Asynchronous modalities
    # ------------------------------------------------------------------

    async def submit_video(
        self,
        user: AuthenticatedUser,
        request: VideoRequest,
        project_id: UUID | None = None,
    ) -> JobOutcome:
        provider = self.providers.video
        provider.preflight(request)

        self.ensure_owner(user)
        self._check_project(user, project_id)
        content = self._open_content(user, GenerationKind.VIDEO, request.prompt, project_id)

        submission = await provider.submit(request)

        metadata = VideoMetadata(
            model=request.model,
            ratio=request.ratio,
            duration=request.duration,
            task_id=submission.job_id,
            status=submission.status,
        )
        return self._record_job(content, GenerationKind.VIDEO, request.prompt, submission, metadata)

    async def submit_avatar(
        self,
        user: AuthenticatedUser,
        request: AvatarRequest,
        project_id: UUID | None = None,
    ) -> JobOutcome:
        provider = self.providers.avatar
        provider.preflight(request)

        self.ensure_owner(user)
        self._check_project(user, project_id)
        content = self._open_content(user, GenerationKind.AVATAR, request.text, project_id)

        submission = await provider.submit(request)

        metadata = AvatarMetadata(
            avatar_id=request.avatar_id,
            voice_id=request.voice_id,
            dimension=request.dimension,
            video_id=submission.job_id,
            status=submission.status,
        )
        return self._record_job(content, GenerationKind.AVATAR, request.text, submission, metadata)

    def _record_job(
        self,
        content: ContentModel,
        kind: GenerationKind,
        prompt: str,
        submission: JobSubmission,
        metadata: AsyncMetadata,
    ) -> JobOutcome:
        # The job id is the result until a poll observes completion
        generation = self._record_generation(
            content, kind, prompt, submission.job_id, metadata, submission.cost
        )
        return JobOutcome(
            generation_id=generation.id,
            content_id=content.id,
            job_id=submission.job_id,
            status=submission.status,
            cost=submission.cost,
        )

    async def poll_video(
        self,
        user: AuthenticatedUser,
        task_id: str,
        generation_id: UUID | None = None,
    ) -> PollOutcome:
        """Poll a video task and reconcile its Generation on completion."""
        result = await self._poll(
            user, self.providers.video, GenerationKind.VIDEO, task_id, generation_id
        )
        return PollOutcome(status=result.status, video_url=result.artifact_url, progress=result.progress)

    async def poll_avatar(
        self,
        user: AuthenticatedUser,
        video_id: str,
        generation_id: UUID | None = None,
    ) -> PollOutcome:
        """Poll an avatar render and reconcile its Generation on completion."""
        result = await self._poll(
            user, self.providers.avatar, GenerationKind.AVATAR, video_id, generation_id
        )
        return PollOutcome(status=result.status, video_url=result.artifact_url)

    async def _poll(
        self,
        user: AuthenticatedUser,
        provider: AsyncJobProvider,
        kind: GenerationKind,
        job_id: str,
        generation_id: UUID | None,
    ) -> JobPollResult:
        provider.require_api_key()
        generation = None
        if generation_id is not None:
            generation = self.tracked_generation(user, kind, job_id, generation_id)

        result = await provider.poll(job_id)

        logger.debug(
            "job_poll_status",
            kind=kind.value,
            job_id=job_id,
            status=result.status.value,
            progress=result.progress,
        )

        if generation is not None:
            self.reconcile(generation, result)
        return result

    def tracked_generation(
        self,
        user: AuthenticatedUser,
        kind: GenerationKind,
        job_id: str,
        generation_id: UUID,
    ) -> GenerationModel:
        """Load the caller's Generation for a job, checking that the two agree."""
        generation = self.session.scalar(
            select(GenerationModel)
            .join(ContentModel, GenerationModel.content_id == ContentModel.id)
            .where(GenerationModel.id == generation_id, ContentModel.user_id == user.id)
        )
        if generation is None:
            raise NotFoundError("Generation not found")

        handle = job_handle_of(load_metadata(generation.metadata_), str(generation.id))
        if generation.kind != kind.value or handle is None or handle.job_id != job_id:
            raise ValidationError(
                "Job id does not match generation",
                details={"fieldErrors": {"generationId": [f"Not a {kind.value.lower()} job for {job_id}"]}},
            )
        return generation

    def reconcile(self, generation: GenerationModel, result: JobPollResult) -> bool:
        """Fold a terminal poll result into the stored Generation.

        Returns True when a write happened. Repeated polls of a finished job are
        reads only.
        """
        metadata = load_metadata(generation.metadata_)
        if not isinstance(metadata, (VideoMetadata, AvatarMetadata)):
            return False

        match result.status:
            case JobStatus.COMPLETED if result.artifact_url:
                if generation.result == result.artifact_url and metadata.status == JobStatus.COMPLETED:
                    return False
                generation.result = result.artifact_url
                updated = metadata.model_copy(
                    update={"status": JobStatus.COMPLETED, "video_url": result.artifact_url}
                )
            case JobStatus.FAILED:
                if metadata.status == JobStatus.FAILED:
                    return False
                updated = metadata.model_copy(update={"status": JobStatus.FAILED})
            case _:
                return False

        generation.metadata_ = dump_metadata(updated)
        self.session.commit()

        logger.info(
            "generation_reconciled",
            generation_id=str(generation.id),
            kind=generation.kind,
            status=result.status.value,
        )
        return True
