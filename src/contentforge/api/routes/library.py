"""Content library endpoints."""

from datetime import datetime
from typing import Annotated, Any
from uuid import UUID

from fastapi import APIRouter, Query

from contentforge.api.deps import CurrentUserDep, LibraryServiceDep
from contentforge.api.schemas import CamelModel
from contentforge.db.models import GenerationModel
from contentforge.domain.enums import ContentStatus, ContentType, GenerationKind
from contentforge.domain.models import AvatarMetadata, VideoMetadata, dump_metadata, job_handle_of, load_metadata

router = APIRouter(prefix="/library", tags=["Library"])


class GenerationResponse(CamelModel):
    """A single generation with its typed metadata."""

    id: UUID
    content_id: UUID
    kind: GenerationKind
    prompt: str
    result: str | None
    metadata: dict[str, Any]
    cost: float
    created_at: datetime
    # Provider job id while an asynchronous job has not finished
    pending_job_id: str | None = None


class LibraryItemResponse(CamelModel):
    id: UUID
    title: str
    type: ContentType
    status: ContentStatus
    project_id: UUID | None
    created_at: datetime
    latest_generation: GenerationResponse | None = None


def _generation_to_response(generation: GenerationModel) -> GenerationResponse:
    metadata = load_metadata(generation.metadata_)

    pending_job_id = None
    if isinstance(metadata, (VideoMetadata, AvatarMetadata)) and not metadata.status.is_terminal:
        handle = job_handle_of(metadata, str(generation.id))
        pending_job_id = handle.job_id if handle else None

    return GenerationResponse(
        id=generation.id,
        content_id=generation.content_id,
        kind=GenerationKind(generation.kind),
        prompt=generation.prompt,
        result=generation.result,
        metadata=dump_metadata(metadata),
        cost=generation.cost,
        created_at=generation.created_at,
        pending_job_id=pending_job_id,
    )


@router.get(
    "",
    response_model=list[LibraryItemResponse],
    summary="List library",
    description="List the caller's content, newest first, each with its latest generation.",
)
async def list_library(
    user: CurrentUserDep,
    library: LibraryServiceDep,
    content_type: Annotated[ContentType | None, Query(alias="type")] = None,
    project_id: Annotated[UUID | None, Query(alias="projectId")] = None,
    limit: int = Query(default=50, ge=1, le=200),
    offset: int = Query(default=0, ge=0),
) -> list[LibraryItemResponse]:
    items = library.list_contents(user, content_type, project_id, limit=limit, offset=offset)
    return [
        LibraryItemResponse(
            id=item.content.id,
            title=item.content.title,
            type=ContentType(item.content.type),
            status=ContentStatus(item.content.status),
            project_id=item.content.project_id,
            created_at=item.content.created_at,
            latest_generation=_generation_to_response(item.latest) if item.latest else None,
        )
        for item in items
    ]


@router.get(
    "/generations/{generation_id}",
    response_model=GenerationResponse,
    summary="Get generation",
    description="Fetch one generation. Unfinished video and avatar jobs expose their provider job id.",
)
async def get_generation(
    generation_id: UUID,
    user: CurrentUserDep,
    library: LibraryServiceDep,
) -> GenerationResponse:
    return _generation_to_response(library.get_generation(user, generation_id))
