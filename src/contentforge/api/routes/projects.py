"""Project management endpoints."""

from datetime import datetime
from uuid import UUID

from fastapi import APIRouter, status
from pydantic import Field

from contentforge.api.deps import CurrentUserDep, LibraryServiceDep
from contentforge.api.schemas import CamelModel
from contentforge.db.models import ProjectModel
from contentforge.logging import get_logger

router = APIRouter(prefix="/projects", tags=["Projects"])
logger = get_logger(__name__)


class CreateProjectRequest(CamelModel):
    """Request to create a project."""

    name: str = Field(..., min_length=1, max_length=100)
    description: str | None = Field(None, max_length=500)


class ProjectResponse(CamelModel):
    """Project response model."""

    id: UUID
    name: str
    description: str | None
    content_count: int = 0
    created_at: datetime


def _model_to_response(project: ProjectModel, content_count: int = 0) -> ProjectResponse:
    return ProjectResponse(
        id=project.id,
        name=project.name,
        description=project.description,
        content_count=content_count,
        created_at=project.created_at,
    )


@router.post(
    "",
    response_model=ProjectResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create project",
)
async def create_project(
    request: CreateProjectRequest,
    user: CurrentUserDep,
    library: LibraryServiceDep,
) -> ProjectResponse:
    """Create a new project owned by the caller."""
    logger.info("create_project", name=request.name, user_id=user.id)
    project = library.create_project(user, request.name, request.description)
    return _model_to_response(project)


@router.get(
    "",
    response_model=list[ProjectResponse],
    summary="List projects",
    description="List the caller's projects with the number of contents in each.",
)
async def list_projects(user: CurrentUserDep, library: LibraryServiceDep) -> list[ProjectResponse]:
    return [_model_to_response(s.project, s.content_count) for s in library.list_projects(user)]
