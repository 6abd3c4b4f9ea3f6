"""Dashboard endpoints for per-user library totals."""

from datetime import datetime
from uuid import UUID

from fastapi import APIRouter

from contentforge.api.deps import CurrentUserDep, LibraryServiceDep
from contentforge.api.schemas import CamelModel
from contentforge.domain.enums import ContentStatus, ContentType, GenerationKind

router = APIRouter(prefix="/dashboard", tags=["Dashboard"])


# =============================================================================
# Response Models
# =============================================================================


class RecentContent(CamelModel):
    """Recently created content."""

    id: UUID
    title: str
    type: ContentType
    status: ContentStatus
    created_at: datetime
    generation_count: int
    latest_kind: GenerationKind | None = None


class DashboardStatsResponse(CamelModel):
    """Aggregate dashboard statistics."""

    content_count: int
    project_count: int
    generation_count: int
    # Sum of the stored cost estimates, in USD
    total_cost: float
    recent: list[RecentContent]


# =============================================================================
# Endpoints
# =============================================================================


@router.get(
    "/stats",
    response_model=DashboardStatsResponse,
    summary="Get dashboard stats",
    description="Content, project and generation counts for the caller, total estimated spend and recent content.",
)
async def get_dashboard_stats(user: CurrentUserDep, library: LibraryServiceDep) -> DashboardStatsResponse:
    stats = library.dashboard_stats(user)
    return DashboardStatsResponse(
        content_count=stats.content_count,
        project_count=stats.project_count,
        generation_count=stats.generation_count,
        total_cost=stats.total_cost,
        recent=[
            RecentContent(
                id=item.content.id,
                title=item.content.title,
                type=ContentType(item.content.type),
                status=ContentStatus(item.content.status),
                created_at=item.content.created_at,
                generation_count=len(item.content.generations),
                latest_kind=GenerationKind(item.latest.kind) if item.latest else None,
            )
            for item in stats.recent
        ],
    )
